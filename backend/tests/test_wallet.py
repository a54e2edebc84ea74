import random
import threading

import pytest

from livematch.errors import InsufficientCoins, InvalidAmount, InvalidUser
from livematch.services import WalletStore


def test_create_user_defaults():
    wallet = WalletStore(initial_coins=1000)
    amit = wallet.create_user('Amit')
    anon = wallet.create_user()
    assert amit.coins == 1000
    assert amit.display_name == 'Amit'
    assert amit.id != anon.id
    assert anon.display_name == f"player_{anon.id}"


def test_debit_returns_new_balance():
    wallet = WalletStore(initial_coins=1000)
    user = wallet.create_user('Amit')
    assert wallet.debit(user.id, 20) == 980
    assert wallet.get_balance(user.id) == 980


def test_debit_more_than_balance_leaves_balance_untouched():
    wallet = WalletStore(initial_coins=100)
    user = wallet.create_user()
    with pytest.raises(InsufficientCoins) as info:
        wallet.debit(user.id, 150)
    assert info.value.coins == 100
    assert info.value.to_dict() == {'error': 'INSUFFICIENT_COINS', 'coins': 100}
    assert wallet.get_balance(user.id) == 100


@pytest.mark.parametrize('amount', [0, -5, True, 1.5, '10'])
def test_debit_rejects_bad_amounts(amount):
    wallet = WalletStore()
    user = wallet.create_user()
    with pytest.raises(InvalidAmount):
        wallet.debit(user.id, amount)
    assert wallet.get_balance(user.id) == 1000


def test_unknown_user():
    wallet = WalletStore()
    with pytest.raises(InvalidUser):
        wallet.get_balance('42')
    with pytest.raises(InvalidUser):
        wallet.debit('42', 10)
    with pytest.raises(InvalidUser):
        wallet.credit(None, 10)


def test_numeric_user_ids_are_accepted():
    wallet = WalletStore()
    user = wallet.create_user()
    assert wallet.get_balance(int(user.id)) == 1000


def test_debit_then_credit_restores_balance():
    wallet = WalletStore(initial_coins=500)
    user = wallet.create_user()
    for amount in (1, 20, 250, 500):
        wallet.debit(user.id, amount)
        wallet.credit(user.id, amount)
        assert wallet.get_balance(user.id) == 500


def test_returned_user_is_a_snapshot():
    wallet = WalletStore()
    user = wallet.create_user()
    user.coins = 5
    assert wallet.get_balance(user.id) == 1000


def test_balance_never_negative_under_random_operations():
    wallet = WalletStore(initial_coins=200)
    users = [wallet.create_user() for _ in range(3)]
    rng = random.Random(7)
    for _ in range(2000):
        user = rng.choice(users)
        amount = rng.randint(1, 120)
        if rng.random() < 0.7:
            try:
                wallet.debit(user.id, amount)
            except InsufficientCoins:
                pass
        else:
            wallet.credit(user.id, amount)
        assert all(wallet.get_balance(u.id) >= 0 for u in users)


def test_concurrent_debits_never_overdraw():
    wallet = WalletStore(initial_coins=1000)
    user = wallet.create_user()
    successes = []
    lock = threading.Lock()

    def _spend():
        for _ in range(10):
            try:
                wallet.debit(user.id, 30)
            except InsufficientCoins:
                continue
            with lock:
                successes.append(1)

    threads = [threading.Thread(target=_spend) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(successes) == 33
    assert wallet.get_balance(user.id) == 10
