from flask import Blueprint, jsonify, request
from livematch import get_hub
from livematch.services import commands


matches = Blueprint('matches', __name__)


def _body():
    return request.get_json(silent=True) or {}


@matches.route('/create', methods=['POST'])
def create_token():
    data = _body()
    hub = get_hub()
    outcome = commands.create_token(hub, match_id=data.get('matchId'), created_by=data.get('createdBy'))
    return jsonify(hub.deliver(outcome))


@matches.route('/simulate', methods=['POST'])
def simulate_event():
    data = _body()
    hub = get_hub()
    outcome = commands.simulate_event(
        hub,
        match_id=data.get('matchId'),
        over=data.get('over'),
        runs=data.get('runs'),
        wicket=data.get('wicket'),
        message=data.get('message'),
    )
    return jsonify(hub.deliver(outcome))


@matches.route('/match/<string:match_id>/channels', methods=['GET'])
def match_channels(match_id):
    return jsonify(commands.match_channels(get_hub(), match_id).result)


@matches.route('/user/create', methods=['POST'])
def create_user():
    hub = get_hub()
    outcome = commands.create_user(hub, name=_body().get('name'))
    return jsonify(hub.deliver(outcome))


@matches.route('/user/<string:user_id>', methods=['GET'])
def get_user(user_id):
    return jsonify(commands.get_user(get_hub(), user_id).result)


@matches.route('/player-action', methods=['POST'])
def player_action():
    data = _body()
    hub = get_hub()
    outcome = commands.player_action(
        hub, token=data.get('token'), user_id=data.get('userId'), action=data.get('action')
    )
    return jsonify(hub.deliver(outcome))


@matches.route('/withdraw', methods=['POST'])
def request_withdraw():
    data = _body()
    hub = get_hub()
    outcome = commands.request_withdraw(hub, user_id=data.get('userId'), amount=data.get('amount'))
    return jsonify(hub.deliver(outcome))


@matches.route('/withdrawals', methods=['GET'])
def list_withdrawals():
    return jsonify(commands.list_withdrawals(get_hub()).result)
