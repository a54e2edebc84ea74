from flask import Blueprint

main = Blueprint('main', __name__)


@main.route('/', methods=['GET'])
def health():
    return 'OK - server running'
