import logging
from flask import Blueprint, current_app, jsonify

from forms import LoginForm, RegisterForm, validated
from identifiers import generate_token

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


def user_summary(user):
    return {
        'id': user.id,
        'fullName': user.full_name,
        'weyId': user.wey_id,
        'monthlyTarget': user.monthly_target,
    }


@auth_bp.route('/credential', methods=['GET'])
def credential():
    return jsonify({'privateKey': generate_token()})


@auth_bp.route('/register', methods=['POST'])
def register():
    form = validated(RegisterForm)
    user = current_app.storage.users.register(
        form.fullName.data, form.monthlyTarget.data, form.privateKey.data
    )
    return jsonify({'message': 'Account created', 'user': user_summary(user)})


@auth_bp.route('/login', methods=['POST'])
def login():
    form = validated(LoginForm)
    user = current_app.storage.users.authenticate(form.privateKey.data)
    logger.info("User %s logged in", user.id)
    return jsonify({'message': 'Login successful', 'user': user_summary(user)})
