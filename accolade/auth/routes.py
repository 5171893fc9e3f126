from flask import abort, request
from flask_login import login_required, current_user

from . import auth_bp
from ..errors import ValidationError
from ..utils import get_service, success


@auth_bp.route('/login', methods=['POST'])
def login():
    payload = request.get_json(silent=True) or {}
    username = str(payload.get('username') or '').strip()
    password = payload.get('password') or ''

    if not isinstance(password, str):
        raise ValidationError('password must be a string')
    if not username or not password:
        raise ValidationError('username and password are required')
    if len(username) > 255 or len(password) > 128:
        raise ValidationError('input too long')

    user = get_service('users').authenticate(username, password)
    if user is None:
        abort(401, description='Invalid username or password')

    return success({'token': user.get_auth_token(), 'user': user.to_dict()}, 'Login successful')


@auth_bp.route('/profile')
@login_required
def profile():
    return success(current_user.to_dict(), 'Profile retrieved successfully')
