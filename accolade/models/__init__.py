"""
Models package for the relational store.

Users, the role catalog and the achievement mirror live here; achievement
records themselves live in the document store (see accolade.stores).
"""
from .base import db

from .role import Role
from .user import User
from .achievement import AchievementMirror

# Import Flask-Login user loader
from .. import login_manager


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, user_id)


@login_manager.request_loader
def load_user_from_request(request):
    """Resolve the principal from an ``Authorization: Bearer <token>`` header."""
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token:
        return None
    user = User.verify_auth_token(token.strip())
    if user is None or not user.is_active:
        return None
    return user


__all__ = [
    'db',
    'Role',
    'User',
    'AchievementMirror',
    'load_user',
    'load_user_from_request',
]
