from flask import Blueprint, request

from .auth.permissions import admin_required
from .utils import get_service, success

users_bp = Blueprint('users_bp', __name__)


def _payload():
    return request.get_json(silent=True) or {}


@users_bp.route('', methods=['GET'])
@admin_required
def list_users():
    result = get_service('users').list(
        page=request.args.get('page', 1, type=int),
        limit=request.args.get('limit', None, type=int),
        sort_by=request.args.get('sortBy'),
        order=request.args.get('order'),
        search=request.args.get('search', ''),
    )
    meta = {
        'page': result.page,
        'limit': result.limit,
        'total': result.total,
        'pages': result.pages,
        'sortBy': result.sort_by,
        'order': result.order,
        'search': result.search,
    }
    return success([u.to_dict() for u in result.items], 'Users fetched successfully', meta=meta)


@users_bp.route('/<user_id>', methods=['GET'])
@admin_required
def get_user(user_id):
    user = get_service('users').get_by_id(user_id)
    return success(user.to_dict(), 'User fetched successfully')


@users_bp.route('', methods=['POST'])
@admin_required
def create_user():
    data = _payload()
    user = get_service('users').create(
        username=data.get('username'),
        email=data.get('email'),
        password=data.get('password'),
        full_name=data.get('full_name'),
        role_id=data.get('role_id'),
    )
    return success(user.to_dict(), 'User created successfully', 201)


@users_bp.route('/<user_id>', methods=['PUT'])
@admin_required
def update_user(user_id):
    data = _payload()
    user = get_service('users').update(
        user_id,
        username=data.get('username'),
        email=data.get('email'),
        full_name=data.get('full_name'),
        is_active=data.get('is_active'),
    )
    return success(user.to_dict(), 'User updated successfully')


@users_bp.route('/<user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id):
    get_service('users').delete(user_id)
    return success(None, 'User deleted successfully')


@users_bp.route('/<user_id>/role', methods=['PUT'])
@admin_required
def assign_role(user_id):
    user = get_service('users').assign_role(user_id, _payload().get('role_id'))
    return success(user.to_dict(), 'Role assigned successfully')
