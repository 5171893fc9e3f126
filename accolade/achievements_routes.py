from flask import Blueprint, request
from flask_login import login_required, current_user

from .utils import get_service, success

achievements_bp = Blueprint('achievements_bp', __name__)


def _payload():
    return request.get_json(silent=True) or {}


@achievements_bp.route('', methods=['GET'])
@login_required
def list_achievements():
    achievements = get_service('achievements').list_by_owner(current_user.id)
    return success([a.to_dict() for a in achievements], 'Achievements retrieved successfully')


@achievements_bp.route('/<achievement_id>', methods=['GET'])
@login_required
def get_achievement(achievement_id):
    achievement = get_service('achievements').get_for_owner(achievement_id, current_user.id)
    return success(achievement.to_dict(), 'Achievement retrieved successfully')


@achievements_bp.route('', methods=['POST'])
@login_required
def create_achievement():
    data = _payload()
    achievement = get_service('achievements').create(
        current_user.id,
        data.get('title'),
        data.get('description'),
        data.get('document'),
    )
    return success(achievement.to_dict(), 'Achievement created successfully', 201)


@achievements_bp.route('/<achievement_id>', methods=['PUT'])
@login_required
def update_achievement(achievement_id):
    data = _payload()
    achievement = get_service('achievements').update(
        achievement_id,
        current_user.id,
        data.get('title'),
        data.get('description'),
        data.get('document'),
    )
    return success(achievement.to_dict(), 'Achievement updated successfully')


@achievements_bp.route('/<achievement_id>', methods=['DELETE'])
@login_required
def delete_achievement(achievement_id):
    get_service('achievements').delete(achievement_id, current_user.id)
    return success(None, 'Achievement deleted successfully')


@achievements_bp.route('/<achievement_id>/submit', methods=['POST'])
@login_required
def submit_achievement(achievement_id):
    achievement = get_service('achievements').submit(
        achievement_id, current_user.id, _payload().get('notes'))
    return success(achievement.to_dict(), 'Achievement submitted successfully')
