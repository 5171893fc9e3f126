from flask import Blueprint, jsonify

main_bp = Blueprint('main_bp', __name__)


@main_bp.route('/health')
def health():
    return jsonify(status='ok', message='API is running')
