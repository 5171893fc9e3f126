from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData
from flask_bcrypt import Bcrypt
from werkzeug.exceptions import HTTPException


# 1. Create extension instances WITHOUT an app
# They will be "connected" to the app inside the factory

# Define naming convention for SQLAlchemy
convention = {
    "ix": 'ix_%(column_0_label)s',
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}
metadata = MetaData(naming_convention=convention)

db = SQLAlchemy(metadata=metadata)
bcrypt = Bcrypt()

from flask_login import LoginManager
login_manager = LoginManager()

from flask_principal import Principal
# Identity comes from the bearer token on every request, never the session
principal = Principal(use_sessions=False)


def _engine_options(config):
    """Bound every relational store call by STORE_TIMEOUT_SECONDS."""
    timeout = config['STORE_TIMEOUT_SECONDS']
    options = dict(config.get('SQLALCHEMY_ENGINE_OPTIONS') or {})
    uri = config.get('SQLALCHEMY_DATABASE_URI') or ''

    if uri.startswith('postgresql'):
        options.setdefault('pool_timeout', timeout)
        options.setdefault('connect_args', {
            'connect_timeout': max(int(timeout), 1),
            'options': f'-c statement_timeout={int(timeout * 1000)}',
        })
    elif uri.startswith('sqlite'):
        options.setdefault('connect_args', {'timeout': timeout})
    return options


def create_app(config_class='config.Config', mongo_client=None):
    """
    Application Factory Function

    ``mongo_client`` replaces the client built from MONGO_URI (tests pass a
    mongomock client here).
    """

    app = Flask(__name__, instance_relative_config=True)

    # Load configuration from the config.py file
    app.config.from_object(config_class)
    app.config['SQLALCHEMY_ENGINE_OPTIONS'] = _engine_options(app.config)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    bcrypt.init_app(app)
    login_manager.init_app(app)
    principal.init_app(app)

    # Services are built once here and shared through app.extensions
    from .stores import AchievementStore
    from .services import AchievementService, UserService

    store = AchievementStore.from_config(app.config, client=mongo_client)
    app.extensions['accolade'] = {
        'achievement_store': store,
        'achievements': AchievementService(store),
        'users': UserService(
            bcrypt,
            per_page=app.config['USERS_PER_PAGE'],
            max_per_page=app.config['MAX_USERS_PER_PAGE'],
        ),
    }

    from .auth.permissions import register_identity_handlers
    register_identity_handlers(app)

    _register_error_handlers(app)

    # Register Blueprints
    # Imports are *inside* the factory to avoid circular import issues
    with app.app_context():
        from .main_routes import main_bp
        from .auth import auth_bp
        from .achievements_routes import achievements_bp
        from .users_routes import users_bp

        # Import models so SQLAlchemy knows about them
        from . import models

        app.register_blueprint(main_bp)
        app.register_blueprint(auth_bp, url_prefix='/api/auth')
        app.register_blueprint(achievements_bp, url_prefix='/api/achievements')
        app.register_blueprint(users_bp, url_prefix='/api/users')

    # Register CLI commands
    from .commands.init_db import init_db
    from .commands.seed_roles import seed_roles
    from .commands.create_admin import create_admin
    from .commands.reconcile_mirror import reconcile_mirror

    app.cli.add_command(init_db)
    app.cli.add_command(seed_roles)
    app.cli.add_command(create_admin)
    app.cli.add_command(reconcile_mirror)

    return app


def _register_error_handlers(app):
    from .errors import ServiceError

    @app.errorhandler(ServiceError)
    def handle_service_error(e):
        if e.status_code >= 500:
            app.logger.error(f"{e.kind}: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({
            'status': 'error',
            'kind': e.name.lower().replace(' ', '_'),
            'message': e.description,
        }), e.code

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({
            'status': 'error',
            'kind': 'unauthorized',
            'message': 'Authentication required',
        }), 401
