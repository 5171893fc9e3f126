"""Role checks for Flask-Principal integration."""
from functools import wraps

from flask import abort, current_app
from flask_login import current_user
from flask_principal import Identity, Permission as PrincipalPermission, RoleNeed, UserNeed, identity_loaded

from .. import principal


@principal.identity_loader
def load_identity_from_user():
    """Build the request identity from the user Flask-Login resolved."""
    if current_user.is_authenticated:
        return Identity(current_user.id)
    return None


def register_identity_handlers(app):
    @identity_loaded.connect_via(app)
    def on_identity_loaded(sender, identity):
        """Load the user's role into the identity."""
        if not current_user.is_authenticated or current_user.id != identity.id:
            return
        identity.user = current_user
        identity.provides.add(UserNeed(current_user.id))
        if current_user.role_name:
            identity.provides.add(RoleNeed(current_user.role_name))


def create_role_permission(role_name):
    """Create a Flask-Principal Permission object for a role."""
    return PrincipalPermission(RoleNeed(role_name))


def role_required(role_name):
    """
    Decorator to require a specific role for a route.

    Usage:
        @role_required('admin')
        def admin_only():
            ...
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                abort(401)
            if not create_role_permission(role_name).can():
                abort(403)
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def admin_required(f):
    """role_required bound to the configured ADMIN_ROLE."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        return role_required(current_app.config['ADMIN_ROLE'])(f)(*args, **kwargs)
    return decorated_function
