from flask import current_app, jsonify


def get_service(name):
    """Look up a service built by the application factory."""
    return current_app.extensions['accolade'][name]


def success(data=None, message='OK', code=200, **extra):
    """Wrap a result in the {status, message, data} envelope."""
    body = {'status': 'success', 'message': message, 'data': data}
    body.update(extra)
    return jsonify(body), code
