"""
Pytest configuration and fixtures.
"""
import sys
import os
import pytest
import mongomock

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__) + '/..'))


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    from accolade import create_app
    from config import Config

    # SQLite file for the relational store, mongomock for the document store
    class TestConfig(Config):
        TESTING = True
        import tempfile
        db_fd, db_path = tempfile.mkstemp()
        SQLALCHEMY_DATABASE_URI = f'sqlite:///{db_path}'
        MONGO_DB = 'accolade_test'
        BCRYPT_LOG_ROUNDS = 4
        SECRET_KEY = 'test-secret'

    app = create_app(TestConfig, mongo_client=mongomock.MongoClient())

    with app.app_context():
        from accolade import db
        db.create_all()

    return app


@pytest.fixture(scope='function', autouse=True)
def clean_db(app):
    """Clean both stores between tests."""
    with app.app_context():
        from accolade import db
        # Drop all tables and recreate them to ensure a clean slate
        db.drop_all()
        db.create_all()
    app.extensions['accolade']['achievement_store'].collection.delete_many({})
    yield


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def ctx(app):
    """Push an application context for service-level tests."""
    with app.app_context():
        yield


@pytest.fixture(scope='function')
def achievements(app):
    return app.extensions['accolade']['achievements']


@pytest.fixture(scope='function')
def store(app):
    return app.extensions['accolade']['achievement_store']


@pytest.fixture(scope='function')
def users(app):
    return app.extensions['accolade']['users']


@pytest.fixture(scope='function')
def roles(app):
    """Seed the role catalog; returns a name -> id mapping."""
    from accolade import db
    from accolade.models import Role

    with app.app_context():
        for name, description in app.config['DEFAULT_ROLES'].items():
            db.session.add(Role(name=name, description=description))
        db.session.commit()
        return {role.name: role.id for role in Role.query.all()}


@pytest.fixture(scope='function')
def make_user(app, roles):
    """Factory creating a user through the directory; returns (id, token)."""
    def _make_user(username, role='student', password='password', is_active=True):
        from accolade import db
        from accolade.models import User

        with app.app_context():
            service = app.extensions['accolade']['users']
            user = service.create(
                username=username,
                email=f'{username}@example.com',
                password=password,
                full_name=username.title(),
                role_id=roles[role],
            )
            if not is_active:
                user.is_active = False
                db.session.commit()
            user = db.session.get(User, user.id)
            return user.id, user.get_auth_token()
    return _make_user


def bearer(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(make_user):
    _, token = make_user('admin', role='admin')
    return bearer(token)


@pytest.fixture(scope='function')
def student(make_user):
    """A student principal: (user_id, headers)."""
    user_id, token = make_user('student1')
    return user_id, bearer(token)
