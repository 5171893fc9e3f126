from functools import wraps

from sqlalchemy import exc as sa_exc

from .. import db
from ..errors import StoreTimeout, Unavailable


def translate_db_errors(f):
    """Roll back and re-raise relational store failures as service errors.

    IntegrityError is left alone so callers can turn it into a Conflict.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except sa_exc.TimeoutError as e:
            db.session.rollback()
            raise StoreTimeout('Relational store timed out') from e
        except (sa_exc.OperationalError, sa_exc.InterfaceError) as e:
            db.session.rollback()
            if 'timeout' in str(e.orig).lower():
                raise StoreTimeout('Relational store timed out') from e
            raise Unavailable('Relational store is unavailable') from e
    return wrapper
