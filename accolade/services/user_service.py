from collections import namedtuple

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from .. import db
from ..errors import Conflict, NotFound
from ..models import Role, User
from ..models.base import utcnow
from ..validators import (
    is_valid_uuid,
    validate_is_active,
    validate_password,
    validate_role_id,
    validate_user_fields,
)
from .db_errors import translate_db_errors

# Only these columns may drive ORDER BY; anything else falls back silently
SORTABLE_COLUMNS = {
    'id': User.id,
    'username': User.username,
    'email': User.email,
    'full_name': User.full_name,
    'created_at': User.created_at,
}
DEFAULT_SORT = 'created_at'
SORT_ORDERS = ('asc', 'desc')
DEFAULT_ORDER = 'asc'

UserPage = namedtuple('UserPage', 'items total page limit pages sort_by order search')


def _escape_like(term):
    return term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


class UserService:
    """Administrative user directory backed by the relational store."""

    def __init__(self, bcrypt, per_page=10, max_per_page=100):
        self.bcrypt = bcrypt
        self.per_page = per_page
        self.max_per_page = max_per_page

    @translate_db_errors
    def list(self, page=1, limit=None, sort_by=None, order=None, search=None):
        page = page if page and page > 0 else 1
        limit = limit if limit and limit > 0 else self.per_page
        limit = min(limit, self.max_per_page)
        sort_by = sort_by if sort_by in SORTABLE_COLUMNS else DEFAULT_SORT
        order = (order or '').lower()
        order = order if order in SORT_ORDERS else DEFAULT_ORDER
        search = (search or '').strip()

        query = User.query
        if search:
            pattern = f'%{_escape_like(search)}%'
            query = query.filter(or_(
                User.username.ilike(pattern, escape='\\'),
                User.email.ilike(pattern, escape='\\'),
                User.full_name.ilike(pattern, escape='\\'),
            ))

        column = SORTABLE_COLUMNS[sort_by]
        ordering = column.desc() if order == 'desc' else column.asc()
        pagination = query.order_by(ordering, User.id.asc()).paginate(
            page=page, per_page=limit, error_out=False)

        return UserPage(
            items=pagination.items,
            total=pagination.total,
            page=page,
            limit=limit,
            pages=pagination.pages,
            sort_by=sort_by,
            order=order,
            search=search,
        )

    @translate_db_errors
    def get_by_id(self, user_id):
        if not is_valid_uuid(user_id):
            raise NotFound('user not found')
        user = db.session.get(User, str(user_id))
        if user is None:
            raise NotFound('user not found')
        return user

    @translate_db_errors
    def create(self, username, email, password, full_name, role_id):
        username, email, full_name = validate_user_fields(username, email, full_name)
        validate_password(password)
        role_id = validate_role_id(role_id)

        if User.query.filter_by(username=username).first():
            raise Conflict('username already exists')
        if db.session.get(Role, role_id) is None:
            raise NotFound('role not found')

        user = User(
            username=username,
            email=email,
            password_hash=self.bcrypt.generate_password_hash(password).decode('utf-8'),
            full_name=full_name,
            role_id=role_id,
            is_active=True,
        )
        db.session.add(user)
        self._commit_unique_username()
        current_app.logger.info(f"User {user.username} created")
        return self.get_by_id(user.id)

    @translate_db_errors
    def update(self, user_id, username, email, full_name, is_active=None):
        username, email, full_name = validate_user_fields(username, email, full_name)
        if is_active is not None:
            is_active = validate_is_active(is_active)
        user = self.get_by_id(user_id)

        taken = User.query.filter(User.username == username, User.id != user.id).first()
        if taken:
            raise Conflict('username already exists')

        user.username = username
        user.email = email
        user.full_name = full_name
        if is_active is not None:
            user.is_active = is_active
        user.updated_at = utcnow()
        self._commit_unique_username()
        return self.get_by_id(user.id)

    @translate_db_errors
    def delete(self, user_id):
        user = self.get_by_id(user_id)
        db.session.delete(user)
        db.session.commit()
        current_app.logger.info(f"User {user_id} deleted")

    @translate_db_errors
    def assign_role(self, user_id, role_id):
        user = self.get_by_id(user_id)
        role_id = validate_role_id(role_id)
        if db.session.get(Role, role_id) is None:
            raise NotFound('role not found')

        user.role_id = role_id
        user.updated_at = utcnow()
        db.session.commit()
        current_app.logger.info(f"Role {role_id} assigned to user {user.id}")
        # Drop the cached relationship so the re-fetch reflects the new role
        db.session.expire(user)
        return self.get_by_id(user.id)

    @translate_db_errors
    def authenticate(self, username, password):
        """Returns the active user matching the credentials, or None."""
        if not username or not isinstance(password, str) or not password:
            return None
        user = User.query.filter_by(username=str(username).strip()).first()
        if user is None or not user.is_active:
            return None
        if not self.bcrypt.check_password_hash(user.password_hash, password):
            return None
        return user

    @staticmethod
    def _commit_unique_username():
        # The pre-check above is only a fast path; concurrent writers are
        # caught by the unique constraint on users.username
        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise Conflict('username already exists') from e
