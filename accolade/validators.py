"""Input validation helpers shared by the achievement and user services."""
import re
import uuid

from .errors import ValidationError

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 255
DESCRIPTION_MIN_LENGTH = 10
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6


def _clean(value):
    if value is None:
        return ''
    return str(value).strip()


def validate_achievement_fields(title, description, document_ref):
    """Returns the (title, description, document_ref) triple as stored.

    Values are kept verbatim; only missing values are normalized to ''.
    """
    title = '' if title is None else str(title)
    description = '' if description is None else str(description)
    document_ref = '' if document_ref is None else str(document_ref)

    if len(title) < TITLE_MIN_LENGTH:
        raise ValidationError(f'title must be at least {TITLE_MIN_LENGTH} characters')
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f'title must be at most {TITLE_MAX_LENGTH} characters')
    if len(description) < DESCRIPTION_MIN_LENGTH:
        raise ValidationError(f'description must be at least {DESCRIPTION_MIN_LENGTH} characters')
    if not document_ref.strip():
        raise ValidationError('document is required')

    return title, description, document_ref


def is_valid_email(email):
    return bool(EMAIL_PATTERN.match(email or ''))


def is_valid_uuid(value):
    if not value:
        return False
    try:
        uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return False
    return True


def validate_user_fields(username, email, full_name):
    """Checks the fields common to user creation and update.

    Returns the cleaned values with the email lower-cased.
    """
    username = _clean(username)
    email = _clean(email).lower()
    full_name = _clean(full_name)

    if len(username) < USERNAME_MIN_LENGTH:
        raise ValidationError(f'username must be at least {USERNAME_MIN_LENGTH} characters')
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(f'username must be at most {USERNAME_MAX_LENGTH} characters')
    if not is_valid_email(email):
        raise ValidationError('invalid email format')
    if not full_name:
        raise ValidationError('full name is required')

    return username, email, full_name


def validate_password(password):
    if password is not None and not isinstance(password, str):
        raise ValidationError('password must be a string')
    if not password or len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f'password must be at least {PASSWORD_MIN_LENGTH} characters')
    return password


def validate_role_id(role_id):
    role_id = _clean(role_id)
    if not role_id:
        raise ValidationError('role id is required')
    if not is_valid_uuid(role_id):
        raise ValidationError('role id must be a valid UUID')
    return role_id


def validate_is_active(is_active):
    if not isinstance(is_active, bool):
        raise ValidationError('is_active must be a boolean')
    return is_active
