"""Shared database handle and column helpers for the models package."""
import uuid
from datetime import datetime, timezone

from .. import db


def generate_uuid():
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


def isoformat(value):
    return value.isoformat() if value else None
