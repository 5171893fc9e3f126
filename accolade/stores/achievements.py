"""MongoDB access for achievement records (the system of record)."""
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import wraps
from typing import Optional

import pymongo
from bson import ObjectId
from pymongo import errors as mongo_errors

from ..errors import NotFound, StoreTimeout, Unavailable

STATUS_DRAFT = 'draft'
STATUS_SUBMITTED = 'submitted'
STATUS_VERIFIED = 'verified'
STATUS_REJECTED = 'rejected'
STATUSES = (STATUS_DRAFT, STATUS_SUBMITTED, STATUS_VERIFIED, STATUS_REJECTED)


def _as_utc(value):
    # PyMongo hands back naive UTC datetimes unless the client is tz_aware
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _now():
    # BSON dates carry millisecond precision
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


@dataclass
class Achievement:
    id: str
    owner_id: str
    title: str
    description: str
    document_ref: str
    status: str
    created_at: datetime
    updated_at: datetime
    submit_date: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc):
        return cls(
            id=str(doc['_id']),
            owner_id=doc['user_id'],
            title=doc['title'],
            description=doc['description'],
            document_ref=doc['document'],
            status=doc['status'],
            submit_date=_as_utc(doc.get('submit_date')),
            created_at=_as_utc(doc['created_at']),
            updated_at=_as_utc(doc['updated_at']),
        )

    @property
    def is_draft(self):
        return self.status == STATUS_DRAFT

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.owner_id,
            'title': self.title,
            'description': self.description,
            'document': self.document_ref,
            'status': self.status,
            'submit_date': self.submit_date.isoformat() if self.submit_date else None,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
        }


def translate_store_errors(f):
    """Map driver failures onto the service error taxonomy."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except (mongo_errors.ExecutionTimeout, mongo_errors.NetworkTimeout,
                mongo_errors.WTimeoutError) as e:
            raise StoreTimeout(f'Document store timed out: {e}') from e
        except mongo_errors.ServerSelectionTimeoutError as e:
            raise Unavailable(f'Document store is unreachable: {e}') from e
        except mongo_errors.PyMongoError as e:
            raise Unavailable(f'Document store error: {e}') from e
    return wrapper


def _object_id(achievement_id):
    """Malformed identifiers are reported the same way as missing ones."""
    if not achievement_id or not ObjectId.is_valid(str(achievement_id)):
        raise NotFound('achievement not found')
    return ObjectId(str(achievement_id))


class AchievementStore:
    """Keyed reads and conditional writes against the achievements collection."""

    def __init__(self, collection):
        self.collection = collection

    @classmethod
    def from_config(cls, config, client=None):
        if client is None:
            timeout_ms = int(config['STORE_TIMEOUT_SECONDS'] * 1000)
            client = pymongo.MongoClient(
                config['MONGO_URI'],
                serverSelectionTimeoutMS=timeout_ms,
                connectTimeoutMS=timeout_ms,
                socketTimeoutMS=timeout_ms,
            )
        collection = client[config['MONGO_DB']][config['MONGO_COLLECTION']]
        return cls(collection)

    @translate_store_errors
    def ensure_indexes(self):
        self.collection.create_index([('user_id', pymongo.ASCENDING), ('created_at', pymongo.DESCENDING)])

    @translate_store_errors
    def find_by_owner(self, owner_id):
        cursor = self.collection.find({'user_id': owner_id}).sort('created_at', pymongo.DESCENDING)
        return [Achievement.from_document(doc) for doc in cursor]

    @translate_store_errors
    def find_all(self):
        return [Achievement.from_document(doc) for doc in self.collection.find()]

    @translate_store_errors
    def find_by_id(self, achievement_id):
        doc = self.collection.find_one({'_id': _object_id(achievement_id)})
        if doc is None:
            raise NotFound('achievement not found')
        return Achievement.from_document(doc)

    @translate_store_errors
    def insert_draft(self, owner_id, title, description, document_ref):
        now = _now()
        doc = {
            '_id': ObjectId(),
            'user_id': owner_id,
            'title': title,
            'description': description,
            'document': document_ref,
            'status': STATUS_DRAFT,
            'created_at': now,
            'updated_at': now,
        }
        self.collection.insert_one(doc)
        return Achievement.from_document(doc)

    def _draft_filter(self, achievement_id, owner_id):
        return {'_id': _object_id(achievement_id), 'user_id': owner_id, 'status': STATUS_DRAFT}

    @translate_store_errors
    def update_draft(self, achievement_id, owner_id, title, description, document_ref):
        """Replace the editable fields if the record is still an owned draft.

        Returns True when a record matched.
        """
        result = self.collection.update_one(
            self._draft_filter(achievement_id, owner_id),
            {'$set': {
                'title': title,
                'description': description,
                'document': document_ref,
                'updated_at': _now(),
            }},
        )
        return result.matched_count == 1

    @translate_store_errors
    def delete_draft(self, achievement_id, owner_id):
        result = self.collection.delete_one(self._draft_filter(achievement_id, owner_id))
        return result.deleted_count == 1

    @translate_store_errors
    def submit_draft(self, achievement_id, owner_id):
        """Atomically move an owned draft to submitted; False if nothing matched."""
        now = _now()
        result = self.collection.update_one(
            self._draft_filter(achievement_id, owner_id),
            {'$set': {'status': STATUS_SUBMITTED, 'submit_date': now, 'updated_at': now}},
        )
        return result.matched_count == 1
