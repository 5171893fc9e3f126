"""Relational mirror of achievement records kept for reporting joins."""
from .base import db, generate_uuid, utcnow, isoformat


class AchievementMirror(db.Model):
    """Best-effort copy of an achievement stored in the document store.

    The document store stays authoritative; rows here may lag behind it
    until `flask reconcile-mirror` repairs them.
    """
    __tablename__ = 'achievements'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    owner_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'),
                         nullable=False, index=True)
    primary_store_ref = db.Column('mongo_id', db.String(24), nullable=False, unique=True)
    title = db.Column(db.String(255), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='draft')
    submit_date = db.Column(db.DateTime(timezone=True), nullable=True)
    notes = db.Column(db.Text)
    verified_by = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<AchievementMirror {self.primary_store_ref} {self.status}>'

    def to_dict(self):
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'primary_store_ref': self.primary_store_ref,
            'title': self.title,
            'status': self.status,
            'submit_date': isoformat(self.submit_date),
            'notes': self.notes,
            'verified_by': self.verified_by,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }
