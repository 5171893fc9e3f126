"""User model for authentication and authorization."""
from flask import current_app
from flask_login import UserMixin
from itsdangerous import URLSafeTimedSerializer as Serializer, BadSignature

from .base import db, generate_uuid, utcnow, isoformat

TOKEN_SALT = 'accolade-access-token'


class User(UserMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    username = db.Column(db.String(50), nullable=False, unique=True)
    email = db.Column(db.String(120), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(100), nullable=False)
    # Shadows UserMixin.is_active so inactive accounts cannot authenticate
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    role_id = db.Column(db.String(36), db.ForeignKey('roles.id'), nullable=True, index=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    role = db.relationship('Role', back_populates='users', lazy='joined')

    def __repr__(self):
        return f'<User {self.username}>'

    @property
    def role_name(self):
        return self.role.name if self.role else None

    def has_role(self, role_name):
        return self.role_name == role_name

    def get_auth_token(self):
        s = Serializer(current_app.config['SECRET_KEY'], salt=TOKEN_SALT)
        return s.dumps({'user_id': self.id})

    @staticmethod
    def verify_auth_token(token, max_age=None):
        if max_age is None:
            max_age = current_app.config['TOKEN_MAX_AGE']
        s = Serializer(current_app.config['SECRET_KEY'], salt=TOKEN_SALT)
        try:
            user_id = s.loads(token, max_age=max_age).get('user_id')
        except BadSignature:
            # SignatureExpired is a BadSignature too
            return None
        if not user_id:
            return None
        return db.session.get(User, user_id)

    def to_dict(self):
        """Public representation; the password digest never leaves the model."""
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'full_name': self.full_name,
            'is_active': self.is_active,
            'role_id': self.role_id,
            'role': self.role.to_dict() if self.role else None,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }
