"""Role model for the authorization catalog."""
from .base import db, generate_uuid


class Role(db.Model):
    """A named role users are assigned to. Managed outside the core services."""
    __tablename__ = 'roles'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    name = db.Column(db.String(50), unique=True, nullable=False, index=True)
    description = db.Column(db.Text)

    users = db.relationship('User', back_populates='role')

    def __repr__(self):
        return f'<Role {self.name}>'

    @staticmethod
    def get_by_name(name):
        """Get role by name."""
        return Role.query.filter_by(name=name).first()

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
        }
