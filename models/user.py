# models/user.py

from datetime import datetime
from extensions import db
from sqlalchemy import CheckConstraint

USER_ROLES = ('ADMIN', 'MODERATOR', 'MEMBER')


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    # Login code handed out by the identity provider
    code = db.Column(db.String(32), unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=True, index=True)
    email = db.Column(db.String(255), unique=True, nullable=True)
    role = db.Column(db.String(20), nullable=False, default='MEMBER')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    jury_membership = db.relationship(
        'JuryMember',
        backref='user',
        uselist=False,
        foreign_keys='JuryMember.user_id',
        cascade='all, delete-orphan',
    )

    __table_args__ = (
        CheckConstraint("role IN ('ADMIN', 'MODERATOR', 'MEMBER')", name='check_user_role'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role,
        }
