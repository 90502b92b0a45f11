# models/competition.py

from datetime import datetime
from extensions import db
from sqlalchemy import CheckConstraint

COMPETITION_STATUSES = (
    'UPCOMING', 'REGISTRATION_OPEN', 'REGISTRATION_CLOSED',
    'IN_PROGRESS', 'JUDGING', 'COMPLETED', 'CANCELLED',
)


class Competition(db.Model):
    __tablename__ = 'competitions'
    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(120), unique=True, nullable=False)
    title = db.Column(db.String(255), nullable=False)
    year = db.Column(db.Integer, nullable=True)
    status = db.Column(db.String(30), nullable=False, default='UPCOMING')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Deleting a competition takes its entries with it
    submissions = db.relationship('Submission', backref='competition', lazy=True, cascade='all, delete-orphan')

    __table_args__ = (
        CheckConstraint(
            "status IN ('UPCOMING', 'REGISTRATION_OPEN', 'REGISTRATION_CLOSED', "
            "'IN_PROGRESS', 'JUDGING', 'COMPLETED', 'CANCELLED')",
            name='check_competition_status',
        ),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'slug': self.slug,
            'title': self.title,
            'year': self.year,
            'status': self.status,
        }
