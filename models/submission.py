# models/submission.py

from datetime import datetime
from extensions import db
from sqlalchemy import CheckConstraint

SUBMISSION_CATEGORIES = ('DIGITAL', 'PHYSICAL')
SUBMISSION_STATUSES = ('DRAFT', 'SUBMITTED', 'VALIDATED', 'PUBLISHED', 'REJECTED', 'WITHDRAWN')


class Submission(db.Model):
    __tablename__ = 'submissions'

    id = db.Column(db.Integer, primary_key=True)
    # Public identifier, used in URLs and by jury scores
    registration_number = db.Column(db.String(50), unique=True, nullable=False)
    competition_id = db.Column(db.Integer, db.ForeignKey('competitions.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    category = db.Column(db.String(20), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    key_photograph_url = db.Column(db.String(500), nullable=True)
    status = db.Column(db.String(20), nullable=False, default='DRAFT')
    is_published = db.Column(db.Boolean, nullable=False, default=False)
    published_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    owner = db.relationship('User')
    jury_scores = db.relationship('JuryScore', backref='submission', lazy=True, cascade='all, delete-orphan')
    votes = db.relationship('SubmissionVote', backref='submission', lazy=True, cascade='all, delete-orphan')
    voting_stats = db.relationship('SubmissionVotingStats', backref='submission', uselist=False, cascade='all, delete-orphan')

    __table_args__ = (
        CheckConstraint("category IN ('DIGITAL', 'PHYSICAL')", name='check_submission_category'),
        CheckConstraint(
            "status IN ('DRAFT', 'SUBMITTED', 'VALIDATED', 'PUBLISHED', 'REJECTED', 'WITHDRAWN')",
            name='check_submission_status',
        ),
    )

    @property
    def is_live(self):
        return bool(self.is_published) and self.status == 'PUBLISHED'

    def to_dict(self):
        return {
            'id': self.id,
            'registration_number': self.registration_number,
            'competition_id': self.competition_id,
            'category': self.category,
            'title': self.title,
            'description': self.description,
            'thumbnail': self.key_photograph_url,
            'status': self.status,
            'is_published': self.is_published,
            'published_at': self.published_at.isoformat() if self.published_at else None,
        }
