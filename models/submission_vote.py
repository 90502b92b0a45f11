# models/submission_vote.py

from datetime import datetime
from extensions import db


class SubmissionVote(db.Model):
    __tablename__ = 'submission_votes'
    id = db.Column(db.Integer, primary_key=True)
    registration_number = db.Column(
        db.String(50),
        db.ForeignKey('submissions.registration_number', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('registration_number', 'user_id', name='unique_submission_vote'),
    )
