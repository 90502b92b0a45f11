# models/submission_voting_stats.py
# Derived per-submission summary, rebuilt by the updaters in logic.py

from datetime import datetime
from extensions import db
from sqlalchemy import CheckConstraint


class SubmissionVotingStats(db.Model):
    __tablename__ = 'submission_voting_stats'
    id = db.Column(db.Integer, primary_key=True)
    registration_number = db.Column(
        db.String(50),
        db.ForeignKey('submissions.registration_number', ondelete='CASCADE'),
        unique=True,
        nullable=False,
    )

    # Jury channel
    jury_vote_count = db.Column(db.Integer, nullable=False, default=0)
    jury_score_total = db.Column(db.Float, nullable=False, default=0.0)
    jury_score_average = db.Column(db.Float, nullable=True, index=True)

    # Public channel
    public_vote_count = db.Column(db.Integer, nullable=False, default=0, index=True)
    last_voted_at = db.Column(db.DateTime, nullable=True)

    # Set by an admin when winners are announced; the cache updaters never touch these
    award = db.Column(db.String(100), nullable=True)
    public_rank = db.Column(db.Integer, nullable=True)
    final_score = db.Column(db.Float, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint('jury_vote_count >= 0', name='check_jury_vote_count'),
        CheckConstraint('public_vote_count >= 0', name='check_public_vote_count'),
        CheckConstraint('public_rank IS NULL OR public_rank >= 1', name='check_public_rank'),
    )

    def to_dict(self):
        return {
            'jury_vote_count': self.jury_vote_count,
            'jury_score_total': self.jury_score_total,
            'jury_score_average': self.jury_score_average,
            'public_vote_count': self.public_vote_count,
            'last_voted_at': self.last_voted_at.isoformat() if self.last_voted_at else None,
            'award': self.award,
            'public_rank': self.public_rank,
            'final_score': self.final_score,
        }
