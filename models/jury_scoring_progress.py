# models/jury_scoring_progress.py
# Derived per-judge summary, rebuilt by logic.update_jury_progress

from datetime import datetime
from extensions import db


class JuryScoringProgress(db.Model):
    __tablename__ = 'jury_scoring_progress'
    id = db.Column(db.Integer, primary_key=True)
    jury_member_id = db.Column(db.Integer, db.ForeignKey('jury_members.id', ondelete='CASCADE'), unique=True, nullable=False)

    total_assigned_entries = db.Column(db.Integer, nullable=False, default=0)
    submitted_scores = db.Column(db.Integer, nullable=False, default=0)
    completion_percentage = db.Column(db.Float, nullable=False, default=0.0, index=True)
    average_score_given = db.Column(db.Float, nullable=True)
    last_scored_at = db.Column(db.DateTime, nullable=True, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'total_assigned_entries': self.total_assigned_entries,
            'submitted_scores': self.submitted_scores,
            'completion_percentage': self.completion_percentage,
            'average_score_given': self.average_score_given,
            'last_scored_at': self.last_scored_at.isoformat() if self.last_scored_at else None,
        }
