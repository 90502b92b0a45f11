from datetime import datetime
from extensions import db
from sqlalchemy import CheckConstraint
from marking_scheme import SCORE_FIELDS


class JuryScore(db.Model):
    __tablename__ = 'jury_scores'
    id = db.Column(db.Integer, primary_key=True)
    jury_member_id = db.Column(db.Integer, db.ForeignKey('jury_members.id', ondelete='CASCADE'), nullable=False, index=True)
    registration_number = db.Column(
        db.String(50),
        db.ForeignKey('submissions.registration_number', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )

    # Marking scheme, 100 points in total
    concept_score = db.Column(db.Float, nullable=False)
    relevance_score = db.Column(db.Float, nullable=False)
    composition_score = db.Column(db.Float, nullable=False)
    balance_score = db.Column(db.Float, nullable=False)
    colour_score = db.Column(db.Float, nullable=False)
    design_relativity_score = db.Column(db.Float, nullable=False)
    aesthetic_appeal_score = db.Column(db.Float, nullable=False)
    unconventional_materials_score = db.Column(db.Float, nullable=False)
    overall_material_score = db.Column(db.Float, nullable=False)

    total_score = db.Column(db.Float, nullable=False)
    comments = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    submitted_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    __table_args__ = (
        db.UniqueConstraint('jury_member_id', 'registration_number', name='unique_jury_score'),
        CheckConstraint('total_score >= 0 AND total_score <= 100', name='check_total_score'),
    )

    def to_dict(self):
        data = {
            'id': self.id,
            'jury_member_id': self.jury_member_id,
            'registration_number': self.registration_number,
            'total_score': self.total_score,
            'comments': self.comments,
            'submitted_at': self.submitted_at.isoformat() if self.submitted_at else None,
        }
        for field in SCORE_FIELDS:
            data[field] = getattr(self, field)
        return data
