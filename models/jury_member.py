# models/jury_member.py

from datetime import datetime
from extensions import db


class JuryMember(db.Model):
    __tablename__ = 'jury_members'
    id = db.Column(db.Integer, primary_key=True)
    # A user can hold at most one jury seat
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), unique=True, nullable=False)
    title = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    # NULL means the member judges every competition
    competition_id = db.Column(db.Integer, db.ForeignKey('competitions.id', ondelete='SET NULL'), nullable=True, index=True)

    assigned_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    assigned_at = db.Column(db.DateTime, default=datetime.utcnow)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    competition = db.relationship('Competition')
    assigner = db.relationship('User', foreign_keys=[assigned_by])
    scores = db.relationship('JuryScore', backref='jury_member', lazy=True, cascade='all, delete-orphan')
    progress = db.relationship('JuryScoringProgress', backref='jury_member', uselist=False, cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'title': self.title,
            'is_active': self.is_active,
            'competition_id': self.competition_id,
            'assigned_by': self.assigned_by,
            'assigned_at': self.assigned_at.isoformat() if self.assigned_at else None,
            'user': self.user.to_dict() if self.user else None,
        }
