# logic.py
# Rebuilds the derived jury caches (JuryScoringProgress, SubmissionVotingStats)
# from their source rows. Every function here recomputes in full, so running
# one again is always safe.

import logging
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from extensions import db
from errors import PersistenceFailure
from models import JuryMember, JuryScore, JuryScoringProgress, Submission, SubmissionVote, SubmissionVotingStats

logger = logging.getLogger(__name__)


def published_submissions_query(competition_id=None):
    query = Submission.query.filter(
        Submission.is_published.is_(True),
        Submission.status == 'PUBLISHED',
    )
    if competition_id is not None:
        query = query.filter(Submission.competition_id == competition_id)
    return query


def update_jury_progress(jury_member_id, commit=True):
    """
    Recalculates the dashboard summary of a jury member from their scores.
    Returns the progress row, or None when the member does not exist.
    """
    jury_member = db.session.get(JuryMember, jury_member_id)
    if not jury_member:
        return None

    # 1. Everything the member is expected to score
    total_assigned = published_submissions_query(jury_member.competition_id).count()

    # 2. What they have actually scored
    submitted_scores, score_sum, last_scored_at = db.session.query(
        func.count(JuryScore.id),
        func.coalesce(func.sum(JuryScore.total_score), 0.0),
        func.max(JuryScore.submitted_at),
    ).filter(JuryScore.jury_member_id == jury_member.id).one()

    completion_percentage = (submitted_scores / total_assigned) * 100 if total_assigned > 0 else 0.0
    average_score_given = score_sum / submitted_scores if submitted_scores > 0 else None

    progress = JuryScoringProgress.query.filter_by(jury_member_id=jury_member.id).first()
    if not progress:
        progress = JuryScoringProgress(jury_member_id=jury_member.id)
        db.session.add(progress)

    progress.total_assigned_entries = total_assigned
    progress.submitted_scores = submitted_scores
    progress.completion_percentage = completion_percentage
    progress.average_score_given = average_score_given
    progress.last_scored_at = last_scored_at

    if commit:
        db.session.commit()
    logger.debug('Jury progress for member %s: %s/%s scored', jury_member.id, submitted_scores, total_assigned)
    return progress


def get_or_create_stats(registration_number):
    stats = SubmissionVotingStats.query.filter_by(registration_number=registration_number).first()
    if not stats:
        stats = SubmissionVotingStats(
            registration_number=registration_number,
            jury_vote_count=0,
            jury_score_total=0.0,
            public_vote_count=0,
        )
        db.session.add(stats)
    return stats


def update_submission_jury_stats(registration_number, commit=True):
    totals = [s.total_score for s in JuryScore.query.filter_by(registration_number=registration_number)]

    jury_vote_count = len(totals)
    jury_score_total = sum(totals)

    stats = get_or_create_stats(registration_number)
    stats.jury_vote_count = jury_vote_count
    stats.jury_score_total = jury_score_total
    stats.jury_score_average = jury_score_total / jury_vote_count if jury_vote_count > 0 else None

    if commit:
        db.session.commit()
    return stats


def update_public_vote_count(registration_number, commit=True):
    vote_count, last_voted_at = db.session.query(
        func.count(SubmissionVote.id),
        func.max(SubmissionVote.created_at),
    ).filter(SubmissionVote.registration_number == registration_number).one()

    stats = get_or_create_stats(registration_number)
    stats.public_vote_count = vote_count
    stats.last_voted_at = last_voted_at

    if commit:
        db.session.commit()
    return stats


def rebuild_all_caches():
    """Recomputes every progress and voting stats row. Used to heal caches after manual edits."""
    jury_member_ids = [m.id for m in JuryMember.query.all()]
    registration_numbers = [s.registration_number for s in Submission.query.all()]

    for jury_member_id in jury_member_ids:
        update_jury_progress(jury_member_id, commit=False)
    for registration_number in registration_numbers:
        update_submission_jury_stats(registration_number, commit=False)
        update_public_vote_count(registration_number, commit=False)

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Failed to rebuild jury caches')
        raise PersistenceFailure('Failed to rebuild jury caches') from e
    logger.info('Rebuilt jury caches: %s jury members, %s submissions',
                len(jury_member_ids), len(registration_numbers))
    return {'jury_members': len(jury_member_ids), 'submissions': len(registration_numbers)}
