# jury_service.py
# Jury membership, score submission and the judge's workspace

import logging
from datetime import datetime
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from extensions import db
from errors import AlreadyJuryMember, Forbidden, InvalidFilter, InvalidScore, NotFound, PersistenceFailure
from logic import published_submissions_query, update_jury_progress, update_submission_jury_stats
from marking_scheme import calculate_total_score, validate_scores
from models import Competition, JuryMember, JuryScore, Submission, SubmissionVotingStats, User
from models.submission import SUBMISSION_CATEGORIES

logger = logging.getLogger(__name__)

SCORING_STATUS_FILTERS = ('scored', 'not-scored')

_UNSET = object()


def _get_jury_member_or_404(jury_member_id):
    jury_member = db.session.get(JuryMember, jury_member_id)
    if not jury_member:
        raise NotFound('Jury member', jury_member_id)
    return jury_member


def _commit(action):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Failed to %s', action)
        raise PersistenceFailure(f'Failed to {action}') from e


# --- Access control ---

def is_jury_member(user_id):
    return JuryMember.query.filter_by(user_id=user_id, is_active=True).first() is not None


def get_jury_member_for_user(user_id):
    return JuryMember.query.filter_by(user_id=user_id).first()


# --- Membership management (admin) ---

def add_jury_member(user_id, title, assigned_by, competition_id=None):
    if not db.session.get(User, user_id):
        raise NotFound('User', user_id)
    if competition_id is not None and not db.session.get(Competition, competition_id):
        raise NotFound('Competition', competition_id)
    if JuryMember.query.filter_by(user_id=user_id).first():
        raise AlreadyJuryMember('User is already a jury member')

    jury_member = JuryMember(
        user_id=user_id,
        title=title,
        assigned_by=assigned_by,
        competition_id=competition_id,
    )
    db.session.add(jury_member)
    try:
        db.session.flush()
        # Start the member with an empty dashboard
        update_jury_progress(jury_member.id, commit=False)
        db.session.commit()
    except IntegrityError as e:
        # Lost a race with another admin adding the same user
        db.session.rollback()
        raise AlreadyJuryMember('User is already a jury member') from e
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Failed to add jury member for user %s', user_id)
        raise PersistenceFailure('Failed to add jury member') from e

    logger.info('User %s added to the jury by %s (competition=%s)', user_id, assigned_by, competition_id)
    return jury_member


def update_jury_member(jury_member_id, title=None, is_active=None, competition_id=_UNSET):
    jury_member = _get_jury_member_or_404(jury_member_id)

    if title is not None:
        jury_member.title = title
    if is_active is not None:
        jury_member.is_active = is_active

    scope_changed = False
    if competition_id is not _UNSET and competition_id != jury_member.competition_id:
        if competition_id is not None and not db.session.get(Competition, competition_id):
            raise NotFound('Competition', competition_id)
        jury_member.competition_id = competition_id
        scope_changed = True

    if scope_changed:
        # The number of assignable entries depends on the scope
        update_jury_progress(jury_member.id, commit=False)
    _commit('update jury member')
    logger.info('Jury member %s updated', jury_member.id)
    return jury_member


def remove_jury_member(jury_member_id):
    jury_member = _get_jury_member_or_404(jury_member_id)
    jury_member.is_active = False
    _commit('deactivate jury member')
    logger.info('Jury member %s deactivated', jury_member.id)
    return jury_member


def delete_jury_member(jury_member_id):
    jury_member = _get_jury_member_or_404(jury_member_id)
    # Stats of every entry this member scored go stale once the scores are gone
    touched = sorted({s.registration_number for s in jury_member.scores})

    db.session.delete(jury_member)
    try:
        db.session.flush()
        for registration_number in touched:
            update_submission_jury_stats(registration_number, commit=False)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Failed to delete jury member %s', jury_member_id)
        raise PersistenceFailure('Failed to delete jury member') from e

    logger.info('Jury member %s deleted, %s submission stats recomputed', jury_member_id, len(touched))


def list_jury_members(competition_id=None):
    query = JuryMember.query
    if competition_id is not None:
        query = query.filter_by(competition_id=competition_id)
    return query.order_by(JuryMember.created_at.desc(), JuryMember.id.desc()).all()


# --- Scoring ---

def _get_scorable_submission(jury_member, registration_number):
    submission = Submission.query.filter_by(registration_number=registration_number).first()
    if not submission:
        raise NotFound('Submission', registration_number)
    # Unpublished or out-of-scope entries are invisible to this judge
    if not submission.is_live:
        raise NotFound('Submission', registration_number)
    if jury_member.competition_id is not None and submission.competition_id != jury_member.competition_id:
        raise NotFound('Submission', registration_number)
    return submission


def submit_jury_score(jury_member_id, registration_number, scores, comments=None):
    """
    Validates and stores one judge's evaluation of one entry.

    A second evaluation of the same entry by the same judge replaces the
    first. The judge's progress and the entry's jury stats are recomputed in
    the same transaction, so either all three rows change or none do.
    """
    jury_member = _get_jury_member_or_404(jury_member_id)
    if not jury_member.is_active:
        raise Forbidden('Not authorized as jury member')
    _get_scorable_submission(jury_member, registration_number)

    try:
        values = validate_scores(scores)
    except InvalidScore as e:
        logger.warning('Rejected score from jury member %s for %s: %s',
                       jury_member.id, registration_number, e.message)
        raise
    total_score = calculate_total_score(values)

    try:
        jury_score = JuryScore.query.filter_by(
            jury_member_id=jury_member.id,
            registration_number=registration_number,
        ).first()
        if jury_score:
            for field, value in values.items():
                setattr(jury_score, field, value)
            jury_score.comments = comments
            jury_score.total_score = total_score
            jury_score.submitted_at = datetime.utcnow()
        else:
            jury_score = JuryScore(
                jury_member_id=jury_member.id,
                registration_number=registration_number,
                total_score=total_score,
                comments=comments,
                **values
            )
            db.session.add(jury_score)
        db.session.flush()

        update_jury_progress(jury_member.id, commit=False)
        update_submission_jury_stats(registration_number, commit=False)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Failed to store score from jury member %s for %s', jury_member.id, registration_number)
        raise PersistenceFailure('Failed to submit score') from e

    logger.info('Jury member %s scored %s: %s', jury_member.id, registration_number, total_score)
    return jury_score


def get_jury_score(jury_member_id, registration_number):
    return JuryScore.query.filter_by(
        jury_member_id=jury_member_id,
        registration_number=registration_number,
    ).first()


# --- Judge workspace ---

def get_submissions_for_jury(jury_member_id, status=None, category=None):
    if status is not None and status not in SCORING_STATUS_FILTERS:
        raise InvalidFilter(f'Unknown status filter: {status}')
    if category is not None and category not in SUBMISSION_CATEGORIES:
        raise InvalidFilter(f'Unknown category: {category}')

    jury_member = _get_jury_member_or_404(jury_member_id)

    query = published_submissions_query(jury_member.competition_id)
    if category:
        query = query.filter(Submission.category == category)
    submissions = query.order_by(Submission.created_at.desc(), Submission.id.desc()).all()

    registration_numbers = [s.registration_number for s in submissions]
    own_scores = {}
    stats_map = {}
    if registration_numbers:
        own_scores = {
            s.registration_number: s
            for s in JuryScore.query.filter(
                JuryScore.jury_member_id == jury_member.id,
                JuryScore.registration_number.in_(registration_numbers),
            )
        }
        stats_map = {
            s.registration_number: s
            for s in SubmissionVotingStats.query.filter(
                SubmissionVotingStats.registration_number.in_(registration_numbers)
            )
        }

    results = []
    for submission in submissions:
        score = own_scores.get(submission.registration_number)
        if status == 'scored' and score is None:
            continue
        if status == 'not-scored' and score is not None:
            continue
        stats = stats_map.get(submission.registration_number)
        results.append({
            'submission': submission,
            'score': score,
            'voting_stats': stats,
        })
    return results


def get_jury_dashboard_stats(jury_member_id):
    jury_member = _get_jury_member_or_404(jury_member_id)
    progress = jury_member.progress
    return {
        'jury_member': jury_member,
        'progress': progress.to_dict() if progress else {
            'total_assigned_entries': 0,
            'submitted_scores': 0,
            'completion_percentage': 0,
            'average_score_given': None,
            'last_scored_at': None,
        },
    }
