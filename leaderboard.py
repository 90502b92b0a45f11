# leaderboard.py
# Public ranking of published entries, the public voting channel and winners

import logging
import math
from datetime import datetime
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from extensions import db
from errors import Forbidden, InvalidFilter, NotFound, PersistenceFailure
from logic import get_or_create_stats, published_submissions_query, update_jury_progress, update_public_vote_count
from marking_scheme import MAX_TOTAL_SCORE
from models import JuryMember, Submission, SubmissionVote, SubmissionVotingStats
from models.submission import SUBMISSION_CATEGORIES

logger = logging.getLogger(__name__)

LEADERBOARD_ORDERINGS = ('votes', 'jury')


def get_leaderboard(competition_id=None, category=None, by='votes'):
    """
    Ranks published entries by public votes (``by='votes'``) or by jury
    average (``by='jury'``, unscored entries last). Equal values are broken
    by earlier publication, then by lower id, so ranks are stable.
    """
    if by not in LEADERBOARD_ORDERINGS:
        raise InvalidFilter(f'Unknown leaderboard ordering: {by}')
    if category is not None and category not in SUBMISSION_CATEGORIES:
        raise InvalidFilter(f'Unknown category: {category}')

    query = published_submissions_query(competition_id).outerjoin(
        SubmissionVotingStats,
        SubmissionVotingStats.registration_number == Submission.registration_number,
    ).add_entity(SubmissionVotingStats)
    if category:
        query = query.filter(Submission.category == category)

    if by == 'votes':
        ordering = [func.coalesce(SubmissionVotingStats.public_vote_count, 0).desc()]
    else:
        ordering = [
            SubmissionVotingStats.jury_score_average.is_(None),
            SubmissionVotingStats.jury_score_average.desc(),
        ]
    ordering += [Submission.published_at.asc().nulls_last(), Submission.id.asc()]

    leaderboard = []
    for rank, (submission, stats) in enumerate(query.order_by(*ordering).all(), start=1):
        leaderboard.append({
            'rank': rank,
            'registration_number': submission.registration_number,
            'title': submission.title,
            'category': submission.category,
            'thumbnail': submission.key_photograph_url,
            'vote_count': stats.public_vote_count if stats else 0,
            'jury_vote_count': stats.jury_vote_count if stats else 0,
            'jury_score_average': stats.jury_score_average if stats else None,
            'published_at': submission.published_at.isoformat() if submission.published_at else None,
        })
    return leaderboard


def _get_submission_or_404(registration_number):
    submission = Submission.query.filter_by(registration_number=registration_number).first()
    if not submission:
        raise NotFound('Submission', registration_number)
    return submission


def toggle_vote(registration_number, user_id):
    """Adds the user's vote, or takes it back if they already voted."""
    submission = _get_submission_or_404(registration_number)
    if not submission.is_live:
        raise Forbidden('This submission is not available for voting')

    existing_vote = SubmissionVote.query.filter_by(
        registration_number=registration_number,
        user_id=user_id,
    ).first()

    try:
        if existing_vote:
            db.session.delete(existing_vote)
            has_voted = False
        else:
            db.session.add(SubmissionVote(registration_number=registration_number, user_id=user_id))
            has_voted = True
        db.session.flush()
        stats = update_public_vote_count(registration_number, commit=False)
        db.session.commit()
    except IntegrityError as e:
        # Double click: the other request already recorded this vote
        db.session.rollback()
        raise PersistenceFailure('Vote was already recorded, please retry') from e
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Failed to toggle vote of user %s for %s', user_id, registration_number)
        raise PersistenceFailure('Failed to toggle vote. Please try again.') from e

    logger.info('User %s %s %s', user_id, 'voted for' if has_voted else 'withdrew vote from', registration_number)
    return {'has_voted': has_voted, 'vote_count': stats.public_vote_count}


def get_vote_status(registration_number, user_id=None):
    submission = _get_submission_or_404(registration_number)

    has_voted = False
    if user_id is not None:
        has_voted = SubmissionVote.query.filter_by(
            registration_number=registration_number,
            user_id=user_id,
        ).first() is not None

    stats = submission.voting_stats
    return {
        'has_voted': has_voted,
        'vote_count': stats.public_vote_count if stats else 0,
        'is_published': submission.is_live,
    }


# --- Winners ---

def _winner_dict(submission, stats):
    owner = submission.owner
    return {
        'rank': stats.public_rank,
        'award': stats.award,
        'registration_number': submission.registration_number,
        'participant_name': owner.name if owner and owner.name else 'Unknown',
        'title': submission.title,
        'category': submission.category,
        'thumbnail': submission.key_photograph_url,
        'score': stats.final_score,
    }


def announce_winner(registration_number, award, rank, final_score=None):
    """
    Gives an entry its award and final place. The entry is published if it
    was not already. Without ``final_score`` the current jury average is kept
    as the announced score.
    """
    award = award.strip() if isinstance(award, str) else ''
    if not award:
        raise InvalidFilter('award must be a non-empty string')
    if isinstance(rank, bool) or not isinstance(rank, int) or rank < 1:
        raise InvalidFilter('rank must be a positive integer')
    if final_score is not None:
        if isinstance(final_score, bool) or not isinstance(final_score, (int, float)) \
                or not math.isfinite(final_score) or not 0 <= final_score <= MAX_TOTAL_SCORE:
            raise InvalidFilter(f'final_score must be a number between 0-{MAX_TOTAL_SCORE:g}')

    submission = _get_submission_or_404(registration_number)
    was_live = submission.is_live

    try:
        submission.status = 'PUBLISHED'
        submission.is_published = True
        if submission.published_at is None:
            submission.published_at = datetime.utcnow()

        stats = get_or_create_stats(registration_number)
        stats.award = award
        stats.public_rank = rank
        stats.final_score = float(final_score) if final_score is not None else stats.jury_score_average
        db.session.flush()

        if not was_live:
            # One more entry to score for every judge who can see this competition
            judges = JuryMember.query.filter(or_(
                JuryMember.competition_id.is_(None),
                JuryMember.competition_id == submission.competition_id,
            ))
            for jury_member in judges:
                update_jury_progress(jury_member.id, commit=False)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Failed to announce winner %s', registration_number)
        raise PersistenceFailure('Failed to announce winner') from e

    logger.info('%s announced as winner: %s (rank %s)', registration_number, award, rank)
    return _winner_dict(submission, stats)


def get_winners(competition_id):
    rows = Submission.query.join(
        SubmissionVotingStats,
        SubmissionVotingStats.registration_number == Submission.registration_number,
    ).add_entity(SubmissionVotingStats).filter(
        Submission.competition_id == competition_id,
        SubmissionVotingStats.award.isnot(None),
    ).order_by(SubmissionVotingStats.public_rank.asc().nulls_last(), Submission.id.asc()).all()
    return [_winner_dict(submission, stats) for submission, stats in rows]
