from datetime import datetime

import pytest

from errors import Forbidden, InvalidFilter, NotFound
from jury_service import submit_jury_score
from leaderboard import announce_winner, get_leaderboard, get_vote_status, get_winners, toggle_vote
from logic import rebuild_all_caches
from models import SubmissionVote, SubmissionVotingStats
from conftest import VALID_SCORES, make_submission, make_user


def _vote(registration_number, *users):
    for user in users:
        toggle_vote(registration_number, user.id)


def test_leaderboard_orders_by_votes_with_sequential_ranks(competition, submissions):
    alice, bob, carol = make_user('u1'), make_user('u2'), make_user('u3')
    _vote('REG-C', alice, bob, carol)
    _vote('REG-B', alice)

    board = get_leaderboard(competition_id=competition.id)

    assert [row['registration_number'] for row in board] == ['REG-C', 'REG-B', 'REG-A']
    assert [row['rank'] for row in board] == [1, 2, 3]
    assert [row['vote_count'] for row in board] == [3, 1, 0]
    assert board[0]['thumbnail'] == '/uploads/REG-C.jpg'
    assert board[0]['category'] == 'DIGITAL'


def test_ties_go_to_earlier_publication(competition):
    make_submission(competition, 'LATE', published_at=datetime(2025, 12, 5))
    make_submission(competition, 'EARLY', published_at=datetime(2025, 12, 2))
    make_submission(competition, 'MIDDLE', published_at=datetime(2025, 12, 3))

    board = get_leaderboard(competition_id=competition.id)

    assert [row['registration_number'] for row in board] == ['EARLY', 'MIDDLE', 'LATE']


def test_category_filter_and_unpublished_hidden(competition, submissions):
    board = get_leaderboard(competition_id=competition.id, category='PHYSICAL')
    # REG-D is physical but still a draft
    assert [row['registration_number'] for row in board] == ['REG-B']


def test_leaderboard_is_scoped_to_competition(competition, submissions, other_competition):
    make_submission(other_competition, 'OTHER-1')
    board = get_leaderboard(competition_id=other_competition.id)
    assert [row['registration_number'] for row in board] == ['OTHER-1']
    assert len(get_leaderboard()) == 4


def test_jury_ordering_puts_unscored_last(jury_member, competition, submissions):
    submit_jury_score(jury_member.id, 'REG-B', VALID_SCORES)
    submit_jury_score(jury_member.id, 'REG-C', dict(VALID_SCORES, aesthetic_appeal_score=20))

    board = get_leaderboard(competition_id=competition.id, by='jury')

    assert [row['registration_number'] for row in board] == ['REG-C', 'REG-B', 'REG-A']
    assert board[0]['jury_score_average'] == pytest.approx(81)
    assert board[2]['jury_score_average'] is None
    assert board[2]['jury_vote_count'] == 0


def test_unknown_ordering_or_category(competition):
    with pytest.raises(InvalidFilter):
        get_leaderboard(competition_id=competition.id, by='views')
    with pytest.raises(InvalidFilter):
        get_leaderboard(competition_id=competition.id, category='AUDIO')


def test_toggle_vote_adds_then_removes(submissions):
    voter = make_user('voter')

    first = toggle_vote('REG-A', voter.id)
    assert first == {'has_voted': True, 'vote_count': 1}
    assert get_vote_status('REG-A', voter.id)['has_voted'] is True

    second = toggle_vote('REG-A', voter.id)
    assert second == {'has_voted': False, 'vote_count': 0}
    assert SubmissionVote.query.count() == 0
    stats = SubmissionVotingStats.query.filter_by(registration_number='REG-A').one()
    assert stats.public_vote_count == 0


def test_public_votes_do_not_touch_jury_stats(jury_member, submissions):
    submit_jury_score(jury_member.id, 'REG-A', VALID_SCORES)
    toggle_vote('REG-A', make_user('voter').id)

    stats = SubmissionVotingStats.query.filter_by(registration_number='REG-A').one()
    assert stats.public_vote_count == 1
    assert stats.jury_vote_count == 1
    assert stats.jury_score_average == pytest.approx(79)


def test_voting_requires_published_submission(submissions):
    voter = make_user('voter')
    with pytest.raises(Forbidden):
        toggle_vote('REG-D', voter.id)
    with pytest.raises(NotFound):
        toggle_vote('REG-NOPE', voter.id)


def test_vote_status_for_anonymous_visitor(submissions):
    status = get_vote_status('REG-A')
    assert status == {'has_voted': False, 'vote_count': 0, 'is_published': True}


def test_entries_without_publication_date_rank_after_dated_ties(db, competition, submissions):
    undated = make_submission(competition, 'REG-UNDATED')
    undated.published_at = None
    db.session.commit()

    board = get_leaderboard(competition_id=competition.id)

    assert [row['registration_number'] for row in board] == ['REG-A', 'REG-B', 'REG-C', 'REG-UNDATED']
    assert board[-1]['published_at'] is None


def test_announce_winner_keeps_jury_average_as_score(jury_member, competition, submissions):
    submit_jury_score(jury_member.id, 'REG-B', VALID_SCORES)

    winner = announce_winner('REG-B', 'Gold', 1)

    assert winner['rank'] == 1
    assert winner['award'] == 'Gold'
    assert winner['score'] == pytest.approx(79)
    assert winner['participant_name'] == 'Unknown'
    stats = SubmissionVotingStats.query.filter_by(registration_number='REG-B').one()
    assert stats.jury_score_average == pytest.approx(79)


def test_announcing_a_draft_publishes_it(jury_member, competition, submissions):
    draft = submissions['D']

    announce_winner('REG-D', 'Jury Special Mention', 3, final_score=88.5)

    assert draft.is_live
    assert draft.published_at is not None
    # The judge now has one more entry to score
    assert jury_member.progress.total_assigned_entries == 4
    assert get_vote_status('REG-D')['is_published'] is True


def test_winners_are_listed_by_rank(competition, other_competition, submissions):
    owner = make_user('100001', name='Entrant One')
    submissions['C'].user_id = owner.id
    announce_winner('REG-A', 'Silver', 2, final_score=80)
    announce_winner('REG-C', 'Gold', 1, final_score=91)
    make_submission(other_competition, 'OTHER-1')
    announce_winner('OTHER-1', 'Gold', 1, final_score=70)

    winners = get_winners(competition.id)

    assert [(w['rank'], w['registration_number']) for w in winners] == [(1, 'REG-C'), (2, 'REG-A')]
    assert winners[0]['participant_name'] == 'Entrant One'
    assert winners[0]['thumbnail'] == '/uploads/REG-C.jpg'
    assert get_winners(other_competition.id)[0]['registration_number'] == 'OTHER-1'


def test_reannouncing_replaces_award_and_survives_rebuild(jury_member, submissions):
    submit_jury_score(jury_member.id, 'REG-A', VALID_SCORES)
    announce_winner('REG-A', 'Bronze', 3, final_score=75)
    announce_winner('REG-A', 'Silver', 2, final_score=82)

    rebuild_all_caches()

    stats = SubmissionVotingStats.query.filter_by(registration_number='REG-A').one()
    assert (stats.award, stats.public_rank, stats.final_score) == ('Silver', 2, 82)
    assert stats.jury_score_average == pytest.approx(79)


@pytest.mark.parametrize('award, rank, final_score', [
    ('', 1, None),
    (None, 1, None),
    ('Gold', 0, None),
    ('Gold', '1', None),
    ('Gold', True, None),
    ('Gold', 1, 101),
    ('Gold', 1, 'high'),
])
def test_announce_winner_rejects_bad_input(submissions, award, rank, final_score):
    with pytest.raises(InvalidFilter):
        announce_winner('REG-A', award, rank, final_score)
    assert SubmissionVotingStats.query.count() == 0


def test_announce_winner_unknown_submission(app):
    with pytest.raises(NotFound):
        announce_winner('REG-NOPE', 'Gold', 1)
