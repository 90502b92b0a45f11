"""
Shared fixtures: an app on in-memory SQLite, a test client and a small
competition with published and draft entries.
"""
from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from app import create_app
from config import TestConfig
from extensions import db as _db
from models import Competition, JuryMember, Submission, User


VALID_SCORES = {
    'concept_score': 8,
    'relevance_score': 12,
    'composition_score': 7,
    'balance_score': 6,
    'colour_score': 8,
    'design_relativity_score': 9,
    'aesthetic_appeal_score': 18,
    'unconventional_materials_score': 7,
    'overall_material_score': 4,
}


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(code, role='MEMBER', name=None):
    user = User(code=code, role=role, name=name or code)
    _db.session.add(user)
    _db.session.commit()
    return user


@pytest.fixture
def admin(app):
    return make_user('000001', role='ADMIN', name='Admin')


@pytest.fixture
def judge_user(app):
    return make_user('200001', name='Judge')


@pytest.fixture
def competition(app):
    competition = Competition(slug='christmas-in-future', title='Christmas in Future', year=2025, status='JUDGING')
    _db.session.add(competition)
    _db.session.commit()
    return competition


@pytest.fixture
def other_competition(app):
    competition = Competition(slug='tree-without-a-tree', title='Tree Without a Tree', year=2024, status='COMPLETED')
    _db.session.add(competition)
    _db.session.commit()
    return competition


def make_submission(competition, registration_number, category='DIGITAL', published=True, published_at=None):
    submission = Submission(
        registration_number=registration_number,
        competition_id=competition.id,
        category=category,
        title=f'Entry {registration_number}',
        key_photograph_url=f'/uploads/{registration_number}.jpg',
        status='PUBLISHED' if published else 'SUBMITTED',
        is_published=published,
        published_at=published_at if published_at is not None else (datetime(2025, 12, 1) if published else None),
    )
    _db.session.add(submission)
    _db.session.commit()
    return submission


@pytest.fixture
def submissions(competition):
    """Three published entries (A, B, C) and one draft (D)."""
    return {
        'A': make_submission(competition, 'REG-A', 'DIGITAL', published_at=datetime(2025, 12, 1, 9)),
        'B': make_submission(competition, 'REG-B', 'PHYSICAL', published_at=datetime(2025, 12, 1, 10)),
        'C': make_submission(competition, 'REG-C', 'DIGITAL', published_at=datetime(2025, 12, 1, 11)),
        'D': make_submission(competition, 'REG-D', 'PHYSICAL', published=False),
    }


@pytest.fixture
def jury_member(judge_user, admin, competition):
    member = JuryMember(user_id=judge_user.id, title='Chief Juror', assigned_by=admin.id, competition_id=competition.id)
    _db.session.add(member)
    _db.session.commit()
    return member


def login(client, user):
    response = client.post('/login', json={'code': user.code})
    assert response.status_code == 200
    return response


def break_commit(monkeypatch):
    """Makes the next commits fail as a lost database connection would."""
    def failing_commit():
        raise OperationalError('COMMIT', {}, Exception('disk I/O error'))

    # Patch the concrete session; the scoped proxy forwards to it
    monkeypatch.setattr(_db.session(), 'commit', failing_commit)
