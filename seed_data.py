from datetime import datetime
from app import create_app
from extensions import db
from jury_service import add_jury_member, submit_jury_score
from leaderboard import toggle_vote
from logic import rebuild_all_caches
from models import (
    User, Competition, Submission, SubmissionVote,
    JuryMember, JuryScore, JuryScoringProgress, SubmissionVotingStats,
)

# Create the app to get an application context
app = create_app()

with app.app_context():
    db.create_all()

    # --- 1. CLEAN UP ---
    print("Removing old data...")
    # Children before parents
    db.session.query(SubmissionVotingStats).delete()
    db.session.query(JuryScoringProgress).delete()
    db.session.query(JuryScore).delete()
    db.session.query(SubmissionVote).delete()
    db.session.query(JuryMember).delete()
    db.session.query(Submission).delete()
    db.session.query(Competition).delete()
    db.session.query(User).delete()
    db.session.commit()
    print("Clean up finished.")

    # --- 2. DEMO DATA ---
    print("Adding demo data...")

    try:
        admin = User(code='000001', name='Admin', email='admin@example.com', role='ADMIN')
        moderator = User(code='000002', name='Moderator', role='MODERATOR')
        entrant_1 = User(code='100001', name='Entrant One', role='MEMBER')
        entrant_2 = User(code='100002', name='Entrant Two', role='MEMBER')
        judge_user_1 = User(code='200001', name='Judge One', role='MEMBER')
        judge_user_2 = User(code='200002', name='Judge Two', role='MEMBER')
        db.session.add_all([admin, moderator, entrant_1, entrant_2, judge_user_1, judge_user_2])
        db.session.commit()

        competition = Competition(
            slug='christmas-in-future-2025',
            title='Christmas in Future 2025',
            year=2025,
            status='JUDGING',
        )
        db.session.add(competition)
        db.session.commit()

        entries = [
            Submission(
                registration_number='XMAS-2025-0001', competition_id=competition.id, user_id=entrant_1.id,
                category='DIGITAL', title='Orbital Pine', key_photograph_url='/uploads/0001.jpg',
                status='PUBLISHED', is_published=True, published_at=datetime(2025, 12, 1, 10, 0),
            ),
            Submission(
                registration_number='XMAS-2025-0002', competition_id=competition.id, user_id=entrant_2.id,
                category='PHYSICAL', title='Recycled Canopy', key_photograph_url='/uploads/0002.jpg',
                status='PUBLISHED', is_published=True, published_at=datetime(2025, 12, 1, 11, 30),
            ),
            Submission(
                registration_number='XMAS-2025-0003', competition_id=competition.id, user_id=entrant_1.id,
                category='PHYSICAL', title='Glass Spire', key_photograph_url='/uploads/0003.jpg',
                status='PUBLISHED', is_published=True, published_at=datetime(2025, 12, 2, 9, 15),
            ),
            # Not published yet: invisible to the jury and the leaderboard
            Submission(
                registration_number='XMAS-2025-0004', competition_id=competition.id, user_id=entrant_2.id,
                category='DIGITAL', title='Draft Entry', status='SUBMITTED',
            ),
        ]
        db.session.add_all(entries)
        db.session.commit()

        judge_1 = add_jury_member(judge_user_1.id, 'Chief Architect', admin.id, competition_id=competition.id)
        judge_2 = add_jury_member(judge_user_2.id, 'Guest Designer', admin.id)

        submit_jury_score(judge_1.id, 'XMAS-2025-0001', {
            'concept_score': 8, 'relevance_score': 12, 'composition_score': 7,
            'balance_score': 6, 'colour_score': 8, 'design_relativity_score': 9,
            'aesthetic_appeal_score': 18, 'unconventional_materials_score': 7,
            'overall_material_score': 4,
        }, comments='Strong concept, well executed.')
        submit_jury_score(judge_2.id, 'XMAS-2025-0002', {
            'concept_score': 9, 'relevance_score': 14, 'composition_score': 8,
            'balance_score': 8, 'colour_score': 7, 'design_relativity_score': 8,
            'aesthetic_appeal_score': 17, 'unconventional_materials_score': 10,
            'overall_material_score': 5,
        })

        toggle_vote('XMAS-2025-0002', entrant_1.id)
        toggle_vote('XMAS-2025-0002', moderator.id)
        toggle_vote('XMAS-2025-0001', entrant_2.id)

        rebuild_all_caches()
        print("Demo data added!")
    except Exception as e:
        db.session.rollback()
        print(f"Failed to add demo data: {e}")
