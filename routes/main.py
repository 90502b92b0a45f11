# routes/main.py
# Public endpoints: leaderboard, winners and voting

from flask import Blueprint, jsonify, request, session
from errors import NotFound
from leaderboard import get_leaderboard, get_vote_status, get_winners, toggle_vote
from models import Competition
from routes.auth import login_required

main_bp = Blueprint('main', __name__)


@main_bp.route('/competitions/<slug>/leaderboard')
def competition_leaderboard(slug):
    competition = Competition.query.filter_by(slug=slug).first()
    if not competition:
        raise NotFound('Competition', slug)

    leaderboard = get_leaderboard(
        competition_id=competition.id,
        category=request.args.get('category') or None,
        by=request.args.get('by', 'votes'),
    )
    return jsonify({
        'success': True,
        'competition': competition.to_dict(),
        'leaderboard': leaderboard,
    })


@main_bp.route('/competitions/<slug>/winners')
def competition_winners(slug):
    competition = Competition.query.filter_by(slug=slug).first()
    if not competition:
        raise NotFound('Competition', slug)

    return jsonify({
        'success': True,
        'competition': competition.to_dict(),
        'winners': get_winners(competition.id),
    })


@main_bp.route('/submissions/<registration_number>/vote', methods=['POST'])
@login_required
def vote(registration_number):
    result = toggle_vote(registration_number, session['user_id'])
    return jsonify({'success': True, **result})


@main_bp.route('/submissions/<registration_number>/vote', methods=['GET'])
def vote_status(registration_number):
    result = get_vote_status(registration_number, session.get('user_id'))
    return jsonify({'success': True, 'is_authenticated': 'user_id' in session, **result})
