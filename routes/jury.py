# routes/jury.py
# Judge-facing endpoints: dashboard, entries to score, score submission

from functools import wraps
from flask import Blueprint, g, jsonify, request, session
from errors import AuthRequired, Forbidden, InvalidScore, NotFound, get_json_object
from jury_service import (
    get_jury_dashboard_stats, get_jury_member_for_user, get_jury_score,
    get_submissions_for_jury, submit_jury_score,
)
from marking_scheme import SCORE_FIELDS, get_marking_scheme
from models import Submission

jury_bp = Blueprint('jury', __name__, url_prefix='/jury')


def jury_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            raise AuthRequired()
        jury_member = get_jury_member_for_user(session['user_id'])
        if not jury_member or not jury_member.is_active:
            raise Forbidden('Not authorized as jury member')
        g.jury_member = jury_member
        return f(*args, **kwargs)
    return decorated_function


@jury_bp.route('/dashboard')
@jury_required
def dashboard():
    stats = get_jury_dashboard_stats(g.jury_member.id)
    return jsonify({
        'success': True,
        'jury_member': stats['jury_member'].to_dict(),
        'progress': stats['progress'],
    })


@jury_bp.route('/marking-scheme')
@jury_required
def marking_scheme():
    return jsonify({'success': True, 'marking_scheme': get_marking_scheme()})


@jury_bp.route('/submissions')
@jury_required
def submissions():
    entries = get_submissions_for_jury(
        g.jury_member.id,
        status=request.args.get('status') or None,
        category=request.args.get('category') or None,
    )
    return jsonify({
        'success': True,
        'submissions': [
            {
                **entry['submission'].to_dict(),
                'my_score': entry['score'].to_dict() if entry['score'] else None,
                'voting_stats': entry['voting_stats'].to_dict() if entry['voting_stats'] else None,
            }
            for entry in entries
        ],
    })


@jury_bp.route('/score/<registration_number>', methods=['GET'])
@jury_required
def get_score(registration_number):
    submission = Submission.query.filter_by(registration_number=registration_number).first()
    if not submission:
        raise NotFound('Submission', registration_number)

    score = get_jury_score(g.jury_member.id, registration_number)
    return jsonify({
        'success': True,
        'submission': submission.to_dict(),
        'score': score.to_dict() if score else None,
    })


@jury_bp.route('/score/<registration_number>', methods=['POST'])
@jury_required
def post_score(registration_number):
    data = get_json_object(InvalidScore(message='Scores must be sent as a JSON object'))
    scores = {field: data.get(field) for field in SCORE_FIELDS}

    score = submit_jury_score(
        g.jury_member.id,
        registration_number,
        scores,
        comments=data.get('comments'),
    )
    return jsonify({'success': True, 'score': score.to_dict()}), 201
