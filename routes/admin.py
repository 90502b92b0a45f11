# routes/admin.py
# Jury administration: membership CRUD, progress overview, cache rebuild, winners

from functools import wraps
from flask import Blueprint, jsonify, request, session
from errors import AuthRequired, Forbidden, InvalidFilter, get_json_object
from jury_service import (
    add_jury_member, delete_jury_member, list_jury_members,
    remove_jury_member, update_jury_member,
)
from leaderboard import announce_winner
from logic import rebuild_all_caches
from permissions import has_capability

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


def capability_required(capability):
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if 'user_id' not in session:
                raise AuthRequired()
            if not has_capability(session.get('user_role'), capability):
                raise Forbidden('You do not have permission to access this resource.')
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def _optional_int(value, name):
    if value is None or value == '':
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidFilter(f'{name} must be an integer')


def _required_title(value):
    title = value.strip() if isinstance(value, str) else ''
    if not title:
        raise InvalidFilter('title must be a non-empty string')
    return title


def _serialize_member(member):
    data = member.to_dict()
    data['progress'] = member.progress.to_dict() if member.progress else None
    data['score_count'] = len(member.scores)
    return data


@admin_bp.route('/jury', methods=['GET'])
@capability_required('view_jury_progress')
def jury_list():
    competition_id = _optional_int(request.args.get('competition_id'), 'competition_id')
    members = list_jury_members(competition_id)
    return jsonify({'success': True, 'jury_members': [_serialize_member(m) for m in members]})


@admin_bp.route('/jury', methods=['POST'])
@capability_required('manage_jury')
def jury_add():
    data = get_json_object()
    user_id = _optional_int(data.get('user_id'), 'user_id')
    if user_id is None:
        raise InvalidFilter('user_id and title are required')
    title = _required_title(data.get('title'))

    member = add_jury_member(
        user_id=user_id,
        title=title,
        assigned_by=session['user_id'],
        competition_id=_optional_int(data.get('competition_id'), 'competition_id'),
    )
    return jsonify({'success': True, 'jury_member': _serialize_member(member)}), 201


@admin_bp.route('/jury/<int:jury_member_id>', methods=['PATCH'])
@capability_required('manage_jury')
def jury_update(jury_member_id):
    data = get_json_object()
    changes = {}
    if 'title' in data:
        changes['title'] = _required_title(data['title'])
    if 'is_active' in data:
        changes['is_active'] = bool(data['is_active'])
    if 'competition_id' in data:
        changes['competition_id'] = _optional_int(data['competition_id'], 'competition_id')

    member = update_jury_member(jury_member_id, **changes)
    return jsonify({'success': True, 'jury_member': _serialize_member(member)})


@admin_bp.route('/jury/<int:jury_member_id>/deactivate', methods=['POST'])
@capability_required('manage_jury')
def jury_deactivate(jury_member_id):
    member = remove_jury_member(jury_member_id)
    return jsonify({'success': True, 'jury_member': _serialize_member(member)})


@admin_bp.route('/jury/<int:jury_member_id>', methods=['DELETE'])
@capability_required('manage_jury')
def jury_delete(jury_member_id):
    delete_jury_member(jury_member_id)
    return jsonify({'success': True})


@admin_bp.route('/jury/rebuild-caches', methods=['POST'])
@capability_required('rebuild_caches')
def jury_rebuild_caches():
    counts = rebuild_all_caches()
    return jsonify({'success': True, **counts})


@admin_bp.route('/submissions/<registration_number>/winner', methods=['POST'])
@capability_required('announce_winners')
def winner_announce(registration_number):
    data = get_json_object()
    winner = announce_winner(
        registration_number,
        award=data.get('award'),
        rank=data.get('rank'),
        final_score=data.get('final_score'),
    )
    return jsonify({'success': True, 'winner': winner})
