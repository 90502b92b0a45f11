# routes/auth.py
# Session login. Stands in for the real identity provider: it only has to
# put a user id and role into the session.

from functools import wraps
from flask import Blueprint, jsonify, session
from extensions import db
from errors import AuthRequired, NotFound, get_json_object
from models import User

auth_bp = Blueprint('auth', __name__)


def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            raise AuthRequired()
        return f(*args, **kwargs)
    return decorated_function


def current_user():
    user_id = session.get('user_id')
    if user_id is None:
        return None
    user = db.session.get(User, user_id)
    if not user:
        # The account was removed while the session was alive
        session.clear()
    return user


@auth_bp.route('/login', methods=['POST'])
def login():
    data = get_json_object()
    user_code = data.get('code')
    if not user_code:
        raise AuthRequired('Please provide your access code.')

    user = User.query.filter_by(code=user_code).first()
    if not user:
        raise AuthRequired('Invalid access code.')

    session.clear()
    session['user_id'] = user.id
    session['user_role'] = user.role
    return jsonify({'success': True, 'user': user.to_dict()})


@auth_bp.route('/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({'success': True})


@auth_bp.route('/me')
@login_required
def me():
    user = current_user()
    if not user:
        raise NotFound('User')
    return jsonify({'success': True, 'user': user.to_dict()})
