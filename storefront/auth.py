"""Session-cookie authentication helpers."""

import logging
from functools import wraps

from flask import g, jsonify, session
from werkzeug.security import check_password_hash, generate_password_hash

from storefront.storage import storage

logger = logging.getLogger(__name__)


def hash_password(password):
    return generate_password_hash(password)


def verify_password(user, password):
    return check_password_hash(user['password'], password)


def public_user(user):
    """User record safe to send over the wire (no password hash)."""
    return {k: v for k, v in user.items() if k != 'password'}


def authenticate(username, password):
    user = storage.get_user_by_username(username)
    if user is None:
        logger.info("Login failed for %r: unknown username", username)
        return None
    if not verify_password(user, password):
        logger.info("Login failed for %r: wrong password", username)
        return None
    return user


def login_user(user):
    session.clear()
    session.permanent = True
    session['user_id'] = user['id']
    g.current_user = user


def logout_user():
    session.clear()
    g.current_user = None


def load_current_user():
    """before_request hook: resolve the session's user id to a record."""
    g.current_user = None
    uid = session.get('user_id')
    if uid is None:
        return
    user = storage.get_user(uid)
    if user is None:
        # user vanished (store reset), drop the stale session
        session.clear()
        return
    g.current_user = user


def current_user():
    return g.get('current_user')


def login_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        if current_user() is None:
            return jsonify({'message': 'Unauthorized'}), 401
        return f(*args, **kwargs)
    return decorated


def admin_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        user = current_user()
        if user is None or not user.get('isAdmin'):
            return jsonify({'message': 'Forbidden'}), 403
        return f(*args, **kwargs)
    return decorated
