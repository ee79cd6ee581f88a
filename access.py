import functools
import logging

from flask import current_app, g, request

from database import db
from errors import InconsistentState, RoleMismatch, Unauthenticated
from models import User

logger = logging.getLogger(__name__)


def _extract_token(headers):
    raw = (headers.get('Authorization') or '').strip()
    if raw.lower().startswith('bearer '):
        raw = raw[7:].strip()
    return raw


def authenticate(headers, credentials):
    """Resolve the request's credential to a user id.

    No credential is Unauthenticated (401); a credential that fails
    verification is InvalidToken (400).
    """
    token = _extract_token(headers)
    if not token:
        logger.debug("Unauthenticated request: no credential")
        raise Unauthenticated()
    return credentials.verify_token(token)


def load_user(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        logger.error(f"Token for user_id={user_id} has no user record")
        raise InconsistentState()
    return user


def authorize_role(user_id, required_role=None):
    user = load_user(user_id)
    if required_role is not None and user.role != required_role:
        logger.debug(f"Access denied: required role {required_role}, got {user.role}")
        raise RoleMismatch()
    return user


def login_required(role=None):
    def decorator(f):
        @functools.wraps(f)
        def wrapped(*args, **kwargs):
            credentials = current_app.extensions['credentials']
            user_id = authenticate(request.headers, credentials)
            g.current_user = authorize_role(user_id, role)
            return f(*args, **kwargs)
        return wrapped
    return decorator
