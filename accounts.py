import logging

from sqlalchemy.exc import IntegrityError

from database import db, retry_db_operation
from errors import DuplicateEmail, InvalidCredentials, NotFound, ValidationError
from models import Role, User

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def _require_text(data, key, max_length=None):
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Missing or invalid field: {key}")
    if max_length is not None and len(value.strip()) > max_length:
        raise ValidationError(f"{key} must be at most {max_length} characters")
    return value


@retry_db_operation()
def register_user(credentials, data):
    name = _require_text(data, 'name', User.__table__.c.name.type.length).strip()
    email = _require_text(data, 'email', User.__table__.c.email.type.length).strip()
    password = _require_text(data, 'password')
    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    role = data.get('role')
    if role not in Role.values():
        raise ValidationError(f"role must be one of {', '.join(Role.values())}")

    if User.query.filter_by(email=email).first():
        logger.debug(f"Duplicate email on signup: {email}")
        raise DuplicateEmail()

    user = User(
        name=name,
        email=email,
        password_hash=credentials.hash_password(password),
        role=role,
        borrowed_books=[],
        books_written=[],
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # lost a race with a concurrent signup for the same email
        db.session.rollback()
        logger.debug(f"Duplicate email on signup: {email}")
        raise DuplicateEmail()
    logger.info(f"User registered: {email} ({role})")
    return user


@retry_db_operation()
def login(credentials, data):
    email = _require_text(data, 'email').strip()
    password = _require_text(data, 'password')

    user = User.query.filter_by(email=email).first()
    if not user:
        logger.debug(f"No user found for email: {email}")
        raise NotFound('User not found')
    if not credentials.verify_password(password, user.password_hash):
        logger.debug(f"Password mismatch for user: {email}")
        raise InvalidCredentials()
    logger.debug(f"Token issued for user_id={user.id}")
    return credentials.issue_token(user.id)
