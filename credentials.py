"""Password hashing and bearer-token signing.

Passwords are hashed with bcrypt. Session tokens are HS256 JWTs carrying the
user id and an expiry; they are stateless and stay valid until they expire.
"""

import logging
from datetime import datetime, timezone

import bcrypt
import jwt

from errors import InvalidToken

logger = logging.getLogger(__name__)

ALGORITHM = 'HS256'


class CredentialService:
    def __init__(self, secret, token_ttl, rounds=10):
        if not secret:
            raise ValueError("a signing secret is required")
        self._secret = secret
        self.token_ttl = token_ttl
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=self.rounds))
        return hashed.decode('utf-8')

    def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
        except ValueError:
            logger.error("Stored password hash is malformed")
            return False

    def issue_token(self, user_id: int, now: datetime = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            'user_id': user_id,
            'iat': now,
            'exp': now + self.token_ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify_token(self, token: str) -> int:
        """Return the user id asserted by ``token`` or raise InvalidToken."""
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM],
                                 options={'require': ['exp', 'user_id']})
        except jwt.ExpiredSignatureError:
            logger.debug("Rejected expired token")
            raise InvalidToken('Token expired')
        except jwt.InvalidTokenError as e:
            logger.debug(f"Rejected token: {str(e)}")
            raise InvalidToken()
        user_id = payload['user_id']
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidToken()
        return user_id
