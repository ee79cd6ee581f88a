import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Tuple

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup and passed to create_app."""

    database_url: str
    jwt_secret: str
    token_ttl: timedelta = timedelta(days=15)
    bcrypt_rounds: int = 10
    cors_origins: Tuple[str, ...] = ("http://localhost:3000",)
    log_level: str = "DEBUG"
    db_sslmode: Optional[str] = None
    port: int = 3000

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        database_url = os.environ.get('DATABASE_URL')
        if not database_url:
            raise ValueError("DATABASE_URL is not set in .env file")
        if database_url.startswith('postgres://'):
            database_url = database_url.replace('postgres://', 'postgresql://', 1)

        jwt_secret = os.environ.get('JWT_SECRET')
        if not jwt_secret:
            raise ValueError("JWT_SECRET is not set in .env file")

        origins = os.environ.get('CORS_ORIGINS', 'http://localhost:3000')
        return cls(
            database_url=database_url,
            jwt_secret=jwt_secret,
            token_ttl=timedelta(days=int(os.environ.get('TOKEN_TTL_DAYS', 15))),
            bcrypt_rounds=int(os.environ.get('BCRYPT_ROUNDS', 10)),
            cors_origins=tuple(o.strip() for o in origins.split(',') if o.strip()),
            log_level=os.environ.get('LOG_LEVEL', 'DEBUG').upper(),
            db_sslmode=os.environ.get('DB_SSLMODE') or None,
            port=int(os.environ.get('PORT', 3000)),
        )
