import functools
import logging
import time

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

logger = logging.getLogger(__name__)

db = SQLAlchemy()


def init_db(app, settings):
    app.config['SQLALCHEMY_DATABASE_URI'] = settings.database_url
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    if not settings.is_sqlite:
        app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {
            'connect_args': {'connect_timeout': 10},
            'pool_size': 5,
            'max_overflow': 10,
            'pool_timeout': 30,
        }
        if settings.db_sslmode:
            app.config['SQLALCHEMY_ENGINE_OPTIONS']['connect_args']['sslmode'] = settings.db_sslmode
    try:
        db.init_app(app)
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}")
        raise


def retry_db_operation(max_attempts=3, delay=0.05, exhausted=None):
    """Retry a unit of work on transient store errors and optimistic-lock conflicts.

    The session is rolled back before every retry so the next attempt starts
    from a fresh read. When ``exhausted`` is given and the last failure was a
    conflict, it is called with the wrapped call's arguments against the
    rolled-back session and the error it returns is raised instead of the raw
    ``StaleDataError``.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            attempts = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except (OperationalError, StaleDataError) as e:
                    db.session.rollback()
                    attempts += 1
                    logger.error(f"Database operation failed: {str(e)}")
                    if attempts >= max_attempts:
                        if exhausted is not None and isinstance(e, StaleDataError):
                            raise exhausted(*args, **kwargs) from e
                        raise
                    time.sleep(delay)
                    logger.debug(f"Retrying database operation ({attempts}/{max_attempts})")
        return wrapper
    return decorator
