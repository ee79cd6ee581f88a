import logging

from flask import Flask, jsonify, request
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from config import Settings
from credentials import CredentialService
from database import db, init_db
from errors import LibraryError
from lending import LendingEngine
from routes import api

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    @app.errorhandler(LibraryError)
    def handle_library_error(error):
        if error.status_code >= 500:
            logger.error(f"Integrity fault: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(error):
        db.session.rollback()
        logger.error(f"Database error: {str(error)}")
        return jsonify({'error': 'Database operation failed'}), 500

    @app.errorhandler(Exception)
    def handle_error(error):
        if isinstance(error, HTTPException):
            return error
        logger.error(f"Unhandled error: {str(error)}")
        return jsonify({'error': 'An unexpected error occurred'}), 500


def create_app(settings):
    logging.basicConfig(level=settings.log_level, format='%(asctime)s - %(levelname)s - %(message)s')

    app = Flask(__name__)
    CORS(app, origins=list(settings.cors_origins))

    init_db(app, settings)
    app.extensions['settings'] = settings
    app.extensions['credentials'] = CredentialService(
        settings.jwt_secret, settings.token_ttl, rounds=settings.bcrypt_rounds)
    app.extensions['lending'] = LendingEngine()

    @app.before_request
    def log_request():
        logger.debug(f"Incoming request: {request.method} {request.path}")

    app.register_blueprint(api)
    register_error_handlers(app)
    return app


if __name__ == '__main__':
    settings = Settings.from_env()
    app = create_app(settings)
    with app.app_context():
        db.create_all()
        logger.debug(f"Database connected: {app.config['SQLALCHEMY_DATABASE_URI']}")
    app.run(host='0.0.0.0', port=settings.port, debug=True)
