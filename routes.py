import logging

from flask import Blueprint, current_app, g, jsonify, request
from sqlalchemy.sql import text

import accounts
import catalog
from access import login_required
from database import db
from errors import ValidationError
from models import Role

logger = logging.getLogger(__name__)

api = Blueprint('api', __name__)


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _book_id(data):
    book_id = data.get('bookId', data.get('book_id'))
    if isinstance(book_id, str) and book_id.isascii() and book_id.isdecimal():
        book_id = int(book_id)
    if not isinstance(book_id, int) or isinstance(book_id, bool):
        raise ValidationError('Missing or invalid bookId')
    return book_id


@api.route('/')
def home():
    return jsonify({"message": "Library Lending Backend"})


@api.route('/health', methods=['GET'])
def health():
    db.session.execute(text('SELECT 1'))
    return jsonify({'status': 'ok'}), 200


@api.route('/users/signup', methods=['POST'])
def signup():
    user = accounts.register_user(current_app.extensions['credentials'], _json_body())
    return jsonify(user.to_dict()), 201


@api.route('/users/login', methods=['POST'])
def login():
    token = accounts.login(current_app.extensions['credentials'], _json_body())
    return jsonify({'token': token}), 200


@api.route('/users/me', methods=['GET'])
@login_required()
def me():
    return jsonify(g.current_user.to_dict()), 200


@api.route('/books/create', methods=['POST'])
@login_required(role=Role.AUTHOR)
def create_book():
    book = catalog.publish_book(g.current_user.id, _json_body())
    return jsonify(book.to_dict()), 201


@api.route('/books', methods=['GET'])
def get_books():
    books = catalog.search_books(request.args)
    return jsonify([b.to_dict() for b in books]), 200


@api.route('/reader/books/borrow', methods=['POST'])
@login_required(role=Role.READER)
def borrow_book():
    book_id = _book_id(_json_body())
    reader = current_app.extensions['lending'].borrow(g.current_user.id, book_id)
    return jsonify({
        'message': 'Book borrowed successfully',
        'borrowed_books': list(reader.borrowed_books),
    }), 200


@api.route('/reader/books/return', methods=['POST'])
@login_required()
def return_book():
    book_id = _book_id(_json_body())
    reader = current_app.extensions['lending'].return_book(g.current_user.id, book_id)
    return jsonify({
        'message': 'Book returned successfully',
        'borrowed_books': list(reader.borrowed_books),
    }), 200
