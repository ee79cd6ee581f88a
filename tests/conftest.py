import pytest

from app import create_app
from config import Settings
from database import db
from models import Book, User


@pytest.fixture
def app(tmp_path):
    # Each test gets its own SQLite file so threads can share it
    settings = Settings(
        database_url=f"sqlite:///{tmp_path / 'library_test.db'}",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        log_level="WARNING",
    )
    app = create_app(settings)
    app.config['TESTING'] = True
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def lending(app):
    return app.extensions['lending']


@pytest.fixture
def credentials(app):
    return app.extensions['credentials']


@pytest.fixture
def make_user(app):
    counter = {'n': 0}

    def _make_user(role="Reader", name=None, borrowed_books=None):
        counter['n'] += 1
        user = User(
            name=name or f"{role} {counter['n']}",
            email=f"{role.lower()}{counter['n']}@example.com",
            password_hash="not-a-real-hash",
            role=role,
            borrowed_books=list(borrowed_books or []),
            books_written=[],
        )
        db.session.add(user)
        db.session.commit()
        return user.id

    return _make_user


@pytest.fixture
def make_book(app):
    def _make_book(title="Dune", author="Frank Herbert", genre="Science Fiction", stock=1):
        book = Book(title=title, author=author, genre=genre, stock=stock)
        db.session.add(book)
        db.session.commit()
        return book.id

    return _make_book


@pytest.fixture
def auth_header(credentials):
    def _auth_header(user_id):
        return {"Authorization": credentials.issue_token(user_id)}

    return _auth_header


def stock_of(book_id):
    db.session.expire_all()
    return db.session.get(Book, book_id).stock


def loans_of(user_id):
    db.session.expire_all()
    return list(db.session.get(User, user_id).borrowed_books)
