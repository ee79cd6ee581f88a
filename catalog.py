import logging

from access import load_user
from database import db, retry_db_operation
from errors import LibraryError, RoleMismatch, ValidationError
from models import Book, Role

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ('title', 'author', 'genre')


def _validate_book(data):
    columns = Book.__table__.c
    title = data.get('title')
    if not isinstance(title, str) or not title.strip():
        raise ValidationError('Missing or invalid field: title')
    title = title.strip()
    if len(title) > columns.title.type.length:
        raise ValidationError(f"title must be at most {columns.title.type.length} characters")
    genre = data.get('genre')
    if genre is not None and not isinstance(genre, str):
        raise ValidationError('Invalid field: genre')
    if genre is not None and len(genre) > columns.genre.type.length:
        raise ValidationError(f"genre must be at most {columns.genre.type.length} characters")
    stock = data.get('stock')
    if not isinstance(stock, int) or isinstance(stock, bool) or stock < 0:
        raise ValidationError('stock must be a non-negative integer')
    return title, genre, stock


@retry_db_operation()
def publish_book(author_id, data):
    """Create a book and link it to its author in one transaction."""
    try:
        author = load_user(author_id)
        if author.role != Role.AUTHOR:
            raise RoleMismatch()
        title, genre, stock = _validate_book(data)

        book = Book(title=title, author=author.name, genre=genre, stock=stock)
        db.session.add(book)
        db.session.flush()
        author.books_written = list(author.books_written) + [book.id]
        db.session.commit()
    except LibraryError:
        db.session.rollback()
        raise
    logger.info(f"Book published: {title} (book_id={book.id}) by user_id={author_id}")
    return book


def search_books(filters):
    """Exact-match search; missing or empty filters are ignored."""
    criteria = {field: filters[field] for field in SEARCH_FIELDS if filters.get(field)}
    books = Book.query.filter_by(**criteria).order_by(Book.id).all()
    logger.debug(f"Fetched {len(books)} books for {criteria}")
    return books
