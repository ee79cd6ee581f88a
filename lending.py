"""Borrow and return workflows.

Stock is only ever changed by a single conditional UPDATE, so two borrowers
racing for the last copy cannot both win. The reader's loan list is guarded by
the ``users.version`` column: if another request changed the same reader
between our read and our write, the flush raises StaleDataError, the whole
transaction (stock change included) is rolled back, and the workflow is
re-run against fresh state.
"""

import logging

from sqlalchemy import update

from access import load_user
from database import db, retry_db_operation
from errors import (BookNotFound, BookUnavailable, BorrowLimitReached,
                    LendingConflict, LibraryError, NotBorrowed, RoleMismatch)
from models import MAX_BORROWED_BOOKS, Book, Role

logger = logging.getLogger(__name__)


def _borrow_conflict(engine, reader_id, book_id):
    reader = load_user(reader_id)
    if len(reader.borrowed_books) >= engine.max_borrowed:
        return BorrowLimitReached()
    book = db.session.get(Book, book_id)
    if book is None or book.stock <= 0:
        return BookUnavailable()
    return LendingConflict()


def _return_conflict(engine, reader_id, book_id):
    if book_id not in load_user(reader_id).borrowed_books:
        return NotBorrowed()
    return LendingConflict()


class LendingEngine:
    def __init__(self, max_borrowed=MAX_BORROWED_BOOKS):
        self.max_borrowed = max_borrowed

    @retry_db_operation(exhausted=_borrow_conflict)
    def borrow(self, reader_id, book_id):
        try:
            reader = load_user(reader_id)
            if reader.role != Role.READER:
                raise RoleMismatch()
            if len(reader.borrowed_books) >= self.max_borrowed:
                raise BorrowLimitReached()

            result = db.session.execute(
                update(Book)
                .where(Book.id == book_id, Book.stock > 0)
                .values(stock=Book.stock - 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise BookUnavailable()

            reader.borrowed_books = list(reader.borrowed_books) + [book_id]
            db.session.commit()
        except LibraryError as e:
            db.session.rollback()
            logger.debug(f"Borrow refused: book_id={book_id} user_id={reader_id}: {e.message}")
            raise
        logger.debug(f"Book borrowed: book_id={book_id} by user_id={reader_id}")
        return reader

    @retry_db_operation(exhausted=_return_conflict)
    def return_book(self, reader_id, book_id):
        try:
            reader = load_user(reader_id)
            if book_id not in reader.borrowed_books:
                raise NotBorrowed()

            result = db.session.execute(
                update(Book)
                .where(Book.id == book_id)
                .values(stock=Book.stock + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise BookNotFound()

            remaining = list(reader.borrowed_books)
            remaining.remove(book_id)
            reader.borrowed_books = remaining
            db.session.commit()
        except LibraryError as e:
            db.session.rollback()
            logger.debug(f"Return refused: book_id={book_id} user_id={reader_id}: {e.message}")
            raise
        logger.debug(f"Book returned: book_id={book_id} by user_id={reader_id}")
        return reader
