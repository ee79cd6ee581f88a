import enum

from sqlalchemy.orm import validates

from database import db

MAX_BORROWED_BOOKS = 5


class Role(str, enum.Enum):
    READER = 'Reader'
    AUTHOR = 'Author'

    @classmethod
    def values(cls):
        return [r.value for r in cls]


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False)
    borrowed_books = db.Column(db.JSON, nullable=False, default=list)
    books_written = db.Column(db.JSON, nullable=False, default=list)
    version = db.Column(db.Integer, nullable=False)

    # every flush is UPDATE ... WHERE version = <seen>; a lost race raises StaleDataError
    __mapper_args__ = {'version_id_col': version}

    @validates('role')
    def validate_role(self, key, value):
        value = Role(value).value
        if self.role is not None and self.role != value:
            raise ValueError("role cannot change after creation")
        return value

    @validates('borrowed_books')
    def validate_borrowed_books(self, key, value):
        if len(value) > MAX_BORROWED_BOOKS:
            raise ValueError(f"a reader may hold at most {MAX_BORROWED_BOOKS} books")
        return value

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role,
            'borrowed_books': list(self.borrowed_books or []),
            'books_written': list(self.books_written or []),
        }

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


class Book(db.Model):
    __tablename__ = 'books'
    __table_args__ = (db.CheckConstraint('stock >= 0', name='ck_books_stock_non_negative'),)

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    # author's display name at publish time, not a foreign key
    author = db.Column(db.String(100), nullable=False)
    genre = db.Column(db.String(50))
    stock = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'author': self.author,
            'genre': self.genre,
            'stock': self.stock,
        }

    def __repr__(self):
        return f"<Book(id={self.id}, title={self.title}, stock={self.stock})>"
