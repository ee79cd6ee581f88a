from app import create_app
from catalog import publish_book
from config import Settings
from database import db
from models import Book, User

settings = Settings.from_env()
app = create_app(settings)
credentials = app.extensions['credentials']
lending = app.extensions['lending']

with app.app_context():
    # Reset the database
    db.drop_all()
    db.create_all()
    print("🔄 Database reset")

    # Insert Users
    users = [
        {"name": "Ursula Le Guin", "email": "ursula@example.com", "password": "author123", "role": "Author"},
        {"name": "Terry Pratchett", "email": "terry@example.com", "password": "author123", "role": "Author"},
        {"name": "Reader One", "email": "reader1@example.com", "password": "reader123", "role": "Reader"},
        {"name": "Reader Two", "email": "reader2@example.com", "password": "reader123", "role": "Reader"}
    ]

    for u in users:
        user = User(
            name=u["name"],
            email=u["email"],
            password_hash=credentials.hash_password(u["password"]),
            role=u["role"],
            borrowed_books=[],
            books_written=[]
        )
        db.session.add(user)

    db.session.commit()
    print("✅ Users inserted")

    # Insert Books through the publish workflow so authors are linked
    books = [
        {"author_email": "ursula@example.com", "title": "A Wizard of Earthsea", "genre": "Fantasy", "stock": 3},
        {"author_email": "ursula@example.com", "title": "The Dispossessed", "genre": "Science Fiction", "stock": 2},
        {"author_email": "terry@example.com", "title": "Guards! Guards!", "genre": "Fantasy", "stock": 1}
    ]

    for b in books:
        author = User.query.filter_by(email=b["author_email"]).first()
        publish_book(author.id, {"title": b["title"], "genre": b["genre"], "stock": b["stock"]})

    print("✅ Books published")

    # Insert a sample loan
    reader = User.query.filter_by(email="reader1@example.com").first()
    book = Book.query.filter_by(title="A Wizard of Earthsea").first()

    if reader and book and book.stock > 0:
        lending.borrow(reader.id, book.id)
        print(f"✅ Loan inserted: {reader.name} borrowed '{book.title}'")
    else:
        print("⚠️ Could not insert loan (missing reader or book)")
