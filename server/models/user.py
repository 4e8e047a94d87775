# server/models/user.py

from sqlalchemy import JSON, Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from . import Base


# -------------------------------
# User Model
# -------------------------------

class User(Base):
    """
    Database model for application users.
    Stores credentials and the user's saved books, in the order they were saved.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    saved_books = relationship(
        "SavedBook",
        back_populates="user",
        order_by="SavedBook.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


# -------------------------------
# SavedBook Model
# -------------------------------

class SavedBook(Base):
    """
    A catalog entry bookmarked by one user. A user holds at most one
    row per external book id.
    """
    __tablename__ = "saved_books"
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_saved_books_user_book"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    book_id = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    authors = Column(JSON, nullable=False, default=list)
    image = Column(String, nullable=True)
    link = Column(String, nullable=True)

    user = relationship("User", back_populates="saved_books")
