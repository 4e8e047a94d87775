# server/core/users.py

import logging
from typing import Annotated, List, Optional
from pydantic import BaseModel, Field, StringConstraints
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from server.core.auth import get_password_hash, verify_password
from server.errors import NotFoundError, ValidationError
from server.models.user import SavedBook, User


logger = logging.getLogger(__name__)

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

NonEmpty = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# -------------------------------
# Input records
# -------------------------------

class NewUser(BaseModel):
    username: NonEmpty
    email: Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, pattern=EMAIL_PATTERN)]
    password: Annotated[str, StringConstraints(min_length=1)]


class BookData(BaseModel):
    book_id: NonEmpty
    title: NonEmpty
    authors: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    image: Optional[str] = None
    link: Optional[str] = None


def validate_input(model, **fields):
    """
    Builds `model` from `fields`, reporting the first failure as a
    ValidationError naming the offending field.
    """
    try:
        return model(**fields)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "input"
        raise ValidationError(f"Invalid {field}: {error['msg']}") from exc


# -------------------------------
# Users
# -------------------------------

def create_user(db: Session, username: str, email: str, password: str) -> User:
    data = validate_input(NewUser, username=username, email=email, password=password)

    if db.query(User).filter(User.username == data.username).first():
        raise ValidationError("Username is already taken")
    if db.query(User).filter(User.email == data.email).first():
        raise ValidationError("Email is already registered")

    user = User(
        username=data.username,
        email=data.email,
        hashed_password=get_password_hash(data.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Username or email is already registered")
    db.refresh(user)

    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return user


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def find_user_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def verify_user_password(user: User, candidate: str) -> bool:
    return verify_password(candidate, user.hashed_password)


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    user = find_user_by_email(db, email)
    if not user or not verify_user_password(user, password):
        return None
    return user


# -------------------------------
# Saved books
# -------------------------------

def _get_user_or_raise(db: Session, user_id: int) -> User:
    user = find_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def add_saved_book(db: Session, user_id: int, book: BookData) -> User:
    """
    Adds `book` to the user's saved books unless an entry with the same
    book id is already there, in which case the user is returned unchanged.
    """
    user = _get_user_or_raise(db, user_id)
    if any(saved.book_id == book.book_id for saved in user.saved_books):
        return user

    user.saved_books.append(SavedBook(**book.model_dump()))
    try:
        db.commit()
    except IntegrityError:
        # a concurrent save of the same book won
        db.rollback()
        logger.info("Book %s already saved for user %s", book.book_id, user_id)
    db.refresh(user)
    return user


def remove_saved_book(db: Session, user_id: int, book_id: str) -> User:
    user = _get_user_or_raise(db, user_id)
    db.query(SavedBook).filter(
        SavedBook.user_id == user.id,
        SavedBook.book_id == book_id,
    ).delete(synchronize_session=False)
    db.commit()
    db.refresh(user)
    return user
