# server/models/__init__.py

from sqlalchemy.orm import declarative_base


Base = declarative_base()

from .user import SavedBook, User  # noqa: E402,F401
