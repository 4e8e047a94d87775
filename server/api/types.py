# server/api/types.py

from typing import List, Optional
import strawberry

from server.models.user import SavedBook as SavedBookModel
from server.models.user import User as UserModel


@strawberry.type(name="SavedBook")
class SavedBookType:
    book_id: str
    authors: List[str]
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    link: Optional[str] = None

    @classmethod
    def from_model(cls, book: SavedBookModel) -> "SavedBookType":
        return cls(
            book_id=book.book_id,
            authors=list(book.authors or []),
            title=book.title,
            description=book.description,
            image=book.image,
            link=book.link,
        )


@strawberry.type(name="User")
class UserType:
    id: strawberry.ID
    username: str
    email: str
    saved_books: List[SavedBookType]

    @strawberry.field
    def book_count(self) -> int:
        return len(self.saved_books)

    @classmethod
    def from_model(cls, user: UserModel) -> "UserType":
        return cls(
            id=strawberry.ID(str(user.id)),
            username=user.username,
            email=user.email,
            saved_books=[SavedBookType.from_model(book) for book in user.saved_books],
        )


@strawberry.type(name="Auth")
class AuthType:
    token: str
    user: UserType


@strawberry.input
class BookInput:
    book_id: str
    title: str
    authors: List[str] = strawberry.field(default_factory=list)
    description: Optional[str] = None
    image: Optional[str] = None
    link: Optional[str] = None
