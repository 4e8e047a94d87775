# server/api/resolvers.py

import logging
from typing import Optional
import strawberry
from graphql import GraphQLError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from strawberry.types import Info

from server.api.context import RequestContext
from server.api.types import AuthType, BookInput, UserType
from server.core import users
from server.core.auth import TokenClaims, sign_token
from server.errors import AuthenticationError, BookshelfError, NotFoundError


logger = logging.getLogger(__name__)

LOGIN_FAILED = "Incorrect email or password"


def as_graphql_error(error: BookshelfError) -> GraphQLError:
    return GraphQLError(error.message, extensions={"code": error.code})


def require_user(info: Info[RequestContext, None]) -> TokenClaims:
    if info.context.user is None:
        raise AuthenticationError("You need to be logged in!")
    return info.context.user


def _auth_payload(user) -> AuthType:
    token = sign_token(user.username, user.email, user.id)
    return AuthType(token=token, user=UserType.from_model(user))


async def resolve(work, *args):
    """
    Runs `work` in the threadpool, keeping blocking database and bcrypt
    calls off the event loop, and reports domain errors as GraphQL errors.
    """
    try:
        return await run_in_threadpool(work, *args)
    except BookshelfError as e:
        raise as_graphql_error(e) from e


# -------------------------------
# Queries
# -------------------------------

def _me(db: Session, claims: TokenClaims) -> UserType:
    user = users.find_user_by_id(db, claims.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return UserType.from_model(user)


@strawberry.type
class Query:

    @strawberry.field
    async def me(self, info: Info[RequestContext, None]) -> Optional[UserType]:
        """
        The signed-in user, with saved books.
        """
        try:
            claims = require_user(info)
        except BookshelfError as e:
            raise as_graphql_error(e) from e
        return await resolve(_me, info.context.db, claims)


# -------------------------------
# Mutations
# -------------------------------

def _add_user(db: Session, username: str, email: str, password: str) -> AuthType:
    return _auth_payload(users.create_user(db, username, email, password))


def _login(db: Session, email: str, password: str) -> AuthType:
    user = users.authenticate_user(db, email, password)
    if user is None:
        logger.info("Failed login attempt")
        raise AuthenticationError(LOGIN_FAILED)
    logger.info("User %s logged in", user.id)
    return _auth_payload(user)


def _save_book(db: Session, claims: TokenClaims, book_data: BookInput) -> UserType:
    book = users.validate_input(
        users.BookData,
        book_id=book_data.book_id,
        title=book_data.title,
        authors=book_data.authors,
        description=book_data.description,
        image=book_data.image,
        link=book_data.link,
    )
    return UserType.from_model(users.add_saved_book(db, claims.user_id, book))


def _remove_book(db: Session, claims: TokenClaims, book_id: str) -> UserType:
    return UserType.from_model(users.remove_saved_book(db, claims.user_id, book_id))


@strawberry.type
class Mutation:

    @strawberry.mutation
    async def add_user(self, info: Info[RequestContext, None], username: str, email: str, password: str) -> Optional[AuthType]:
        return await resolve(_add_user, info.context.db, username, email, password)

    @strawberry.mutation
    async def login(self, info: Info[RequestContext, None], email: str, password: str) -> Optional[AuthType]:
        """
        Exchanges email and password for a token. Unknown email and wrong
        password fail with the same message.
        """
        return await resolve(_login, info.context.db, email, password)

    @strawberry.mutation
    async def save_book(self, info: Info[RequestContext, None], book_data: BookInput) -> Optional[UserType]:
        try:
            claims = require_user(info)
        except BookshelfError as e:
            raise as_graphql_error(e) from e
        return await resolve(_save_book, info.context.db, claims, book_data)

    @strawberry.mutation
    async def remove_book(self, info: Info[RequestContext, None], book_id: str) -> Optional[UserType]:
        try:
            claims = require_user(info)
        except BookshelfError as e:
            raise as_graphql_error(e) from e
        return await resolve(_remove_book, info.context.db, claims, book_id)
