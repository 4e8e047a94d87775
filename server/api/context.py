# server/api/context.py

import logging
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from strawberry.fastapi import BaseContext

from server.core.auth import TokenClaims, verify_token
from server.database import get_db
from server.errors import AuthenticationError


logger = logging.getLogger(__name__)


class RequestContext(BaseContext):
    """
    Per-request GraphQL context: the caller's identity, if any, and the
    database session for this request.
    """

    def __init__(self, db: Session, user: TokenClaims | None = None):
        super().__init__()
        self.db = db
        self.user = user


def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def identify(authorization: str | None) -> TokenClaims | None:
    """
    Resolves the Authorization header to token claims.
    A missing, malformed or expired token means an anonymous request;
    resolvers that need a user reject it themselves.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        return None
    try:
        return verify_token(token)
    except AuthenticationError as e:
        logger.debug("Ignoring bearer token: %s", e.message)
        return None


async def get_context(request: Request, db: Session = Depends(get_db)) -> RequestContext:
    return RequestContext(db=db, user=identify(request.headers.get("Authorization")))
