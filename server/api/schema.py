# server/api/schema.py

import logging
import strawberry
from graphql import GraphQLError
from strawberry.extensions import MaskErrors
from strawberry.fastapi import GraphQLRouter

from server.api.context import get_context
from server.api.resolvers import Mutation, Query


logger = logging.getLogger(__name__)


def is_unexpected(error: GraphQLError) -> bool:
    """
    True for errors raised by something other than a resolver's own
    GraphQLError, e.g. a database failure.
    """
    original = error.original_error
    return original is not None and not isinstance(original, GraphQLError)


class BookshelfSchema(strawberry.Schema):

    def process_errors(self, errors, execution_context=None):
        for error in errors:
            if is_unexpected(error):
                logger.error("GraphQL error at %s", error.path, exc_info=error.original_error)
            else:
                code = (error.extensions or {}).get("code", "GRAPHQL_ERROR")
                logger.info("GraphQL %s at %s: %s", code, error.path, error.message)


def create_schema(debug: bool = False) -> strawberry.Schema:
    extensions = [] if debug else [lambda: MaskErrors(should_mask_error=is_unexpected)]
    return BookshelfSchema(query=Query, mutation=Mutation, extensions=extensions)


def create_graphql_router(debug: bool = False) -> GraphQLRouter:
    return GraphQLRouter(
        create_schema(debug),
        context_getter=get_context,
        graphql_ide="graphiql" if debug else None,
        allow_queries_via_get=False,
    )
