"""
Mapping of exceptions to GraphQL error payloads.
"""
import logging

from ariadne import format_error, unwrap_graphql_error
from graphql import GraphQLError

from orders.domain.exceptions import DomainError


logger = logging.getLogger(__name__)

INTERNAL_ERROR = "INTERNAL_ERROR"
INTERNAL_ERROR_MESSAGE = "An internal error occurred"


def error_code(error: Exception) -> str:
    """Stable error code for a resolver or request error."""
    if isinstance(error, DomainError):
        return error.code
    if isinstance(error, GraphQLError):
        # Malformed query or variables that failed schema coercion
        return "VALIDATION_ERROR"
    return INTERNAL_ERROR


def format_graphql_error(error: GraphQLError, debug: bool = False) -> dict:
    """Ariadne error formatter adding `extensions.code`."""
    formatted = format_error(error, debug)
    original = unwrap_graphql_error(error)
    code = error_code(original)

    if code == INTERNAL_ERROR:
        logger.error(
            "unexpected_error",
            extra={
                "error_type": type(original).__name__,
                "error": str(original),
                "path": formatted.get("path"),
            },
            exc_info=original,
        )
        if not debug:
            formatted["message"] = INTERNAL_ERROR_MESSAGE

    extensions = formatted.get("extensions") or {}
    extensions["code"] = code
    formatted["extensions"] = extensions
    return formatted
