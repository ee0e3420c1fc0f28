"""
GraphQL view with structured request logging.
"""
import json
import logging
from uuid import uuid4

from ariadne import graphql_sync
from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from orders.api.errors import format_graphql_error
from orders.api.schema import schema
from orders.services import OrderService, default_order_service

logger = logging.getLogger(__name__)


class OrdersGraphQLView:
    """GraphQL view that executes one operation per request."""

    def __init__(self, service: OrderService | None = None):
        self.service = service

    def dispatch(self, request, *args, **kwargs):
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        logger.info(
            "graphql_request",
            extra={"request_id": request_id, "method": request.method, "operation": "graphql"},
        )

        response = self._process_graphql_request(request, request_id)
        response["X-Request-ID"] = request_id

        logger.info(
            "graphql_response",
            extra={"request_id": request_id, "status": response.status_code},
        )
        return response

    def _process_graphql_request(self, request, request_id: str):
        if request.method == "GET":
            return JsonResponse({"message": "GraphQL endpoint. Use POST for queries."})

        try:
            data = json.loads(request.body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("graphql_invalid_json", extra={"request_id": request_id})
            return JsonResponse(
                {"errors": [{"message": "Invalid JSON", "extensions": {"code": "VALIDATION_ERROR"}}]},
                status=400,
            )

        success, result = graphql_sync(
            schema,
            data,
            context_value={
                "request": request,
                "request_id": request_id,
                "service": self.service or default_order_service(),
            },
            error_formatter=format_graphql_error,
            debug=settings.DEBUG,
        )

        status_code = 200 if success and not result.get("errors") else 400
        return JsonResponse(result, status=status_code)


@csrf_exempt
@require_http_methods(["GET", "POST"])
def graphql_view(request):
    """GraphQL endpoint."""
    view = OrdersGraphQLView()
    return view.dispatch(request)
