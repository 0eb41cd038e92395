"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from trainerdesk.core.errors import Forbidden, Unauthorized
from trainerdesk.core.logger import ensure_request_id
from trainerdesk.services._shared.base import ServiceContext

F = TypeVar("F", bound=Callable[..., Any])

ROLES = ("trainer", "student")


def load_body(schema) -> Any:
    """Validate the JSON body with ``schema``; a missing body counts as ``{}``."""

    return schema.load(request.get_json(silent=True) or {})


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def no_content() -> Response:
    """Empty ``204`` response for deletes."""

    return Response(status=204)


def require_role(role: str) -> Callable[[F], F]:
    """Require a valid access token whose ``role`` claim equals ``role``.

    Missing or invalid tokens are answered with ``401`` by the JWT loaders;
    a valid token for the other role yields ``403``.
    """

    if role not in ROLES:
        raise ValueError(f"Unknown role: {role}")

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            verify_jwt_in_request(optional=False)
            if get_jwt().get("role") != role:
                raise Forbidden(f"This endpoint requires the {role} role")
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def current_context() -> ServiceContext:
    """Build the service context from the verified token of this request."""

    identity = get_jwt_identity()
    try:
        actor_id = int(identity)
    except (TypeError, ValueError) as exc:
        raise Unauthorized("Token identity is not a valid account id") from exc
    return ServiceContext(
        actor_id=actor_id,
        role=get_jwt().get("role"),
        request_id=ensure_request_id(),
    )


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
