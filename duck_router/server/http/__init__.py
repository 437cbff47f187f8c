"""HTTP surface for configured SQL routes."""

from .app import RouteRuntimeState, create_route_app
from .auth import ApiKeyAuthenticator, parse_api_keys
from .models import DatabaseHealth, HealthResponse

__all__ = [
    "ApiKeyAuthenticator",
    "DatabaseHealth",
    "HealthResponse",
    "RouteRuntimeState",
    "create_route_app",
    "parse_api_keys",
]
