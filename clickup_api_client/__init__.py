"""Async client for the ClickUp REST API.

Requests go through a resilience pipeline (circuit breaker, exponential
backoff, Retry-After handling) and failures surface as ``ClickUpApiError``
tagged with an ``ErrorKind``.
"""

from .auth import Authenticator
from .circuit_breaker import CircuitBreaker, CircuitBreakerRegistry, CircuitState
from .connection import ApiConnection, get_connection
from .errors import ClickUpApiError, ErrorKind
from .pagination import Page, iterate_pages
from .policies import BackoffRetry, PolicyPipeline, RateLimitRetry
from .serialization import ClickUpModel, EpochMillis, OptionalEpochMillis
from .settings import Settings, get_settings
from .tasks import TasksService
from .version import __version__

__all__ = [
    "ApiConnection",
    "Authenticator",
    "BackoffRetry",
    "CircuitBreaker",
    "CircuitBreakerRegistry",
    "CircuitState",
    "ClickUpApiError",
    "ClickUpModel",
    "EpochMillis",
    "ErrorKind",
    "OptionalEpochMillis",
    "Page",
    "PolicyPipeline",
    "RateLimitRetry",
    "Settings",
    "TasksService",
    "__version__",
    "get_connection",
    "get_settings",
    "iterate_pages",
]
