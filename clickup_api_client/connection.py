"""Async JSON connection to the ClickUp REST API.

Every verb goes through the same path: build the request against the base
URL, attach the Authorization header, run it through the policy pipeline,
then either decode the JSON body or raise a typed ``ClickUpApiError``.
"""

import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from .auth import Authenticator
from .circuit_breaker import CircuitBreakerRegistry
from .errors import ClickUpApiError, ErrorKind, classify_response
from .policies import TRANSIENT_EXCEPTIONS, PolicyPipeline, Sleep
from .serialization import decode, encode
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


class ApiConnection:
    """Thin resilient wrapper over ``httpx.AsyncClient``.

    Use as an async context manager, or call ``aclose()`` when done:

        async with ApiConnection(settings) as conn:
            user = await conn.get("user")

    Cancellation is plain asyncio task cancellation; it is never retried and
    surfaces as ``asyncio.CancelledError``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        authenticator: Authenticator | None = None,
        circuit_breakers: CircuitBreakerRegistry | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.settings = settings or get_settings()
        # Raises a CONFIGURATION error before any client is built
        self.authenticator = authenticator or Authenticator.from_settings(self.settings)

        self._client = httpx.AsyncClient(
            base_url=self.settings.base_url,
            timeout=self.settings.request_timeout,
            headers={
                "User-Agent": self.settings.user_agent,
                "Accept": "application/json",
            },
            transport=transport,
        )
        registry = circuit_breakers or CircuitBreakerRegistry.from_settings(self.settings)
        self.circuit_breaker = registry.get(self._client.base_url.host)
        self.pipeline = PolicyPipeline.from_settings(self.settings, self.circuit_breaker, sleep=sleep)

    async def __aenter__(self) -> "ApiConnection":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict | None = None,
        json: Any = None,
        files: Any = None,
        data: dict | None = None,
    ) -> httpx.Response:
        """Send one logical request and return the successful response.

        Raises ClickUpApiError for non-2xx outcomes, exhausted transport
        failures and an open circuit.
        """
        method = method.upper()
        url = endpoint.lstrip("/")
        content = {}
        if json is not None:
            content["json"] = encode(json)
        if files is not None:
            content["files"] = files
        if data is not None:
            content["data"] = data

        async def send() -> httpx.Response:
            # Rebuilt per attempt so multipart streams replay from the start
            request = self._client.build_request(
                method,
                url,
                params=params,
                headers={"Authorization": self.authenticator.authorization},
                **content,
            )
            logger.debug("%s %s", method, request.url)
            return await self._client.send(request)

        try:
            response = await self.pipeline.execute(send)
        except TRANSIENT_EXCEPTIONS as exc:
            raise ClickUpApiError(
                ErrorKind.TRANSIENT,
                f"Request failed for {method} {endpoint}: {type(exc).__name__}: {exc}",
                method=method,
                url=str(self._client.base_url.join(url)),
            ) from exc
        except httpx.RequestError as exc:
            # Not retried: redirect loops, undecodable content encodings
            raise ClickUpApiError(
                ErrorKind.REQUEST,
                f"Request failed for {method} {endpoint}: {type(exc).__name__}: {exc}",
                method=method,
                url=str(self._client.base_url.join(url)),
            ) from exc

        if not response.is_success:
            raise classify_response(response)
        return response

    def _decode(self, response: httpx.Response, response_type) -> Any:
        if response.status_code == 204 or not response.content.strip():
            return None
        try:
            body = response.json()
        except ValueError as exc:
            raise ClickUpApiError(
                ErrorKind.INVALID_RESPONSE,
                f"Response from {response.request.method} {response.request.url} is not valid JSON",
                status_code=response.status_code,
                raw_body=response.text,
            ) from exc
        try:
            return decode(body, response_type)
        except ValidationError as exc:
            raise ClickUpApiError(
                ErrorKind.INVALID_RESPONSE,
                f"Response from {response.request.method} {response.request.url} "
                f"does not match {getattr(response_type, '__name__', response_type)}: {exc}",
                status_code=response.status_code,
                raw_body=response.text,
            ) from exc

    async def _call(self, method, endpoint, response_type, expect_body, **kwargs) -> Any:
        response = await self.request(method, endpoint, **kwargs)
        if not expect_body:
            return None
        return self._decode(response, response_type)

    async def get(self, endpoint: str, response_type=None, *, params: dict | None = None) -> Any:
        """GET and decode the body; an empty body gives None."""
        return await self._call("GET", endpoint, response_type, True, params=params)

    async def post(
        self,
        endpoint: str,
        payload: Any = None,
        response_type=None,
        *,
        params: dict | None = None,
        expect_body: bool = True,
    ) -> Any:
        """POST ``payload`` as JSON. With ``expect_body=False`` the body is ignored."""
        return await self._call("POST", endpoint, response_type, expect_body, params=params, json=payload)

    async def put(
        self,
        endpoint: str,
        payload: Any = None,
        response_type=None,
        *,
        params: dict | None = None,
        expect_body: bool = True,
    ) -> Any:
        return await self._call("PUT", endpoint, response_type, expect_body, params=params, json=payload)

    async def delete(
        self,
        endpoint: str,
        payload: Any = None,
        response_type=None,
        *,
        params: dict | None = None,
        expect_body: bool = True,
    ) -> Any:
        """DELETE, optionally with a JSON body. ClickUp usually answers ``{}``."""
        return await self._call("DELETE", endpoint, response_type, expect_body, params=params, json=payload)

    async def post_multipart(
        self,
        endpoint: str,
        files: Any,
        data: dict | None = None,
        response_type=None,
        *,
        params: dict | None = None,
    ) -> Any:
        """POST multipart form data (``files`` in any shape httpx accepts)."""
        return await self._call("POST", endpoint, response_type, True, params=params, files=files, data=data)


def get_connection(settings: Settings | None = None, **kwargs) -> ApiConnection:
    """Create a connection from settings (environment by default)."""
    return ApiConnection(settings, **kwargs)
