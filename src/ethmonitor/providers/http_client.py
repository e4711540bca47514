"""JSON-over-HTTP transport for the upstream providers."""

import logging
from typing import Any, Iterable, Optional, Protocol, TypeVar

import requests
from pydantic import BaseModel, ValidationError as PydanticValidationError

from ethmonitor.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class JsonHttpClient(Protocol):
    """
    Request/response primitive used by the providers.

    Implementations serialize the body as JSON, check the status, and
    deserialize the body into `response_model`. Every failure is raised as
    UpstreamError; nothing is retried.
    """

    def post(self, url: str, body: dict[str, Any], response_model: type[M]) -> M:
        ...

    def get(
        self,
        url: str,
        response_model: type[M],
        params: Optional[dict[str, Any]] = None,
    ) -> M:
        ...


class RequestsHttpClient:
    """JsonHttpClient on a pooled requests.Session."""

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
        secrets: Iterable[str] = (),
    ):
        self._timeout = timeout_seconds
        self._session = session or requests.Session()
        self._session.headers.update({"accept": "application/json"})
        # API keys travel in the URL path; keep them out of logs and errors
        self._secrets = tuple(s for s in secrets if s)

    def post(self, url: str, body: dict[str, Any], response_model: type[M]) -> M:
        return self._send("POST", url, response_model, json=body)

    def get(
        self,
        url: str,
        response_model: type[M],
        params: Optional[dict[str, Any]] = None,
    ) -> M:
        return self._send("GET", url, response_model, params=params)

    def close(self) -> None:
        self._session.close()

    def _send(self, method: str, url: str, response_model: type[M], **kwargs: Any) -> M:
        shown_url = self._redact(url)
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            raise UpstreamError(
                f"HTTP {method} {shown_url} failed: {self._redact(str(e))}", url=shown_url
            ) from e

        if not response.ok:
            raise UpstreamError(
                f"HTTP {method} request failed: {response.status_code}",
                url=shown_url,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(
                f"HTTP {method} response body is not JSON",
                url=shown_url,
                status_code=response.status_code,
            ) from e

        try:
            result = response_model.model_validate(payload)
        except PydanticValidationError as e:
            raise UpstreamError(
                f"Unexpected {response_model.__name__} payload: {e.error_count()} validation error(s)",
                url=shown_url,
                status_code=response.status_code,
            ) from e

        logger.debug("%s %s -> %s", method, shown_url, response.status_code)
        return result

    def _redact(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, "***")
        return text
