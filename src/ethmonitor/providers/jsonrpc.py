"""JSON-RPC call helper shared by the node-API providers."""

from typing import Any, TypeVar

from ethmonitor.core.exceptions import UpstreamError
from ethmonitor.domain.models import UpstreamModel
from ethmonitor.providers.http_client import JsonHttpClient

R = TypeVar("R", bound=UpstreamModel)


def build_rpc_body(method: str, params: list[Any]) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}


def rpc_call(
    http_client: JsonHttpClient,
    url: str,
    method: str,
    params: list[Any],
    response_model: type[R],
) -> R:
    """Post one JSON-RPC request; an `error` member in the reply raises UpstreamError."""
    response = http_client.post(url, build_rpc_body(method, params), response_model)
    error = getattr(response, "error", None)
    if error is not None:
        raise UpstreamError(f"{method} returned error {error.code}: {error.message}")
    return response


def node_url(base_url: str, api_key: str) -> str:
    return f"{base_url.rstrip('/')}/{api_key}"
