"""Common base for upstream response models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UpstreamModel(BaseModel):
    """
    Base for deserialized provider payloads.

    Wire names are camelCase; unknown fields are ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class RpcError(UpstreamModel):
    """JSON-RPC error member."""

    code: Optional[int] = None
    message: str = ""
