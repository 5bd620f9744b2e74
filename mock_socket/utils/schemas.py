"""
Pydantic schemas for simulator options.
"""

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Server Schemas
# =============================================================================


class ServerOptions(BaseModel):
    """
    Options accepted by Server.

    verify_client (alias "verifyClient") models the HTTP handshake check:
    when it returns a falsy value, new clients get `error` then `close`.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    verify_client: Callable[[], Any] | None = Field(default=None, alias="verifyClient")
