"""Error types for the Database inspector domain.

Two families are kept apart on purpose:

- ``JsonRpcException`` and its subclasses are transport-level failures. They
  carry a ``JsonRpcError`` that the transport turns into a JSON-RPC error
  response.
- ``DatabaseError`` is an engine-level fault raised by a provider. Statement
  execution embeds it into an otherwise normal response instead of failing the
  request.
"""

from enum import IntEnum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorCode(IntEnum):
    """JSON-RPC 2.0 error codes plus the server-defined ones we use."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    # Server-defined range is -32000..-32099
    NOT_FOUND = -32004


class JsonRpcError(BaseModel):
    """Error object of a JSON-RPC response."""

    code: ErrorCode = Field(..., description="JSON-RPC error code")
    message: str = Field(..., description="Human readable error description")
    data: Optional[Any] = Field(None, description="Optional extra error data")


class JsonRpcException(Exception):
    """Raised by a protocol method to fail the request at the transport level."""

    def __init__(self, error: JsonRpcError):
        super().__init__(error.message)
        self.error = error

    @property
    def code(self) -> ErrorCode:
        return self.error.code


class DatabaseNotFoundError(JsonRpcException):
    """No registered provider owns the requested database id."""

    def __init__(self, database_id: str):
        super().__init__(
            JsonRpcError(
                code=ErrorCode.NOT_FOUND,
                message=f"No database provider owns database id: {database_id}",
                data={"databaseId": database_id},
            )
        )
        self.database_id = database_id


class DatabaseError(Exception):
    """Engine-level fault raised by a provider while listing or executing."""
