"""Classified result of executing one SQL statement."""

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


class RawStatement(BaseModel):
    """Statement that neither returns rows nor reports a row count (e.g. DDL)."""

    model_config = ConfigDict(frozen=True)


class SelectResult(BaseModel):
    """Tabular result with ordered column names and lazily produced rows.

    ``rows`` is a single-pass iterator of row sequences. It is typed loosely so
    pydantic keeps the caller's iterator object (and its ``close()``) intact.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    columns: list[str] = Field(..., description="Column names in order")
    rows: Any = Field(..., description="Forward-only iterator of row sequences")

    def close(self) -> None:
        """Release the underlying cursor if the row iterator holds one."""
        close = getattr(self.rows, "close", None)
        if callable(close):
            close()


class InsertResult(BaseModel):
    """Row id generated by an INSERT."""

    model_config = ConfigDict(frozen=True)

    row_id: int = Field(..., description="ID of the last inserted row (64-bit)")


class MutationResult(BaseModel):
    """Number of rows touched by an UPDATE or DELETE."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(..., description="Number of modified rows")


Outcome = Union[RawStatement, SelectResult, InsertResult, MutationResult]
