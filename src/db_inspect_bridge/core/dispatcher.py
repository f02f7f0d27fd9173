"""Translation of classified statement outcomes into executeSQL responses."""

import logging

from db_inspect_bridge.core.flattener import flatten_rows
from db_inspect_bridge.errors import DatabaseError
from db_inspect_bridge.models.config import DEFAULT_MAX_EXECUTE_RESULTS
from db_inspect_bridge.models.outcome import (
    InsertResult,
    MutationResult,
    Outcome,
    RawStatement,
    SelectResult,
)
from db_inspect_bridge.models.protocol import ExecuteSQLResponse, SqlError

logger = logging.getLogger(__name__)

SQL_ERROR_CODE = 0


def sql_error_response(error: Exception) -> ExecuteSQLResponse:
    """Response carrying a statement-level error instead of data."""
    return ExecuteSQLResponse(
        sql_error=SqlError(code=SQL_ERROR_CODE, message=str(error))
    )


class OutcomeDispatcher:
    """Builds the executeSQL response for each of the four outcome kinds."""

    def __init__(self, max_rows: int = DEFAULT_MAX_EXECUTE_RESULTS):
        """
        Initialize dispatcher.

        Args:
            max_rows: Row cap applied to select results
        """
        if max_rows < 0:
            raise ValueError(f"max_rows must be >= 0, got {max_rows}")
        self.max_rows = max_rows

    def dispatch(self, outcome: Outcome) -> ExecuteSQLResponse:
        try:
            return self._dispatch(outcome)
        except DatabaseError as e:
            logger.info(f"Statement failed while reading results: {e}")
            return sql_error_response(e)

    def _dispatch(self, outcome: Outcome) -> ExecuteSQLResponse:
        if isinstance(outcome, RawStatement):
            # The inspector UI drops results without any name/value pair
            return ExecuteSQLResponse(column_names=["success"], values=["true"])

        if isinstance(outcome, SelectResult):
            try:
                flattened = flatten_rows(outcome, self.max_rows)
            finally:
                outcome.close()
            return ExecuteSQLResponse(
                column_names=flattened.column_names, values=flattened.values
            )

        if isinstance(outcome, InsertResult):
            return ExecuteSQLResponse(
                column_names=["ID of last inserted row"], values=[outcome.row_id]
            )

        if isinstance(outcome, MutationResult):
            return ExecuteSQLResponse(
                column_names=["Modified rows"], values=[outcome.count]
            )

        raise TypeError(f"Unknown statement outcome: {type(outcome).__name__}")
