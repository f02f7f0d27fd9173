"""Request and response shapes of the Database domain."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    """Accepts both python and camelCase names, dumps camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SqlError(_WireModel):
    """Statement-level SQL error embedded in an execute response."""

    message: str = Field(..., description="Fault description")
    code: int = Field(..., description="Error code (always 0 for now)")


class GetDatabaseTableNamesRequest(_WireModel):
    database_id: str = Field(..., alias="databaseId")


class GetDatabaseTableNamesResponse(_WireModel):
    table_names: list[str] = Field(..., alias="tableNames")


class ExecuteSQLRequest(_WireModel):
    database_id: str = Field(..., alias="databaseId")
    query: str = Field(..., description="SQL statement to execute")


class ExecuteSQLResponse(_WireModel):
    """Either column names with flattened values, or an embedded SQL error.

    ``values`` holds ``len(column_names)`` cells per row and cannot be read
    without the column count.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    column_names: Optional[list[str]] = Field(None, alias="columnNames")
    values: Optional[list[Any]] = Field(None)
    sql_error: Optional[SqlError] = Field(None, alias="sqlError")

    @property
    def rows(self) -> list[list[Any]]:
        """Values regrouped into rows using the column count."""
        if not self.column_names or self.values is None:
            return []
        width = len(self.column_names)
        return [self.values[i : i + width] for i in range(0, len(self.values), width)]


class DatabaseObject(_WireModel):
    """Database advertised to a peer through ``Database.addDatabase``."""

    id: str = Field(..., description="Database id")
    domain: str = Field(..., description="Owning domain/application")
    name: str = Field(..., description="Display name")
    version: str = Field(..., description="Engine version or dialect")


class AddDatabaseEvent(_WireModel):
    database: DatabaseObject


class FlattenedRows(BaseModel):
    """Row/column result flattened into one list of protocol-safe values."""

    column_names: list[str] = Field(..., description="Column names in order")
    values: list[Any] = Field(default_factory=list, description="Cells, row-major")
    truncated: bool = Field(
        default=False, description="Whether rows beyond the limit were dropped"
    )

    @property
    def column_count(self) -> int:
        return len(self.column_names)
