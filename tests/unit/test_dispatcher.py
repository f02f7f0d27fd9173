"""Unit tests for OutcomeDispatcher"""

import pytest

from db_inspect_bridge.core.dispatcher import SQL_ERROR_CODE, OutcomeDispatcher
from db_inspect_bridge.core.flattener import TRUNCATED_MARKER
from db_inspect_bridge.models.outcome import InsertResult, MutationResult, RawStatement


@pytest.fixture
def dispatcher() -> OutcomeDispatcher:
    return OutcomeDispatcher()


class TestDispatchVariants:
    """One response shape per outcome kind."""

    def test_raw_statement(self, dispatcher):
        response = dispatcher.dispatch(RawStatement())

        assert response.column_names == ["success"]
        assert response.values == ["true"]
        assert response.sql_error is None

    @pytest.mark.parametrize("row_id", [0, 17, 2**32 + 5])
    def test_insert(self, dispatcher, row_id):
        response = dispatcher.dispatch(InsertResult(row_id=row_id))

        assert response.column_names == ["ID of last inserted row"]
        assert response.values == [row_id]

    def test_mutation(self, dispatcher):
        response = dispatcher.dispatch(MutationResult(count=3))

        assert response.column_names == ["Modified rows"]
        assert response.values == [3]

    def test_select(self, dispatcher, select_factory):
        result = select_factory(["id", "name"], [(1, "alice"), (2, "bob")])

        response = dispatcher.dispatch(result)

        assert response.column_names == ["id", "name"]
        assert response.values == [1, "alice", 2, "bob"]
        assert response.rows == [[1, "alice"], [2, "bob"]]

    def test_select_closes_cursor(self, dispatcher, select_factory):
        result = select_factory(["id"], [(i,) for i in range(500)])

        dispatcher.dispatch(result)

        assert result.rows.closed is True

    def test_select_uses_default_cap_of_250(self, dispatcher, select_factory):
        response = dispatcher.dispatch(
            select_factory(["id"], [(i,) for i in range(300)])
        )

        assert len(response.values) == 251
        assert response.values[-1] == TRUNCATED_MARKER

    def test_select_custom_cap(self, select_factory):
        response = OutcomeDispatcher(max_rows=2).dispatch(
            select_factory(["id"], [(1,), (2,), (3,)])
        )

        assert response.values == [1, 2, TRUNCATED_MARKER]

    def test_unknown_outcome_is_a_type_error(self, dispatcher):
        with pytest.raises(TypeError, match="Unknown statement outcome"):
            dispatcher.dispatch(object())  # type: ignore[arg-type]

    def test_negative_cap_rejected(self):
        with pytest.raises(ValueError):
            OutcomeDispatcher(max_rows=-1)


class TestDispatchErrors:
    """Faults while reading results become embedded SQL errors."""

    def test_fault_while_reading_rows(self, dispatcher, select_factory):
        result = select_factory(["id"], [(1,), (2,)], fail_at=1)

        response = dispatcher.dispatch(result)

        assert response.column_names is None
        assert response.values is None
        assert response.sql_error is not None
        assert response.sql_error.code == SQL_ERROR_CODE == 0
        assert response.sql_error.message == "disk I/O error"
        assert result.rows.closed is True

    def test_error_response_wire_shape(self, dispatcher, select_factory):
        response = dispatcher.dispatch(select_factory(["id"], [], fail_at=0))

        assert response.to_wire() == {
            "sqlError": {"message": "disk I/O error", "code": 0}
        }
