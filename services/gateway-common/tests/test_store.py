import pytest
from unittest.mock import Mock
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError, MultipleResultsFound, NoResultFound, OperationalError

from gateway_common.errors import ConflictError, NotFoundError, StoreError


class UniqueViolation(Exception):
    pgcode = "23505"


class NotNullViolation(Exception):
    pgcode = "23502"


def _result(one=None, one_or_none=None, rows=None):
    result = Mock()
    result.mappings.return_value.one.return_value = one
    result.mappings.return_value.one_or_none.return_value = one_or_none
    result.mappings.return_value.all.return_value = rows or []
    return result


def _compiled(mock_session):
    stmt = mock_session.execute.call_args.args[0]
    return stmt.compile(dialect=postgresql.dialect())


@pytest.mark.asyncio
async def test_select_all(store, mock_session):
    mock_session.execute.return_value = _result(rows=[{"id": 1}, {"id": 2}])

    rows = await store.select_all("activities")

    assert rows == [{"id": 1}, {"id": 2}]
    assert "FROM activities" in str(_compiled(mock_session))

@pytest.mark.asyncio
async def test_insert_returns_stored_row(store, mock_session):
    mock_session.execute.return_value = _result(one={"id": 7, "name": "Morning Run"})

    row = await store.insert("activities", {"name": "Morning Run"})

    assert row == {"id": 7, "name": "Morning Run"}
    sql = str(_compiled(mock_session))
    assert sql.startswith("INSERT INTO activities")
    assert "RETURNING" in sql
    mock_session.commit.assert_awaited_once()

@pytest.mark.asyncio
async def test_lookup_one_found(store, mock_session):
    mock_session.execute.return_value = _result(one={"refresh_token": "r1"})

    row = await store.lookup_one("tokens", "user_id", "u1", columns=["refresh_token"])

    assert row == {"refresh_token": "r1"}
    compiled = _compiled(mock_session)
    assert "tokens.user_id = " in str(compiled)
    assert compiled.params == {"user_id_1": "u1"}

@pytest.mark.asyncio
async def test_lookup_one_no_rows_is_not_found(store, mock_session):
    mock_session.execute.return_value = _result()
    mock_session.execute.return_value.mappings.return_value.one.side_effect = NoResultFound()

    with pytest.raises(NotFoundError) as exc_info:
        await store.lookup_one("activities", "id", 999)

    assert exc_info.value.status_code == 404

@pytest.mark.asyncio
async def test_lookup_one_multiple_rows_is_store_error(store, mock_session):
    mock_session.execute.return_value = _result()
    mock_session.execute.return_value.mappings.return_value.one.side_effect = MultipleResultsFound()

    with pytest.raises(StoreError):
        await store.lookup_one("sessions", "session_id", "s1")

@pytest.mark.asyncio
@pytest.mark.parametrize("failure", [
    OperationalError("SELECT", {}, Exception("connection refused")),
    ConnectionRefusedError("connection refused"),
])
async def test_transport_failure_is_store_error_not_not_found(store, mock_session, failure):
    mock_session.execute.side_effect = failure

    with pytest.raises(StoreError) as exc_info:
        await store.lookup_one("activities", "id", 1)

    assert not isinstance(exc_info.value, NotFoundError)
    assert exc_info.value.status_code == 500

@pytest.mark.asyncio
async def test_find_one_no_rows_is_none(store, mock_session):
    mock_session.execute.return_value = _result(one_or_none=None)

    assert await store.find_one("tokens", "user_id", "u1") is None

@pytest.mark.asyncio
async def test_partial_update_strips_identity_and_stamps_updated_at(store, mock_session):
    mock_session.execute.return_value = _result(rows=[{"user_id": "u1", "firstname": "Ada"}])

    rows = await store.partial_update(
        "athletes", "user_id", "u1", {"id": 5, "user_id": "someone-else", "firstname": "Ada"}
    )

    assert rows == [{"user_id": "u1", "firstname": "Ada"}]
    params = _compiled(mock_session).params
    assert params["firstname"] == "Ada"
    assert params["updated_at"] is not None
    assert params["user_id_1"] == "u1"
    assert "id" not in params
    assert "user_id" not in params
    mock_session.commit.assert_awaited_once()

@pytest.mark.asyncio
async def test_partial_update_no_matching_rows(store, mock_session):
    mock_session.execute.return_value = _result(rows=[])

    assert await store.partial_update("athlete_stats", "user_id", "missing", {"biggest_ride_distance": 1.0}) == []

@pytest.mark.asyncio
async def test_upsert_replaces_on_unique_key(store, mock_session):
    mock_session.execute.return_value = _result(one_or_none={"user_id": "u1", "refresh_token": "r1"})

    row = await store.upsert("tokens", "user_id", {"user_id": "u1", "refresh_token": "r1"})

    assert row == {"user_id": "u1", "refresh_token": "r1"}
    sql = str(_compiled(mock_session))
    assert "ON CONFLICT (user_id) DO UPDATE SET refresh_token = excluded.refresh_token" in sql
    mock_session.commit.assert_awaited_once()

@pytest.mark.asyncio
async def test_upsert_unique_violation_is_conflict(store, mock_session):
    mock_session.execute.side_effect = IntegrityError("INSERT", {}, UniqueViolation("duplicate key value"))

    with pytest.raises(ConflictError) as exc_info:
        await store.upsert("tokens", "user_id", {"user_id": "u1", "refresh_token": "r1"})

    assert exc_info.value.status_code == 409
    mock_session.commit.assert_not_awaited()

@pytest.mark.asyncio
async def test_upsert_other_integrity_error_is_store_error(store, mock_session):
    mock_session.execute.side_effect = IntegrityError("INSERT", {}, NotNullViolation("null value"))

    with pytest.raises(StoreError):
        await store.upsert("tokens", "user_id", {"user_id": "u1"})

@pytest.mark.asyncio
async def test_upsert_without_returned_row_fails(store, mock_session):
    mock_session.execute.return_value = _result(one_or_none=None)

    with pytest.raises(StoreError) as exc_info:
        await store.upsert("tokens", "user_id", {"user_id": "u1", "refresh_token": "r1"})

    assert "Failed to upsert" in exc_info.value.message
    mock_session.commit.assert_not_awaited()

@pytest.mark.asyncio
async def test_unknown_table(store, mock_session):
    with pytest.raises(StoreError):
        await store.select_all("nope")

    mock_session.execute.assert_not_called()

@pytest.mark.asyncio
async def test_ping(store, mock_session):
    await store.ping()

    mock_session.execute.assert_awaited_once()

@pytest.mark.asyncio
async def test_dispose_without_engine(store):
    await store.dispose()

@pytest.mark.asyncio
async def test_insert_unique_violation_is_store_error(store, mock_session):
    mock_session.execute.side_effect = IntegrityError("INSERT", {}, UniqueViolation("duplicate key value"))

    with pytest.raises(StoreError) as exc_info:
        await store.insert("sessions", {"session_id": "s1", "user_id": "u1", "auth_id": "a1"})

    assert not isinstance(exc_info.value, ConflictError)
    assert exc_info.value.status_code == 500
    mock_session.commit.assert_not_awaited()
