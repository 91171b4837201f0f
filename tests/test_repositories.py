"""
Repository query tests.

Verifies:
- first/last/count agree between the in-memory and SQLAlchemy repositories
- last() and count() without a predicate are answered by a single bounded query
- Python predicates still filter correctly with a limit
- get_session_context commits on success and rolls back on error
"""

import pytest
from sqlalchemy import event

from rentmate.database import get_session_context
from rentmate.models import User, UserRole
from rentmate.repositories import Store


def _seed(store):
    for index, role in enumerate([UserRole.TENANT, UserRole.LANDLORD, UserRole.TENANT, UserRole.LANDLORD]):
        store.users.add(
            User(email=f"user{index}@test.com", password="x", first_name=f"U{index}", last_name="Test", role=role)
        )


@pytest.fixture
def memory_store():
    store = Store.in_memory()
    _seed(store)
    return store


@pytest.fixture
def sql_session(db_session_factory):
    session = db_session_factory()
    yield session
    session.close()


@pytest.fixture
def sql_store(sql_session):
    store = Store.for_session(sql_session)
    _seed(store)
    return store


@pytest.fixture(params=["memory", "sql"])
def any_store(request):
    return request.getfixturevalue(f"{request.param}_store")


class TestOrderedQueries:

    def test_first_and_last(self, any_store):
        assert any_store.users.first().email == "user0@test.com"
        assert any_store.users.last().email == "user3@test.com"

    def test_filters_with_limit(self, any_store):
        assert any_store.users.first(role=UserRole.LANDLORD).email == "user1@test.com"
        assert any_store.users.last(role=UserRole.TENANT).email == "user2@test.com"

    def test_predicate_with_limit(self, any_store):
        last = any_store.users.last(lambda user: user.first_name in ("U0", "U1"))
        assert last.first_name == "U1"

    def test_descending_list(self, any_store):
        names = [user.first_name for user in any_store.users.list(descending=True, limit=2)]
        assert names == ["U3", "U2"]

    def test_count(self, any_store):
        assert any_store.users.count() == 4
        assert any_store.users.count(role=UserRole.TENANT) == 2
        assert any_store.users.count(lambda user: user.first_name == "U3") == 1

    def test_empty(self):
        store = Store.in_memory()
        assert store.ledger.last() is None
        assert store.ledger.count() == 0


class TestSqlBoundedQueries:

    @pytest.fixture
    def statements(self, sql_store, sql_session):
        captured = []
        engine = sql_session.get_bind()

        def capture(conn, cursor, statement, parameters, context, executemany):
            captured.append(statement)

        event.listen(engine, "before_cursor_execute", capture)
        yield captured
        event.remove(engine, "before_cursor_execute", capture)

    def test_last_uses_order_and_limit(self, sql_store, statements):
        sql_store.users.last()
        (statement,) = statements
        assert "ORDER BY users.id DESC" in statement
        assert "LIMIT" in statement

    def test_count_is_a_count_query(self, sql_store, statements):
        sql_store.users.count(role=UserRole.TENANT)
        (statement,) = statements
        assert "count(" in statement.lower()


class TestSessionContext:

    def test_commits_on_success(self, db_session_factory):
        with get_session_context(db_session_factory) as db:
            _seed(Store.for_session(db))
        with get_session_context(db_session_factory) as db:
            assert Store.for_session(db).users.count() == 4

    def test_rolls_back_on_error(self, db_session_factory):
        with pytest.raises(RuntimeError):
            with get_session_context(db_session_factory) as db:
                _seed(Store.for_session(db))
                raise RuntimeError("boom")
        with get_session_context(db_session_factory) as db:
            assert Store.for_session(db).users.count() == 0
