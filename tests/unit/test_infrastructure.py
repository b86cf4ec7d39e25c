from unittest.mock import MagicMock

from sqlalchemy import inspect

from storefront_admin.core.config import DatabaseSettings
from storefront_admin.db.session import DBSessionManager
from storefront_admin.utils.cache import cache


class TestDBSessionManager:
    def test_sqlite_url_skips_pool_sizing(self):
        manager = DBSessionManager(DatabaseSettings(database_url="sqlite://"))

        assert manager.engine.dialect.name == "sqlite"
        manager.create_tables()
        assert "categories" in inspect(manager.engine).get_table_names()

    def test_get_session_yields_active_session(self):
        manager = DBSessionManager(DatabaseSettings(database_url="sqlite://"))
        sessions = manager.get_session()

        session = next(sessions)
        assert session.is_active
        sessions.close()


class TestCache:
    def test_disabled_by_configuration(self):
        assert cache.enabled is False

        calls = []

        @cache.cacheable(lambda: "categories:test")
        def compute():
            calls.append(1)
            return [1]

        assert compute() == [1]
        assert compute() == [1]
        assert len(calls) == 2

    def test_cacheable_stores_result_when_enabled(self, monkeypatch):
        client = MagicMock()
        client.get.return_value = None
        monkeypatch.setattr(cache, "_client", client)

        @cache.cacheable(lambda: "categories:test")
        def compute():
            return [{"slug": "shoes"}]

        assert cache.enabled is True
        assert compute() == [{"slug": "shoes"}]
        client.get.assert_called_once_with("categories:test")
        client.set.assert_called_once()
