"""Tests for pathstore.backends."""

import threading

import pytest

from pathstore.backends import (
    MemoryBackend,
    SQLiteBackend,
    connect,
    default_backend,
)


class TestMemoryBackend:
    """Tests for MemoryBackend."""

    def test_crud_operations(self):
        """Basic CRUD operations work."""
        backend = MemoryBackend()
        backend.connect()

        # Create
        backend.put("settings", '{"value":42}')

        # Read
        assert backend.get("settings") == '{"value":42}'
        assert backend.get("other") is None

        # Exists
        assert backend.exists("settings") is True
        assert backend.exists("other") is False

        # Delete
        assert backend.delete("settings") is True
        assert backend.exists("settings") is False
        assert backend.delete("settings") is False  # Already deleted

    def test_put_replaces(self):
        """Writing a key again replaces its source."""
        backend = MemoryBackend()
        backend.connect()
        backend.put("k", "1")
        backend.put("k", "2")
        assert backend.get("k") == "2"

    def test_query(self):
        """Can query keys with glob patterns."""
        backend = MemoryBackend()
        backend.connect()

        backend.put("app.settings", "{}")
        backend.put("app.session", "{}")
        backend.put("other.settings", "{}")

        assert list(backend.query("app.*")) == ["app.session", "app.settings"]
        assert len(list(backend.query("*"))) == 3

    def test_close_clears(self):
        """Closing drops in-memory data."""
        backend = MemoryBackend()
        backend.connect()
        backend.put("k", "1")
        backend.close()
        assert backend.get("k") is None


class TestSQLiteBackend:
    """Tests for SQLiteBackend."""

    def test_crud_operations(self):
        """Basic CRUD operations work."""
        backend = SQLiteBackend()
        backend.connect(path=":memory:")

        backend.put("settings", '{"value":42}')
        assert backend.get("settings") == '{"value":42}'
        assert backend.get("other") is None

        backend.put("settings", '{"value":43}')
        assert backend.get("settings") == '{"value":43}'

        assert backend.delete("settings") is True
        assert backend.exists("settings") is False
        assert backend.delete("settings") is False

        backend.close()

    def test_persistence_to_file(self, tmp_path):
        """Data persists to file."""
        db_path = str(tmp_path / "store.db")

        # Write
        backend1 = SQLiteBackend()
        backend1.connect(path=db_path)
        backend1.put("settings", '{"x":123}')
        backend1.close()

        # Read in new connection
        backend2 = SQLiteBackend()
        backend2.connect(path=db_path)
        assert backend2.get("settings") == '{"x":123}'
        backend2.close()

    def test_query_glob(self):
        """Glob patterns work in SQLite."""
        backend = SQLiteBackend()
        backend.connect(path=":memory:")

        backend.put("app.settings", "{}")
        backend.put("app.session", "{}")
        backend.put("other.settings", "{}")

        assert list(backend.query("app.*")) == ["app.session", "app.settings"]

        backend.close()


class TestConnect:
    """Tests for connect()."""

    def test_memory_url(self):
        """Can connect with memory:// URL."""
        backend = connect("memory://")
        assert isinstance(backend, MemoryBackend)
        backend.close()

    def test_sqlite_memory_url(self):
        """Can connect with sqlite:///:memory: URL."""
        backend = connect("sqlite:///:memory:")
        assert isinstance(backend, SQLiteBackend)
        backend.put("k", "v")
        assert backend.get("k") == "v"
        backend.close()

    def test_sqlite_file_url(self, tmp_path):
        """sqlite:/// URLs open files."""
        db_path = tmp_path / "app.db"
        backend = connect(f"sqlite:///{db_path}")
        backend.put("k", "v")
        backend.close()
        assert db_path.exists()

    def test_unknown_scheme(self):
        """Unknown scheme raises ValueError."""
        with pytest.raises(ValueError):
            connect("unknown://localhost")


class TestDefaultBackend:
    """Tests for the process-wide default backend."""

    def test_shared_instance(self):
        """The same connected backend is returned each time."""
        backend = default_backend()
        assert backend is default_backend()
        assert isinstance(backend, MemoryBackend)


class TestSQLiteBackendThreads:
    """Tests for SQLiteBackend writes from several threads."""

    def test_concurrent_put_and_delete(self):
        """Writes and deletes from timer-like threads share one connection safely."""
        backend = SQLiteBackend()
        backend.connect(path=":memory:")
        errors = []

        def churn(prefix):
            try:
                for i in range(50):
                    key = f"{prefix}.{i}"
                    backend.put(key, "{}")
                    assert backend.delete(key) is True
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=churn, args=(f"t{n}",)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert list(backend.query("*")) == []
        backend.close()
