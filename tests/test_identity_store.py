"""Tests for the persisted user id."""

import json
from pathlib import Path

from conftest import run
from fintrack.notifications import Notifier
from fintrack.services.storage import FileIdentityStore, InMemoryIdentityStore
from fintrack.session import SessionState, SessionStatus


class TestFileIdentityStore:
    """Tests for the JSON file store."""

    def test_missing_file(self, tmp_path):
        store = FileIdentityStore(tmp_path / "session.json")
        assert store.load() is None

    def test_save_and_load(self, tmp_path):
        """Test the id survives a new store instance (a restart)."""
        path = tmp_path / "nested" / "session.json"
        FileIdentityStore(path).save(7)
        assert json.loads(path.read_text()) == {"user_id": 7}
        assert FileIdentityStore(path).load() == 7

    def test_clear(self, tmp_path):
        store = FileIdentityStore(tmp_path / "session.json")
        store.save(7)
        store.clear()
        assert store.load() is None
        assert not store.path.exists()
        # Clearing twice is fine
        store.clear()

    def test_corrupt_file_is_discarded(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json")
        store = FileIdentityStore(path)
        assert store.load() is None
        assert not path.exists()

    def test_wrong_type_is_discarded(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"user_id": [1]}))
        assert FileIdentityStore(path).load() is None

    def test_corrupt_file_that_cannot_be_removed(self, tmp_path, monkeypatch):
        """Test that a stuck corrupt file reads as empty instead of raising."""
        path = tmp_path / "session.json"
        path.write_text("{not json")

        def refuse(self, missing_ok=False):
            raise PermissionError("read-only")

        monkeypatch.setattr(Path, "unlink", refuse)
        assert FileIdentityStore(path).load() is None
        assert path.exists()

    def test_startup_with_stuck_corrupt_file(self, tmp_path, monkeypatch, gateway):
        path = tmp_path / "session.json"
        path.write_text("{not json")

        def refuse(self, missing_ok=False):
            raise PermissionError("read-only")

        monkeypatch.setattr(Path, "unlink", refuse)
        notifier = Notifier()
        session = SessionState(gateway, FileIdentityStore(path), notifier)
        assert run(session.start()) == SessionStatus.ANONYMOUS
        assert notifier.pending == []


class TestInMemoryIdentityStore:
    """Tests for the in-process store."""

    def test_round_trip(self):
        store = InMemoryIdentityStore()
        assert store.load() is None
        store.save(3)
        assert store.load() == 3
        store.clear()
        assert store.load() is None
