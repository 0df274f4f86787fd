"""
Identity store implementations.

FileIdentityStore writes `{"user_id": <int>}` to a small JSON file.
InMemoryIdentityStore is used by tests and by throwaway sessions.
"""

import json
from pathlib import Path
from typing import Optional, Union

import structlog

from fintrack.services.storage.interface import IdentityStoreInterface, StorageError


logger = structlog.get_logger(__name__)


class FileIdentityStore(IdentityStoreInterface):
    """Identity store backed by a JSON file."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[int]:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            user_id = data["user_id"]
            if isinstance(user_id, bool) or not isinstance(user_id, (int, str)):
                raise TypeError(f"unexpected user_id type {type(user_id).__name__}")
            return int(user_id)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("identity_file_unreadable", path=str(self._path), error=str(e))
            try:
                self.clear()
            except StorageError as clear_error:
                logger.warning("identity_file_not_removed", error=str(clear_error))
            return None

    def save(self, user_id: int) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps({"user_id": user_id}), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not write identity file {self._path}: {e}") from e

    def clear(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not remove identity file {self._path}: {e}") from e


class InMemoryIdentityStore(IdentityStoreInterface):
    """Identity store that lives as long as the process."""

    def __init__(self, user_id: Optional[int] = None):
        self._user_id = user_id

    def load(self) -> Optional[int]:
        return self._user_id

    def save(self, user_id: int) -> None:
        self._user_id = user_id

    def clear(self) -> None:
        self._user_id = None
