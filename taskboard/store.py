import copy
import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, Protocol

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from taskboard.config import get_settings
from taskboard.exceptions import StorageReadError, StorageWriteError
from taskboard.models.todos import Task

logger = logging.getLogger(__name__)

_task_list = TypeAdapter(list[Task])

NEW_FILE_MODE = 0o644


class TaskStore(Protocol):
    """Durable holder of the full task collection.

    Every operation reads or rewrites the whole collection; there are no
    partial reads or incremental writes.
    """

    def initialize(self) -> None:
        """Create an empty collection if none exists yet."""

    def load(self) -> list[Task]:
        """Return every stored task, in stored order."""

    def save(self, tasks: Iterable[Task]) -> None:
        """Replace the stored collection with ``tasks``."""


def _dump(tasks: Iterable[Task]) -> list[dict]:
    return [t.model_dump(by_alias=True, exclude_unset=True) for t in tasks]


class JsonFileTaskStore:
    """Keeps all todos in one JSON array on disk.

    No locking: concurrent writers each rewrite the whole file and the last
    one wins.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def initialize(self) -> None:
        if self.path.exists():
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageWriteError(f"Cannot create data directory {self.path.parent}: {e}") from e
        self._write_text("[]")
        logger.info("Created empty todo file at %s", self.path)

    def load(self) -> list[Task]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageReadError(f"Cannot read {self.path}: {e}") from e
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageReadError(f"{self.path} is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise StorageReadError(f"{self.path} does not hold a JSON array")
        try:
            return _task_list.validate_python(data)
        except PydanticValidationError as e:
            raise StorageReadError(f"{self.path} contains invalid todos: {e}") from e

    def save(self, tasks: Iterable[Task]) -> None:
        self._write_text(json.dumps(_dump(tasks), indent=2, ensure_ascii=False))

    def _write_text(self, text: str) -> None:
        """Write to a sibling temp file, then swap it over the target.

        The target keeps its permissions; a new file gets 0644.
        """
        tmp_name = None
        try:
            mode = stat.S_IMODE(self.path.stat().st_mode) if self.path.exists() else NEW_FILE_MODE
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                os.fchmod(f.fileno(), mode)
                f.write(text)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("Failed to write %s: %s", self.path, e)
            raise StorageWriteError(f"Cannot write {self.path}: {e}") from e


class InMemoryTaskStore:
    """Store double that keeps the collection in a list, for tests and tooling."""

    def __init__(self, tasks: Iterable[Task] | None = None):
        self._records = _dump(tasks or [])

    def initialize(self) -> None:
        return

    def load(self) -> list[Task]:
        return _task_list.validate_python(copy.deepcopy(self._records))

    def save(self, tasks: Iterable[Task]) -> None:
        self._records = _dump(tasks)


def get_store() -> TaskStore:
    return JsonFileTaskStore(get_settings().data_file)
