# Copyright 2025 KTTC AI (https://github.com/kttc-ai)
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""JSON file persistence shared by the translation memory and the glossary.

Both stores follow the same lifecycle:

    clean --(mutation)--> dirty --(save)--> clean

- ``load()`` treats a missing file as an empty store
- ``save()`` writes only when dirty
- ``force_save()`` always writes
- writes go to a temporary file that is then renamed over the target
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from locontext.core.errors import StoreDecodeError, StoreWriteError

logger = logging.getLogger(__name__)

STORAGE_VERSION = "1.0"


def write_json_atomic(path: Path, data: Any) -> None:
    """Write pretty, sorted-key JSON to ``path`` atomically.

    Args:
        path: Destination file
        data: JSON-serializable document

    Raises:
        StoreWriteError: If the document cannot be encoded or written
    """
    tmp_name: str | None = None
    try:
        payload = json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n"
        path.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())

        os.replace(tmp_name, path)
        tmp_name = None

    except (OSError, TypeError, ValueError) as e:
        raise StoreWriteError(f"Failed to write {path}: {e}") from e

    finally:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)


class JsonStore(ABC):
    """Base class for a store backed by one JSON document.

    A store without a path lives only in memory; ``load`` and ``save`` are
    then no-ops. All access goes through ``self._lock`` so concurrent
    callers against one store are serialized.
    """

    def __init__(self, storage_path: str | Path | None = None):
        """Initialize store.

        Args:
            storage_path: Path to the backing JSON file (optional)
        """
        self.storage_path = Path(storage_path) if storage_path is not None else None
        self._lock = threading.RLock()
        self._dirty = False

    @property
    def is_dirty(self) -> bool:
        """Whether the store has unsaved changes."""
        with self._lock:
            return self._dirty

    def _mark_dirty(self) -> None:
        self._dirty = True

    def load(self) -> None:
        """Load the store from disk.

        A missing file leaves the store empty.

        Raises:
            StoreDecodeError: If the file is not a valid store document
            OSError: If the file exists but cannot be read
        """
        if self.storage_path is None:
            return

        with self._lock:
            if not self.storage_path.exists():
                logger.debug("No store file at %s, starting empty", self.storage_path)
                return

            try:
                self._restore(self.storage_path.read_text(encoding="utf-8"))
            except (ValidationError, ValueError) as e:
                raise StoreDecodeError(f"Malformed store file {self.storage_path}: {e}") from e

            self._dirty = False
            logger.debug("Loaded %s from %s", type(self).__name__, self.storage_path)

    def save(self) -> None:
        """Save the store to disk if it has unsaved changes.

        Raises:
            StoreWriteError: If writing fails
        """
        if self.storage_path is None:
            return

        with self._lock:
            if not self._dirty:
                return

            write_json_atomic(self.storage_path, self._snapshot())
            self._dirty = False
            logger.debug("Saved %s to %s", type(self).__name__, self.storage_path)

    def force_save(self) -> None:
        """Save the store regardless of its dirty state."""
        if self.storage_path is None:
            return

        with self._lock:
            self._dirty = True
            self.save()

    @abstractmethod
    def _restore(self, raw: str) -> None:
        """Replace in-memory state from a raw JSON document."""

    @abstractmethod
    def _snapshot(self) -> dict[str, Any]:
        """Build the JSON document for the current state."""
