from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from vitalgraph.errors import StateStoreError
from vitalgraph.state.base import Mutator, StateStore, T
from vitalgraph.state.document import Document, empty_state, encode_value, normalize_state
from vitalgraph.state.mutation_queue import MutationQueue

logger = logging.getLogger("vitalgraph.state")


class JsonFileStateStore(StateStore):
    """
    Whole-document backend persisted as one JSON file.

    Mutual exclusion is purely in-process. Writes go to a temporary file
    in the same directory followed by ``os.replace`` so a reader sees
    either the old or the new document, never a partial one.
    """

    backend = "file"

    def __init__(
        self,
        path: Path,
        *,
        indent: Optional[int] = 2,
        queue: Optional[MutationQueue] = None,
    ) -> None:
        super().__init__(queue=queue)
        self.path = Path(path)
        self.indent = indent

    def read(self) -> Document:
        if not self.path.exists():
            return empty_state()
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except json.JSONDecodeError as exc:
            raise StateStoreError(
                f"state file {self.path} is not valid JSON: {exc}",
                "state_file_corrupt",
            ) from exc
        except OSError as exc:
            raise StateStoreError(
                f"state file {self.path} is unreadable: {exc}",
                "state_file_unreadable",
            ) from exc
        return normalize_state(raw)

    def _transact(self, fn: Mutator[T]) -> T:
        doc = self.read()
        result = fn(doc)
        self._write(doc)
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _write(self, doc: Document) -> None:
        tmp_name: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                dir=str(self.path.parent),
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(doc, handle, indent=self.indent, default=encode_value)
                if self.indent is not None:
                    handle.write("\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as exc:
            logger.error("[state] failed to write %s: %s", self.path, exc)
            raise StateStoreError(
                f"state file {self.path} could not be written: {exc}",
                "state_file_unwritable",
            ) from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
