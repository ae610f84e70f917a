from __future__ import annotations

"""
JSON file key-value backend.

Stores every key in a single JSON document on disk:

    {"proposal_keys": "<base64>", "proposal_1700000000000-abc1234": "<base64>"}

Values are base64 so arbitrary bytes survive the round trip. Each set_data()
re-reads the document and writes it back atomically (temp file + fsync +
os.replace), so a crash never leaves a half-written file behind. Like every
PolicyPulse backend it offers no multi-key transactions: two processes
writing different keys at the same moment can still overwrite each other's
document (last writer wins).
"""

import base64
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Union

from ..errors import BackendUnavailable

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _fsync_dir(dir_path: Path) -> None:
    try:
        fd = os.open(str(dir_path), os.O_DIRECTORY)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)
    except OSError:
        pass


def atomic_write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=str(path.parent))
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        os.replace(str(tmp_path), str(path))
        _fsync_dir(path.parent)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


class JSONFileBackend:
    def __init__(self, path: PathLike = "policypulse_store.json") -> None:
        self.path = Path(path)

    def is_available(self) -> bool:
        parent = self.path.parent
        if self.path.exists():
            return os.access(self.path, os.R_OK | os.W_OK)
        return not parent.exists() or os.access(parent, os.W_OK)

    def _read_all(self, for_write: bool = False) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as e:
            raise BackendUnavailable(f"cannot read {self.path}: {e}") from e
        except ValueError:
            raw = None
        if isinstance(raw, dict):
            return raw
        # Corrupted document: readers see an empty store, writers must not
        # overwrite it with a document holding only their key.
        if for_write:
            raise BackendUnavailable(f"{self.path} is corrupted; refusing to overwrite it")
        log.error("Store file %s is not a JSON object; treating it as empty", self.path)
        return {}

    def get_data(self, key: str) -> bytes:
        value = self._read_all().get(key)
        if not isinstance(value, str):
            return b""
        try:
            return base64.b64decode(value.encode("ascii"), validate=True)
        except ValueError:
            log.error("Value for %s in %s is not base64; treating it as absent", key, self.path)
            return b""

    def set_data(self, key: str, value: bytes) -> Dict[str, Any]:
        doc = self._read_all(for_write=True)
        doc[key] = base64.b64encode(bytes(value)).decode("ascii")
        data = json.dumps(doc, sort_keys=True, indent=2).encode("utf-8")
        try:
            atomic_write_bytes(self.path, data)
        except OSError as e:
            raise BackendUnavailable(f"cannot write {self.path}: {e}") from e
        return {"ok": True, "key": key, "bytes": len(value)}
