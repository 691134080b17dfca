from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO


class StorageError(RuntimeError):
    pass


@dataclass(frozen=True)
class LocalStorage:
    root: Path

    def path(self, key: str) -> Path:
        safe_key = key.lstrip("/").replace("\\", "/")
        p = (self.root / safe_key).resolve()
        if self.root.resolve() not in p.parents:
            raise StorageError(f"Storage key escapes root: {key!r}")
        return p

    def put_bytes(self, key: str, data: bytes) -> None:
        p = self.path(key)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)

    def open(self, key: str) -> BinaryIO:
        return self.path(key).open("rb")

    def exists(self, key: str) -> bool:
        return self.path(key).is_file()

    def delete(self, key: str) -> bool:
        """Remove the file if present. Returns True when something was deleted."""
        p = self.path(key)
        if not p.is_file():
            return False
        p.unlink()
        return True


def documentos_storage(config: dict) -> LocalStorage:
    # Relative UPLOAD_ROOT values are taken from the working directory
    root = Path(config.get("UPLOAD_ROOT") or "uploads").resolve()
    return LocalStorage(root=root / "documentos")
