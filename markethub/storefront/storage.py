# markethub/storefront/storage.py
import os
from pathlib import Path


class LocalStorage:
    """
    Device-local key/value storage.

    One file per key under `root`. Values are opaque strings; nothing here
    is shared across devices.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None if the key was never written."""
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        """
        Write `value` under `key`.

        Written to a temp file first, then swapped in, so a crash never
        leaves half a value behind.
        """
        self.root.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        os.replace(tmp, path)

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
