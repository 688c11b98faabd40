import json
import logging
import os
from pathlib import Path

from utils.errors import StorageError

logger = logging.getLogger(__name__)


class JsonDocument:
    """A JSON object on disk, always read whole and written whole."""

    def __init__(self, path: str | Path, default: dict | None = None):
        self.path = Path(path)
        self._default = default or {}

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> dict:
        if not self.path.exists():
            return dict(self._default)
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not read {self.path.name}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"{self.path.name} does not contain a JSON object.")
        return data

    def write(self, data: dict) -> None:
        """Write via .tmp + os.replace() so a failure leaves the old file intact."""
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=4)
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as e:
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                pass
            logger.error("Failed to write %s: %s", self.path, e)
            raise StorageError(f"Could not save {self.path.name}: {e}") from e
