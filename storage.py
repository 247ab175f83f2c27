"""JSON file persistence for the product list."""

import json
import logging
import os
from pathlib import Path
from typing import List, Any

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).parent / "data"
STORAGE_KEY = "bottled_drinks_products"


def data_dir() -> Path:
    """Directory for JSON files, overridable with BOTTLING_DATA_DIR."""
    return Path(os.environ.get("BOTTLING_DATA_DIR") or DEFAULT_DATA_DIR)


class JsonStorage:
    """Best-effort store for a list of records under one fixed key.

    Nothing raised while reading or writing reaches the caller: a failed load
    gives an empty list and a failed save is only logged.
    """

    def __init__(self, key: str = STORAGE_KEY, directory: Path = None):
        self.key = key
        self.data_dir = Path(directory) if directory is not None else data_dir()

    @property
    def path(self) -> Path:
        return self.data_dir / f"{self.key}.json"

    def save(self, items: List[Any]) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            text = json.dumps(items, ensure_ascii=False, indent=2)
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(text)
            # previous file stays intact until the new one is complete
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError):
            logger.exception("Error saving %s", self.path)

    def load(self) -> List[Any]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            logger.exception("Error loading %s", self.path)
            return []
        if not isinstance(data, list):
            logger.error("Expected a list in %s, got %s", self.path, type(data).__name__)
            return []
        return data
