"""Database documents on disk.

A database is one JSON object whose keys are table names, as written by
the web client: ``{"minions": [...], "settings": {...}}``. Loading and
saving return Results; the task store decides what an error means.
"""

import json
from pathlib import Path
from typing import Any

from minions.domain.shared.result import Err, Ok, Result

Tables = dict[str, Any]


class JsonStorage:
    """Reads and writes database documents.

    A missing document is an empty database, not an error. Writes go to
    a sibling ``.tmp`` file that is then renamed over the target, so an
    interrupted save leaves the previous document intact.

    Example:
        storage = JsonStorage()
        result = storage.load_tables(settings.database_path())
        if isinstance(result, Err):
            raise StoreError("list", None, result.error)
        minions = result.value.get("minions", [])
    """

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def load_tables(self, path: Path) -> Result[Tables, str]:
        """Load every table of a database document.

        Returns:
            Ok(tables), Ok({}) if the document does not exist yet, or
            Err(message) if it cannot be read or is not a JSON object.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Ok({})
        except UnicodeDecodeError as e:
            return Err(f"Invalid UTF-8 in {path}: {e}")
        except OSError as e:
            return Err(f"Cannot read {path}: {e}")

        try:
            tables = json.loads(text)
        except json.JSONDecodeError as e:
            return Err(f"Invalid JSON in {path}: {e}")

        if not isinstance(tables, dict):
            return Err(f"{path} does not hold a table object")
        return Ok(tables)

    def save_tables(self, path: Path, tables: Tables) -> Result[None, str]:
        """Replace a database document with ``tables``."""
        try:
            content = json.dumps(tables, indent=self.indent, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            return Err(f"Tables for {path} are not JSON serializable: {e}")

        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(content, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            return Err(f"Cannot write {path}: {e}")
        return Ok(None)
