"""JSON file storage with Result-based error handling.

A thin wrapper around file I/O for the flat JSON stores, returning Result
types instead of raising exceptions.
"""

import json
import shutil
from pathlib import Path
from typing import Any

from focustree.domain.shared.result import Err, Ok, Result


class JsonStorage:
    """Low-level JSON file I/O with Result-based error handling.

    Holds no domain logic. Every store in focustree is a single JSON
    document (an array) rewritten whole on each save.

    Example:
        storage = JsonStorage()
        result = storage.load_json(Path("todos.json"))
        if isinstance(result, Ok):
            todos = result.value
        else:
            print(f"Error: {result.error}")
    """

    def load_json(self, path: Path) -> Result[Any, str]:
        """Load JSON data from a file.

        Args:
            path: Path to the JSON file to read.

        Returns:
            Ok(data) if successful, Err(str) with error message if failed.
        """
        try:
            if not path.exists():
                return Err(f"File not found: {path}")

            content = path.read_text(encoding="utf-8")
            return Ok(json.loads(content))

        except json.JSONDecodeError as e:
            return Err(f"Invalid JSON in {path}: {e}")
        except PermissionError:
            return Err(f"Permission denied reading {path}")
        except OSError as e:
            return Err(f"Error reading {path}: {e}")

    def save_json(self, path: Path, data: Any, indent: int = 2) -> Result[None, str]:
        """Serialize ``data`` and overwrite ``path`` with it.

        Args:
            path: Path to the JSON file to write.
            data: JSON-serializable value.
            indent: JSON indentation level (default 2).

        Returns:
            Ok(None) if successful, Err(str) with error message if failed.
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            content = json.dumps(data, indent=indent)
            path.write_text(content, encoding="utf-8")
            return Ok(None)

        except TypeError as e:
            return Err(f"Data not JSON serializable: {e}")
        except PermissionError:
            return Err(f"Permission denied writing {path}")
        except OSError as e:
            return Err(f"Error writing {path}: {e}")

    def ensure_json(self, path: Path, default: Any) -> Result[None, str]:
        """Create ``path`` holding ``default`` if it does not exist yet."""
        if path.exists():
            return Ok(None)
        return self.save_json(path, default)

    def backup(self, path: Path) -> Result[Path | None, str]:
        """Copy ``path`` to ``<path>.backup``.

        Returns:
            Ok(backup_path), Ok(None) when there was nothing to back up,
            or Err(str) if the copy failed.
        """
        if not path.exists():
            return Ok(None)

        backup_path = path.with_name(f"{path.name}.backup")
        try:
            shutil.copy2(path, backup_path)
            return Ok(backup_path)
        except OSError as e:
            return Err(f"Error backing up {path}: {e}")
