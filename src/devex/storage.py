"""JSON document storage with atomic writes."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from .exceptions import StorageError


def read_json(path: Path) -> Optional[Any]:
    """Read and parse a JSON file.

    Returns None if the file does not exist; raises StorageError if it
    exists but cannot be read or parsed.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        raise StorageError.from_exception(f"Failed to read {path}", e)

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise StorageError.from_exception(f"Failed to parse {path}", e, details={"line": e.lineno})


def write_json(path: Path, data: Any) -> None:
    """Write ``data`` as JSON, replacing any existing file atomically.

    The document is written to a temporary file in the target directory and
    renamed over the destination, so readers never see a partial write.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError.from_exception(f"Failed to create directory {path.parent}", e)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2)
            handle.write("\n")
        os.replace(tmp_name, path)
    except (OSError, TypeError, ValueError) as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise StorageError.from_exception(f"Failed to write {path}", e)
