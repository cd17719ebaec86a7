"""JSON file helpers shared by the file-backed stores."""

from __future__ import annotations

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def safe_filename(identifier: str) -> str:
    return _UNSAFE_CHARS.sub("_", identifier) or "_"


def write_json(path: Path, data: Any) -> None:
    """Write via a sibling temp file so readers never see a partial document."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def read_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
