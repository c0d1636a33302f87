"""LibraryExporter for writing exported collections as JSON documents."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


def ensure_dir(path: Path) -> Path:
    """Ensure directory exists."""
    path.mkdir(parents=True, exist_ok=True)
    return path


class LibraryExporter:
    """
    Writes named JSON documents under an export directory.

    Names may contain slashes (``playlists/<id>``, ``top/tracks/short_term``);
    parent directories are created as needed. Writes are synchronous, so a
    document is complete on disk when `write` returns.
    """

    def __init__(self, export_dir: str | Path = "./data"):
        self.export_dir = ensure_dir(Path(export_dir))
        self.written: Dict[str, Path] = {}

    def path_for(self, name: str) -> Path:
        return self.export_dir / f"{name}.json"

    def write(self, name: str, data: dict) -> Path:
        """Write one document; output is stable for identical input."""
        path = self.path_for(name)
        ensure_dir(path.parent)
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.write("\n")
        self.written[name] = path
        logger.debug(f"Wrote {path}")
        return path

    def write_collection(self, name: str, kind: str, items: List[dict]) -> Path:
        """Write a ``{"total": n, kind: [...]}`` document."""
        return self.write(name, {"total": len(items), kind: items})

    def write_detail(self, folder: str, detail: dict) -> Optional[Path]:
        """Write a detail object as ``<folder>/<id>``."""
        resource_id = detail.get("id")
        if not resource_id:
            logger.warning(f"Skipping {folder} detail without id")
            return None
        return self.write(f"{folder}/{resource_id}", detail)

    def get_stats(self) -> dict:
        return {"documents": len(self.written)}
