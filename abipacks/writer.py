"""Persistence of assembled packs and the pack index."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Sequence

from .assembler import pack_file_name
from .logging import get_logger
from .models import IndexEntry, Pack

INDEX_FILENAME = "index.json"


class PackWriter:
    """Writes packs as compact JSON files under a single output directory."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir
        self.logger = get_logger("writer")

    def write_packs(self, packs: Sequence[Pack]) -> List[Path]:
        written: List[Path] = []
        for pack in packs:
            path = self._write(pack_file_name(pack), pack.to_dict())
            self.logger.info("%s Wrote %d defs", pack.metadata.name, len(pack.defs))
            written.append(path)
        return written

    def write_index(self, entries: Sequence[IndexEntry]) -> Path:
        path = self._write(INDEX_FILENAME, [entry.to_dict() for entry in entries])
        self.logger.info("Wrote Index for %d ABI packs", len(entries))
        return path

    def _write(self, filename: str, payload: Any) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / filename
        path.write_text(json.dumps(payload, separators=(",", ":")), encoding="utf-8")
        return path


__all__ = ["INDEX_FILENAME", "PackWriter"]
