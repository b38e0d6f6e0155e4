"""Helpers to persist intermediate representations for debugging."""
from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any

from typesetter.model.glyph import Glyph
from typesetter.model.layout_model import DocumentLayout
from typesetter.utils.units import Mm, Pt, Sp


class DebugDumper:
    """Writes intermediate artifacts onto disk for inspection."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def dump(self, layout: DocumentLayout) -> Path:
        """Persist the document layout as JSON for offline analysis."""
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / "layout.json"
        target.write_text(json.dumps(self._serialize(layout), indent=2), encoding="utf-8")
        return target

    def _serialize(self, value: Any) -> Any:
        if isinstance(value, Glyph):
            # Fonts are shared references; only id and scale are written.
            return {"glyph": value.glyph_id, "scale_sp": value.scale.value}
        if isinstance(value, (Sp, Pt, Mm)):
            return value.value
        if is_dataclass(value):
            return {f.name: self._serialize(getattr(value, f.name)) for f in fields(value)}
        if isinstance(value, dict):
            return {k: self._serialize(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._serialize(v) for v in value]
        return value
