"""
Static daily content: formation (reading + meditation) and exhortation per parcours day.
Bodies are markdown strings and are passed through untouched.
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import settings
from .debug_utils import debug_log

PACKAGED_CONTENT_DIR = Path(__file__).resolve().parent / "content"
FORMATIONS_FILE = "formations.json"
EXHORTATIONS_FILE = "exhortations.json"


@dataclass(frozen=True)
class Formation:
    day: int
    title: str
    author: str
    reading_time: int  # minutes
    body: str
    meditation_text: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Exhortation:
    day: int
    content: str
    author: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _load_array(path: Path) -> List[Dict[str, Any]]:
    if not path.exists():
        debug_log("content file missing", {"path": str(path)}, tag="content")
        return []
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array")
    return data


def _formation(raw: Dict[str, Any]) -> Formation:
    return Formation(
        day=int(raw["day"]),
        title=str(raw.get("title") or ""),
        author=str(raw.get("author") or ""),
        reading_time=int(raw.get("readingTime", raw.get("reading_time", 0)) or 0),
        body=str(raw.get("body") or ""),
        meditation_text=str(raw.get("meditationText", raw.get("meditation_text", "")) or ""),
    )


def _exhortation(raw: Dict[str, Any]) -> Exhortation:
    return Exhortation(
        day=int(raw["day"]),
        content=str(raw.get("content") or ""),
        author=str(raw.get("author") or ""),
    )


class ContentRepository:
    """Day-indexed lookup over the two JSON files, loaded once at construction."""

    def __init__(self, content_dir: Optional[Path | str] = None):
        base = Path(content_dir or settings.CONTENT_DIR or PACKAGED_CONTENT_DIR)
        self.content_dir = base
        self._formations = {f.day: f for f in map(_formation, _load_array(base / FORMATIONS_FILE))}
        self._exhortations = {e.day: e for e in map(_exhortation, _load_array(base / EXHORTATIONS_FILE))}

    def get_formation(self, day: int) -> Optional[Formation]:
        return self._formations.get(day)

    def get_exhortation(self, day: int) -> Optional[Exhortation]:
        return self._exhortations.get(day)
