import json
from typing import Any, Optional

from .config import settings


def debug_enabled() -> bool:
    return bool(settings.VIRTUS_DEBUG)


def debug_log(message: str, payload: Optional[dict[str, Any]] = None, tag: str = "debug") -> None:
    if not debug_enabled():
        return
    if payload is None:
        print(f"[{tag}] {message}")
        return
    try:
        payload_str = json.dumps(payload, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        payload_str = str(payload)
    print(f"[{tag}] {message} :: {payload_str}")
