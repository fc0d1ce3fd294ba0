from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Tuple

logger = logging.getLogger(__name__)

BODY_FILENAME = "request_body.json"
HEADERS_FILENAME = "request_headers.json"


def save_request(payload: Any, headers: Mapping[str, str], directory: str) -> Tuple[Path, Path]:
    """Write the parsed body and the headers as pretty JSON for later replay.

    See scripts/replay_request.py. Best-effort debugging aid: failures are
    logged and never break the request.
    """
    out_dir = Path(directory or ".")
    body_path = out_dir / BODY_FILENAME
    headers_path = out_dir / HEADERS_FILENAME
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        body_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        headers_path.write_text(json.dumps(dict(headers), indent=2), encoding="utf-8")
        logger.debug("Request saved to %s and %s", body_path, headers_path)
    except OSError as exc:
        logger.warning("Could not save request dump: %s", exc)
    return body_path, headers_path
