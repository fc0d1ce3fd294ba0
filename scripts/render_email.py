#!/usr/bin/env python3
"""
Render an HTML email body into the text blocks the relay would post.

What it does
- Reads an HTML file (or a saved request_body.json, using its `html` and
  `subject` fields)
- Runs the same renderer as the webhook (footer trim, tables, lists, ...)
- Prints every block with its length, so splitting can be checked by eye

Nothing is sent anywhere.

Usage examples
python scripts/render_email.py email.html --title "Weekly update"
python scripts/render_email.py request_body.json --limit 500
"""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Optional, Tuple

from mailrelay.services.renderer import EmailRenderer, RenderConfig


def _load(path: Path) -> Tuple[str, Optional[str]]:
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(raw)
        return data.get("html") or "", data.get("subject")
    return raw, None


def main() -> None:
    ap = argparse.ArgumentParser(description="Render an HTML email into message blocks")
    ap.add_argument("path", help="HTML file or saved request_body.json")
    ap.add_argument("--title", help="Title to prepend (defaults to the JSON subject)")
    ap.add_argument("--limit", type=int, default=1800, help="Max characters per block")
    ap.add_argument("--footer-class", default="gmail_signature_prefix", help="Signature marker class")
    args = ap.parse_args()

    html, subject = _load(Path(args.path))
    renderer = EmailRenderer(RenderConfig(char_limit=args.limit, footer_marker_class=args.footer_class))
    blocks = renderer.render_blocks(html, args.title or subject)

    for idx, block in enumerate(blocks, start=1):
        print(f"===== block {idx}/{len(blocks)} ({len(block)} chars) =====")
        print(block)
    if not blocks:
        print("(no content)")


if __name__ == "__main__":
    main()
