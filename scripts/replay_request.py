#!/usr/bin/env python3
"""
Replay a saved webhook request against a locally running relay.

What it does
- Reads request_body.json (and request_headers.json when present), as
  written by the server with SAVE_REQUEST_BODY=true
- Drops hop-by-hop headers, recomputes X-Webhook-Signature from
  WEBHOOK_SIGNATURE_KEY over the exact bytes sent
- POSTs to http://localhost:<PORT>/<WEBHOOK_PATH> (or --url) and prints the
  response

Requirements
- httpx, python-dotenv
- WEBHOOK_SIGNATURE_KEY / WEBHOOK_PATH / PORT in the environment or .env

Usage examples
python scripts/replay_request.py
python scripts/replay_request.py --body saved/request_body.json --url http://localhost:8000/webhook
"""
from __future__ import annotations

import argparse
import hashlib
import hmac
import json
import os
import sys
from pathlib import Path
from typing import Dict

import httpx
from dotenv import find_dotenv, load_dotenv

_SKIP_HEADERS = {"host", "content-length", "connection", "x-webhook-signature"}


def build_local_url() -> str:
    port = int(os.getenv("PORT", "8000"))
    path = os.getenv("WEBHOOK_PATH", "webhook").strip("/")
    return f"http://localhost:{port}/{path}"


def build_headers(base: Dict[str, str], body: bytes, key: str) -> Dict[str, str]:
    headers = {k: str(v) for k, v in base.items() if k.lower() not in _SKIP_HEADERS}
    if not any(k.lower() == "content-type" for k in headers):
        headers["Content-Type"] = "application/json"
    if key:
        headers["X-Webhook-Signature"] = hmac.new(key.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return headers


def main() -> int:
    load_dotenv(find_dotenv(usecwd=True), override=False)
    ap = argparse.ArgumentParser(description="Replay a saved webhook request")
    ap.add_argument("--body", default="request_body.json", help="Saved request body")
    ap.add_argument("--headers", default="request_headers.json", help="Saved request headers")
    ap.add_argument("--url", default=None, help="Target URL (default: local webhook)")
    args = ap.parse_args()

    url = args.url or build_local_url()
    body = Path(args.body).read_bytes()
    headers_path = Path(args.headers)
    base = json.loads(headers_path.read_text(encoding="utf-8")) if headers_path.exists() else {}
    headers = build_headers(base, body, os.getenv("WEBHOOK_SIGNATURE_KEY", ""))

    try:
        resp = httpx.post(url, content=body, headers=headers, timeout=120.0)
    except httpx.HTTPError as exc:
        print(f"POST {url} failed: {exc}", file=sys.stderr)
        return 1
    print(f"POST {url}")
    print(f"Status: {resp.status_code}")
    if resp.text:
        print(resp.text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
