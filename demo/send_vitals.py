#!/usr/bin/env python3
"""
Send vitals records (from a JSON file) to the backend /predict endpoint one-by-one,
waiting for each response before sending the next.

Usage:
    python demo/send_vitals.py --input vitals.json --base http://localhost:3001 --out data/predictions.jsonl

Behavior:
- The input file holds either one vitals object or a list of them, e.g.
    {"age": 45, "weightKg": 82, "heightCm": 170, "hba1cPercent": 6.1, "glucoseMgDl": 140}
- --mock / --ai add an explicit per-request override; without either the server default applies.
- Transport errors and 5xx responses are retried (3 attempts, backoff 1s, 2s, 4s).
  4xx responses are surfaced immediately and never retried.
- Appends a JSON line per record to the output file with request, response and error.
"""

from __future__ import annotations
import argparse
import json
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

import requests


class ClientError(RuntimeError):
    """The server rejected the request (4xx); retrying will not help."""


def load_vitals(path: Path) -> List[Dict]:
    data = json.loads(path.read_text(encoding="utf-8"))
    records = data if isinstance(data, list) else [data]
    return [r for r in records if isinstance(r, dict)]


def send_vitals(session: requests.Session, base_url: str, vitals: Dict, mock: Optional[bool], max_retries: int = 3, timeout: int = 90) -> Dict:
    url = base_url.rstrip("/") + "/predict"
    payload = dict(vitals)
    if mock is not None:
        payload["mock"] = mock
    attempt = 0
    backoffs = [1, 2, 4]
    while True:
        try:
            r = session.post(url, json=payload, timeout=timeout)
            if 400 <= r.status_code < 500:
                try:
                    body = r.json()
                except ValueError:
                    body = {"text": r.text}
                raise ClientError(f"{r.status_code} from server: {body}")
            r.raise_for_status()
            return r.json()
        except requests.RequestException as exc:
            attempt += 1
            if attempt >= max_retries:
                raise
            wait = backoffs[min(attempt - 1, len(backoffs) - 1)]
            print(f"[WARN] Request failed (attempt {attempt}/{max_retries}): {exc}. Retrying in {wait}s...", file=sys.stderr)
            time.sleep(wait)


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--input", "-i", required=True, help="Path to a JSON file with one or more vitals records")
    parser.add_argument("--base", "-b", default="http://localhost:3001", help="Backend base URL (default: http://localhost:3001)")
    parser.add_argument("--out", "-o", default="data/predictions.jsonl", help="Output JSONL file to append results")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--mock", dest="mock", action="store_true", default=None, help="Force mock mode for these requests")
    group.add_argument("--ai", dest="mock", action="store_false", help="Force assisted (AI) mode for these requests")
    parser.set_defaults(mock=None)
    args = parser.parse_args()

    in_path = Path(args.input)
    if not in_path.exists():
        print(f"Input file not found: {in_path}", file=sys.stderr)
        raise SystemExit(2)

    records = load_vitals(in_path)
    print(f"Loaded {len(records)} vitals records from {in_path}")

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    session = requests.Session()

    for idx, vitals in enumerate(records, start=1):
        record = {"index": idx, "request": vitals, "mock": args.mock, "response": None, "error": None, "timestamp": time.time()}
        try:
            res = send_vitals(session, args.base, vitals, args.mock)
            record["response"] = res
            result = res.get("result", {})
            print(f"[{idx}/{len(records)}] mode={res.get('mode')} risk={result.get('risk_percent')}% ({result.get('risk_level')})")
        except (ClientError, requests.RequestException) as exc:
            record["error"] = str(exc)
            print(f"[ERROR] Failed to send record {idx}: {exc}", file=sys.stderr)
        with out_path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(record, ensure_ascii=False) + "\n")

    print("Done. Records saved to", out_path)


if __name__ == "__main__":
    main()
