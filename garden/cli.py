from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Dict, Iterable, List, Optional, TextIO

from .payloads import growth_payload, ranking_payload
from .rows import UNKNOWN_CLIENT, employee_names, rows_from_records
from .stages import classify

logger = logging.getLogger(__name__)


def read_records(stream: Iterable[str]) -> List[Dict]:
    """Newline-delimited JSON objects; blank lines are ignored, bad lines logged and skipped."""
    records: List[Dict] = []
    for lineno, line in enumerate(stream, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning(f"Skipping line {lineno}: invalid JSON ({e.msg})")
            continue
        if not isinstance(record, dict):
            logger.warning(f"Skipping line {lineno}: expected an object")
            continue
        records.append(record)
    return records


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="contact-garden",
        description="Aggregate contact log rows (NDJSON on stdin) into garden stats or the weekly ranking",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    sub = ap.add_subparsers(dest="command", required=True)

    g = sub.add_parser("growth", help="Per-client growth for one employee")
    g.add_argument("employee", help="Employee name (exact match)")
    g.add_argument("--unknown-client", default=UNKNOWN_CLIENT, help="Label for rows with no client")

    r = sub.add_parser("ranking", help="This week's leaderboard")
    r.add_argument("--limit", type=int, default=None, help="Only the top N employees")

    s = sub.add_parser("stage", help="Growth stage for a contact count (reads no input)")
    s.add_argument("count", type=int)

    sub.add_parser("employees", help="Distinct employee names")
    return ap


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    args = build_parser().parse_args(argv)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if args.command == "stage":
        result = {"count": args.count, "stage": classify(args.count)}
    else:
        rows = rows_from_records(read_records(stdin))
        if args.command == "growth":
            result = growth_payload(rows, args.employee, args.unknown_client)
        elif args.command == "ranking":
            result = ranking_payload(rows, args.limit)
        else:
            result = employee_names(rows)

    stdout.write(json.dumps(result, ensure_ascii=False, indent=2))
    stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
