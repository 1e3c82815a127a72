"""
tools/batch_reports.py

Build combined screening reports for a directory of assessment sessions.

Each session is a sub-directory holding the analyzer outputs:
- handwriting.json  {"overall_score": .., "features": {..}}
- speech.json       {"overall_score": .., "features": {..}}
- subject.json      optional {"name", "age", "grade", "school", "teacher", "testDate"}

Outputs:
- <out_dir>/<session>/disability-assessment-<id>.json|csv
- <out_dir>/<session>/learning-disability-report-<id>.pdf
- <out_dir>/reports_summary.csv (merged with previous runs, deduped by report id)
- <out_dir>/reports_summary.json
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

_THIS_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(_THIS_DIR))

from ldreport.pipeline import run_batch  # noqa: E402
from ldreport.report_io import parse_formats  # noqa: E402


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--sessions_dir", default="sessions")
    ap.add_argument("--out_dir", default="reports")
    ap.add_argument("--formats", default="json,csv,pdf")
    ap.add_argument("--max_sessions", type=int, default=0)
    ap.add_argument("--pdf_failure_policy", choices=["record", "fail"], default="record")
    args = ap.parse_args()

    sessions_dir = Path(args.sessions_dir)
    if not sessions_dir.is_dir():
        raise SystemExit(f"sessions_dir not found: {sessions_dir}")

    try:
        formats = parse_formats(args.formats)
    except ValueError as e:
        raise SystemExit(str(e))

    outcome = run_batch(
        sessions_dir=sessions_dir,
        out_dir=Path(args.out_dir),
        formats=formats,
        max_sessions=int(args.max_sessions),
        pdf_failure_policy=args.pdf_failure_policy,
    )
    if not outcome.outcomes:
        print("No sessions produced a report.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
