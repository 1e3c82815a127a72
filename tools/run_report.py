"""
Build one combined screening report from analyzer outputs.

Env:
- HANDWRITING_JSON (default: session/handwriting.json)
- SPEECH_JSON (default: session/speech.json)
- SUBJECT_JSON (default: session/subject.json; optional)
- REPORTS_DIR (default: reports)
- REPORT_FORMATS (default: json,csv,pdf)
- PDF_FAILURE_POLICY (default: record; "fail" re-raises)
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

_THIS_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(_THIS_DIR))

from ldreport.models import AnalysisResultError  # noqa: E402
from ldreport.pipeline import run_session  # noqa: E402
from ldreport.report_io import parse_formats  # noqa: E402


def _pdf_failure_policy() -> str:
    v = (os.getenv("PDF_FAILURE_POLICY", "record") or "record").strip().lower()
    return v if v in {"record", "fail"} else "record"


def main() -> int:
    handwriting = Path(os.getenv("HANDWRITING_JSON", "session/handwriting.json")).resolve()
    speech = Path(os.getenv("SPEECH_JSON", "session/speech.json")).resolve()
    subject = Path(os.getenv("SUBJECT_JSON", "session/subject.json")).resolve()
    reports_dir = Path(os.getenv("REPORTS_DIR", "reports")).resolve()

    if not handwriting.exists() and not speech.exists():
        raise SystemExit(f"no analyzer output found: {handwriting} / {speech}")

    try:
        formats = parse_formats(os.getenv("REPORT_FORMATS", "json,csv,pdf"))
    except ValueError as e:
        raise SystemExit(str(e))

    try:
        outcome = run_session(
            handwriting_path=handwriting,
            speech_path=speech,
            subject_path=subject,
            out_dir=reports_dir,
            formats=formats,
            pdf_failure_policy=_pdf_failure_policy(),
        )
    except AnalysisResultError as e:
        raise SystemExit(str(e))

    return 0 if outcome.export.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
