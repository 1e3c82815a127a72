from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
from tqdm import tqdm

from .config import DEFAULT_CONFIG, ReportConfig
from .exporters import CSV_HEADERS, csv_row
from .ids import Clock, ReportIdGenerator, utc_now
from .models import AnalysisResultError
from .report import ReportDocument, build_report
from .report_io import ALL_FORMATS, ExportResult, load_modality_result, load_subject_info, write_report_bundle

PIPELINE_VERSION = "2026-10-19-combined-report"

HANDWRITING_FILE = "handwriting.json"
SPEECH_FILE = "speech.json"
SUBJECT_FILE = "subject.json"

SUMMARY_CSV = "reports_summary.csv"
SUMMARY_JSON = "reports_summary.json"


@dataclass
class SessionOutcome:
    report: ReportDocument
    export: ExportResult


@dataclass
class BatchOutcome:
    outcomes: Dict[str, SessionOutcome] = field(default_factory=dict)
    skipped: List[Dict[str, str]] = field(default_factory=list)
    summary_path: Optional[Path] = None


def run_session(
    handwriting_path: Optional[Path],
    speech_path: Optional[Path],
    subject_path: Optional[Path],
    out_dir: Path,
    formats: Iterable[str] = ALL_FORMATS,
    cfg: ReportConfig = DEFAULT_CONFIG,
    clock: Optional[Clock] = None,
    ids: Optional[ReportIdGenerator] = None,
    pdf_failure_policy: str = "record",
) -> SessionOutcome:
    handwriting = load_modality_result(handwriting_path)
    speech = load_modality_result(speech_path)
    subject = load_subject_info(subject_path)

    if handwriting is None:
        print("[report] handwriting result missing; combined score will be absent")
    if speech is None:
        print("[report] speech result missing; combined score will be absent")

    report = build_report(handwriting, speech, subject, cfg=cfg, clock=clock, ids=ids)
    combined = report.combined
    print(
        f"[report] id={report.metadata.report_id} combined={combined.score} "
        f"risk={combined.risk.label if combined.risk else None} confidence={combined.confidence}"
    )

    export = write_report_bundle(report, out_dir, formats=formats, cfg=cfg, pdf_failure_policy=pdf_failure_policy)
    for kind, path in export.written.items():
        print(f"[export] {kind}: {path}")
    return SessionOutcome(report=report, export=export)


def _list_sessions(sessions_dir: Path) -> List[Path]:
    return sorted(
        [p for p in sessions_dir.iterdir() if p.is_dir() and ((p / HANDWRITING_FILE).exists() or (p / SPEECH_FILE).exists())],
        key=lambda p: p.name.lower(),
    )


def _load_existing_summary(path: Path) -> pd.DataFrame:
    if not path.exists():
        return pd.DataFrame()
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def _summary_frame(rows: List[Dict[str, Any]], existing: pd.DataFrame) -> pd.DataFrame:
    new_df = pd.DataFrame(rows, columns=["Session"] + CSV_HEADERS)
    if not existing.empty:
        merged = pd.concat([existing, new_df], ignore_index=True)
    else:
        merged = new_df
    merged = merged.drop_duplicates(subset=["Report ID"], keep="last")
    merged = merged.assign(_score=pd.to_numeric(merged["Combined Score"], errors="coerce"))
    merged = merged.sort_values(by=["_score", "Session"], ascending=[False, True], na_position="last")
    return merged.drop(columns=["_score"]).reset_index(drop=True)


def run_batch(
    sessions_dir: Path,
    out_dir: Path,
    formats: Iterable[str] = ALL_FORMATS,
    cfg: ReportConfig = DEFAULT_CONFIG,
    clock: Optional[Clock] = None,
    max_sessions: int = 0,
    pdf_failure_policy: str = "record",
) -> BatchOutcome:
    """
    Build one report bundle per session directory and a summary table.

    A session directory holds handwriting.json and/or speech.json and an
    optional subject.json. Sessions whose files cannot be read are skipped
    and listed in the summary JSON.
    """
    clock = clock or utc_now
    ids = ReportIdGenerator(prefix=cfg.report_id_prefix, clock=clock)
    out_dir.mkdir(parents=True, exist_ok=True)

    print(f"[batch] version={PIPELINE_VERSION}")
    sessions = _list_sessions(sessions_dir)
    if max_sessions > 0:
        sessions = sessions[:max_sessions]
    print(f"[batch] sessions={len(sessions)} dir={sessions_dir}")

    outcome = BatchOutcome()
    rows: List[Dict[str, Any]] = []

    for session in tqdm(sessions, desc="Building reports"):
        try:
            result = run_session(
                handwriting_path=session / HANDWRITING_FILE,
                speech_path=session / SPEECH_FILE,
                subject_path=session / SUBJECT_FILE,
                out_dir=out_dir / session.name,
                formats=formats,
                cfg=cfg,
                clock=clock,
                ids=ids,
                pdf_failure_policy=pdf_failure_policy,
            )
        except AnalysisResultError as e:
            print(f"[batch] SKIP: {session.name} => {e}")
            outcome.skipped.append({"session": session.name, "reason": str(e)})
            continue

        outcome.outcomes[session.name] = result
        rows.append(dict(zip(["Session"] + CSV_HEADERS, [session.name] + csv_row(result.report))))

    summary_csv = out_dir / SUMMARY_CSV
    summary = _summary_frame(rows, _load_existing_summary(summary_csv))
    summary.to_csv(summary_csv, index=False)
    outcome.summary_path = summary_csv

    payload = {
        "pipeline_version": PIPELINE_VERSION,
        "reports": summary.to_dict(orient="records"),
        "skipped": outcome.skipped,
    }
    (out_dir / SUMMARY_JSON).write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

    print(f"[batch] built={len(outcome.outcomes)} skipped={len(outcome.skipped)}")
    print(f"Wrote: {summary_csv}")
    return outcome
