from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional

from .config import DEFAULT_CONFIG, ReportConfig
from .exporters import render_pdf, to_csv, to_json
from .models import AnalysisResultError, ModalityResult
from .report import ReportDocument
from .subject import SubjectInfo

ALL_FORMATS = ("json", "csv", "pdf")


@dataclass
class ExportResult:
    report_id: str
    written: Dict[str, Path] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def _read_json(path: Path):
    try:
        raw = path.read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as e:
        raise AnalysisResultError(f"{path}: unreadable ({e})") from e
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise AnalysisResultError(f"{path}: invalid JSON ({e})") from e


def load_modality_result(path: Optional[Path]) -> Optional[ModalityResult]:
    """Analyzer output file -> ModalityResult; no path or no file means the modality was not run."""
    if path is None or not path.exists():
        return None
    data = _read_json(path)
    try:
        return ModalityResult.from_payload(data)
    except AnalysisResultError as e:
        raise AnalysisResultError(f"{path}: {e}") from e


def load_subject_info(path: Optional[Path]) -> SubjectInfo:
    if path is None or not path.exists():
        return SubjectInfo()
    data = _read_json(path)
    if not isinstance(data, dict):
        raise AnalysisResultError(f"{path}: subject info must be an object")
    return SubjectInfo.from_mapping(data)


def export_filenames(report_id: str) -> Dict[str, str]:
    return {
        "json": f"disability-assessment-{report_id}.json",
        "csv": f"disability-assessment-{report_id}.csv",
        "pdf": f"learning-disability-report-{report_id}.pdf",
    }


def parse_formats(raw: str) -> tuple:
    wanted = [f.strip().lower() for f in (raw or "").split(",") if f.strip()]
    unknown = [f for f in wanted if f not in ALL_FORMATS]
    if unknown:
        raise ValueError(f"unknown export format(s): {', '.join(unknown)}")
    return tuple(f for f in ALL_FORMATS if f in wanted) or ALL_FORMATS


def write_report_bundle(
    report: ReportDocument,
    out_dir: Path,
    formats: Iterable[str] = ALL_FORMATS,
    cfg: ReportConfig = DEFAULT_CONFIG,
    pdf_failure_policy: str = "record",
) -> ExportResult:
    """
    Write the requested exports of one fully built report.

    JSON and CSV are written first. A failure while rendering the printable
    document is recorded in ExportResult.failures (policy "record") or
    re-raised (policy "fail"); files already written stay as they are.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    names = export_filenames(report.metadata.report_id)
    result = ExportResult(report_id=report.metadata.report_id)
    formats = set(formats)

    if "json" in formats:
        path = out_dir / names["json"]
        path.write_text(to_json(report), encoding="utf-8")
        result.written["json"] = path

    if "csv" in formats:
        path = out_dir / names["csv"]
        path.write_text(to_csv(report), encoding="utf-8", newline="")
        result.written["csv"] = path

    if "pdf" in formats:
        path = out_dir / names["pdf"]
        try:
            data = render_pdf(report, cfg)
        except Exception as e:
            if pdf_failure_policy == "fail":
                raise
            print(f"[export] PDF FAILED: {report.metadata.report_id} => {e}")
            result.failures["pdf"] = str(e)
        else:
            path.write_bytes(data)
            result.written["pdf"] = path

    return result
