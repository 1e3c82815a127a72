from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ReportConfig:
    """
    Tunables for combining and reporting.

    Notes:
    - handwriting/speech weights must stay at 0.6/0.4 for reports to remain
      comparable with earlier exports
    - printable geometry is in millimetres on an A4 page, y grows downwards
    """

    # Combination
    handwriting_weight: float = 0.6
    speech_weight: float = 0.4

    # Risk tiers (lower bound inclusive)
    low_risk_min: float = 75.0
    moderate_risk_min: float = 50.0

    # Confidence
    confidence_base: int = 85
    confidence_min: int = 60
    confidence_max: int = 95
    min_contour_count: float = 5
    low_contour_penalty: int = 15
    min_word_count: float = 10
    low_word_count_penalty: int = 10
    max_score_gap: float = 40.0
    score_gap_penalty: int = 10

    # Guidance bands (combined score) and modality triggers, all "below"
    intensive_band_below: float = 50.0
    monitoring_band_below: float = 70.0
    modality_support_below: float = 60.0
    line_control_below: float = 40.0
    fluency_support_below: float = 40.0
    iep_below: float = 60.0

    # Modality score labels: (lower bound, label), first match wins
    score_labels: Tuple[Tuple[float, str], ...] = (
        (80.0, "Excellent"),
        (60.0, "Good"),
        (40.0, "Fair"),
    )
    score_label_floor: str = "Needs Improvement"

    # Report metadata
    report_version: str = "2.0"
    report_id_prefix: str = "LDD"
    report_title: str = "Learning Disability Detection Report"

    # Printable layout
    page_top_mm: float = 20.0
    page_left_mm: float = 20.0
    page_bottom_margin_mm: float = 250.0
    footer_y_mm: float = 280.0


DEFAULT_CONFIG = ReportConfig()
