from __future__ import annotations

from typing import Optional

from .config import DEFAULT_CONFIG, ReportConfig
from .models import CombinedAssessment, ModalityResult, RiskAssessment

_RISK_DESCRIPTIONS = {
    "Low": "No significant learning difficulty indicators",
    "Moderate": "Some areas of concern requiring monitoring",
    "High": "Multiple indicators suggest need for comprehensive assessment",
}


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def combine_scores(
    handwriting: Optional[ModalityResult],
    speech: Optional[ModalityResult],
    cfg: ReportConfig = DEFAULT_CONFIG,
) -> Optional[float]:
    # no partial combination
    if handwriting is None or speech is None:
        return None
    return cfg.handwriting_weight * handwriting.overall_score + cfg.speech_weight * speech.overall_score


def classify_risk(score: Optional[float], cfg: ReportConfig = DEFAULT_CONFIG) -> Optional[RiskAssessment]:
    if score is None:
        return None
    if score >= cfg.low_risk_min:
        tier = "Low"
    elif score >= cfg.moderate_risk_min:
        tier = "Moderate"
    else:
        tier = "High"
    return RiskAssessment(tier=tier, label=f"{tier} Risk", description=_RISK_DESCRIPTIONS[tier])


def compute_confidence(
    handwriting: Optional[ModalityResult],
    speech: Optional[ModalityResult],
    cfg: ReportConfig = DEFAULT_CONFIG,
) -> int:
    """
    Heuristic trust in the combined score:
    - low handwriting signal (few contours)
    - too little speech to analyze
    - large disagreement between the two modalities
    Checks whose inputs are absent do not deduct.
    """
    confidence = cfg.confidence_base

    contours = handwriting.feature("contour_count") if handwriting is not None else None
    if contours is not None and contours < cfg.min_contour_count:
        confidence -= cfg.low_contour_penalty

    words = speech.feature("word_count") if speech is not None else None
    if words is not None and words < cfg.min_word_count:
        confidence -= cfg.low_word_count_penalty

    if handwriting is not None and speech is not None:
        if abs(handwriting.overall_score - speech.overall_score) > cfg.max_score_gap:
            confidence -= cfg.score_gap_penalty

    return int(_clamp(confidence, cfg.confidence_min, cfg.confidence_max))


def assess(
    handwriting: Optional[ModalityResult],
    speech: Optional[ModalityResult],
    cfg: ReportConfig = DEFAULT_CONFIG,
) -> CombinedAssessment:
    score = combine_scores(handwriting, speech, cfg)
    return CombinedAssessment(
        score=score,
        risk=classify_risk(score, cfg),
        confidence=compute_confidence(handwriting, speech, cfg),
    )


def score_label(score: float, cfg: ReportConfig = DEFAULT_CONFIG) -> str:
    for lower, label in cfg.score_labels:
        if score >= lower:
            return label
    return cfg.score_label_floor
