from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from .config import DEFAULT_CONFIG, ReportConfig
from .findings import (
    HANDWRITING_KEY_FINDINGS,
    SPEECH_KEY_FINDINGS,
    identify_handwriting_concerns,
    identify_handwriting_strengths,
    identify_speech_concerns,
    identify_speech_strengths,
    key_findings,
)
from .guidance import (
    GuidanceInputs,
    Intervention,
    generate_next_steps,
    generate_recommendations,
    suggest_interventions,
)
from .ids import Clock, ReportIdGenerator, iso_utc, utc_now
from .models import CombinedAssessment, ModalityResult
from .scoring import assess, score_label
from .subject import SubjectInfo, merge_subject_info


def _jsonify(obj: Any) -> Any:
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, (tuple, list)):
        return [_jsonify(x) for x in obj]
    if isinstance(obj, Mapping):
        return {str(k): _jsonify(v) for k, v in obj.items()}
    return str(obj)


@dataclass(frozen=True)
class ReportMetadata:
    report_id: str
    generated_at: str
    version: str

    def to_dict(self) -> dict:
        return {"reportId": self.report_id, "generatedAt": self.generated_at, "version": self.version}


@dataclass(frozen=True)
class ModalityBreakdown:
    overall_score: float
    score_label: str
    key_findings: Mapping[str, Optional[float]]
    strengths: Tuple[str, ...]
    concerns: Tuple[str, ...]
    raw_features: Mapping[str, Any]
    transcript: Optional[str] = None

    def to_dict(self) -> dict:
        out: Dict[str, Any] = {
            "overallScore": self.overall_score,
            "scoreLabel": self.score_label,
        }
        if self.transcript is not None:
            out["transcript"] = self.transcript
        out.update(
            {
                "keyFindings": _jsonify(self.key_findings),
                "strengths": list(self.strengths),
                "concerns": list(self.concerns),
                "rawFeatures": _jsonify(self.raw_features),
            }
        )
        return out


@dataclass(frozen=True)
class ReportDocument:
    metadata: ReportMetadata
    subject: SubjectInfo
    combined: CombinedAssessment
    handwriting: Optional[ModalityBreakdown]
    speech: Optional[ModalityBreakdown]
    recommendations: Tuple[str, ...]
    interventions: Tuple[Intervention, ...]
    next_steps: Tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "metadata": self.metadata.to_dict(),
            "subjectInfo": self.subject.to_dict(),
            "analysisResults": {
                "combined": self.combined.to_dict(),
                "handwriting": self.handwriting.to_dict() if self.handwriting is not None else None,
                "speech": self.speech.to_dict() if self.speech is not None else None,
            },
            "recommendations": list(self.recommendations),
            "interventions": [i.to_dict() for i in self.interventions],
            "nextSteps": list(self.next_steps),
        }


def handwriting_breakdown(result: Optional[ModalityResult], cfg: ReportConfig = DEFAULT_CONFIG) -> Optional[ModalityBreakdown]:
    if result is None:
        return None
    return ModalityBreakdown(
        overall_score=result.overall_score,
        score_label=score_label(result.overall_score, cfg),
        key_findings=key_findings(result, HANDWRITING_KEY_FINDINGS),
        strengths=identify_handwriting_strengths(result),
        concerns=identify_handwriting_concerns(result),
        raw_features=result.features,
    )


def speech_breakdown(result: Optional[ModalityResult], cfg: ReportConfig = DEFAULT_CONFIG) -> Optional[ModalityBreakdown]:
    if result is None:
        return None
    transcript = result.features.get("transcript")
    return ModalityBreakdown(
        overall_score=result.overall_score,
        score_label=score_label(result.overall_score, cfg),
        key_findings=key_findings(result, SPEECH_KEY_FINDINGS),
        strengths=identify_speech_strengths(result),
        concerns=identify_speech_concerns(result),
        raw_features=result.features,
        transcript=transcript if isinstance(transcript, str) else None,
    )


def build_report(
    handwriting: Optional[ModalityResult],
    speech: Optional[ModalityResult],
    subject_info: Optional[SubjectInfo] = None,
    *,
    cfg: ReportConfig = DEFAULT_CONFIG,
    clock: Optional[Clock] = None,
    ids: Optional[ReportIdGenerator] = None,
) -> ReportDocument:
    """
    Assemble one immutable report from the two modality results.

    Either modality may be None: the combined score and risk tier are then
    absent and the missing modality's breakdown is None.
    """
    clock = clock or utc_now
    ids = ids or ReportIdGenerator(prefix=cfg.report_id_prefix, clock=clock)
    now = clock()

    combined = assess(handwriting, speech, cfg)
    inputs = GuidanceInputs(combined_score=combined.score, handwriting=handwriting, speech=speech, cfg=cfg)

    return ReportDocument(
        metadata=ReportMetadata(report_id=ids.next_id(now), generated_at=iso_utc(now), version=cfg.report_version),
        subject=merge_subject_info(subject_info, now.date()),
        combined=combined,
        handwriting=handwriting_breakdown(handwriting, cfg),
        speech=speech_breakdown(speech, cfg),
        recommendations=generate_recommendations(inputs),
        interventions=suggest_interventions(inputs),
        next_steps=generate_next_steps(inputs),
    )
