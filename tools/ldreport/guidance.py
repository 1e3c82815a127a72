from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .config import DEFAULT_CONFIG, ReportConfig
from .models import ModalityResult


@dataclass(frozen=True)
class Intervention:
    area: str
    intervention: str
    duration: str
    frequency: str

    def to_dict(self) -> dict:
        return {
            "area": self.area,
            "intervention": self.intervention,
            "duration": self.duration,
            "frequency": self.frequency,
        }


@dataclass(frozen=True)
class GuidanceInputs:
    combined_score: Optional[float]
    handwriting: Optional[ModalityResult]
    speech: Optional[ModalityResult]
    cfg: ReportConfig = DEFAULT_CONFIG

    def combined_below(self, limit: float) -> bool:
        return self.combined_score is not None and self.combined_score < limit

    def handwriting_below(self, limit: float) -> bool:
        return self.handwriting is not None and self.handwriting.overall_score < limit

    def speech_below(self, limit: float) -> bool:
        return self.speech is not None and self.speech.overall_score < limit

    def handwriting_feature_below(self, name: str, limit: float) -> bool:
        value = self.handwriting.feature(name) if self.handwriting is not None else None
        return value is not None and value < limit

    def speech_feature_below(self, name: str, limit: float) -> bool:
        value = self.speech.feature(name) if self.speech is not None else None
        return value is not None and value < limit


Condition = Callable[[GuidanceInputs], bool]

# Bands: first match wins. Modality rules: each evaluated on its own.
RECOMMENDATION_BANDS: Tuple[Tuple[Condition, Tuple[str, ...]], ...] = (
    (
        lambda g: g.combined_below(g.cfg.intensive_band_below),
        (
            "Comprehensive learning disability assessment recommended",
            "Consider multi-disciplinary evaluation",
        ),
    ),
    (
        lambda g: g.combined_below(g.cfg.monitoring_band_below),
        (
            "Regular monitoring and targeted interventions",
            "Consider educational support services",
        ),
    ),
)

MODALITY_RECOMMENDATIONS: Tuple[Tuple[Condition, Tuple[str, ...]], ...] = (
    (
        lambda g: g.handwriting_below(g.cfg.modality_support_below),
        (
            "Handwriting practice exercises with focus on letter formation",
            "Occupational therapy evaluation for fine motor skills",
        ),
    ),
    (
        lambda g: g.speech_below(g.cfg.modality_support_below),
        (
            "Speech-language therapy consultation",
            "Daily reading practice with fluency focus",
        ),
    ),
)

INTERVENTION_RULES: Tuple[Tuple[Condition, Intervention], ...] = (
    (
        lambda g: g.handwriting_feature_below("line_straightness", g.cfg.line_control_below),
        Intervention(
            area="Handwriting - Line Control",
            intervention="Use lined paper with highlighted baselines",
            duration="4-6 weeks",
            frequency="Daily practice 10-15 minutes",
        ),
    ),
    (
        lambda g: g.speech_feature_below("fluency_score", g.cfg.fluency_support_below),
        Intervention(
            area="Speech - Fluency",
            intervention="Repeated reading exercises with familiar texts",
            duration="6-8 weeks",
            frequency="3-4 times per week, 15-20 minutes",
        ),
    ),
    (
        lambda g: g.combined_below(g.cfg.iep_below),
        Intervention(
            area="Overall Support",
            intervention="Individualized Education Plan (IEP) consideration",
            duration="Ongoing",
            frequency="Regular team meetings",
        ),
    ),
)

NEXT_STEP_BANDS: Tuple[Tuple[Condition, Tuple[str, ...]], ...] = (
    (
        lambda g: g.combined_below(g.cfg.intensive_band_below),
        (
            "Schedule comprehensive psychoeducational assessment",
            "Consult with school special education team",
            "Consider medical evaluation to rule out underlying conditions",
        ),
    ),
    (
        lambda g: g.combined_below(g.cfg.monitoring_band_below),
        (
            "Implement targeted interventions for 6-8 weeks",
            "Schedule follow-up assessment",
            "Monitor progress with regular check-ins",
        ),
    ),
    (
        lambda g: g.combined_score is not None,
        (
            "Continue current educational approach",
            "Schedule routine follow-up in 6 months",
        ),
    ),
)


def _first_band(bands, inputs: GuidanceInputs) -> Tuple[str, ...]:
    for condition, messages in bands:
        if condition(inputs):
            return messages
    return ()


def generate_recommendations(inputs: GuidanceInputs) -> Tuple[str, ...]:
    out: List[str] = list(_first_band(RECOMMENDATION_BANDS, inputs))
    for condition, messages in MODALITY_RECOMMENDATIONS:
        if condition(inputs):
            out.extend(messages)
    return tuple(out)


def suggest_interventions(inputs: GuidanceInputs) -> Tuple[Intervention, ...]:
    return tuple(item for condition, item in INTERVENTION_RULES if condition(inputs))


def generate_next_steps(inputs: GuidanceInputs) -> Tuple[str, ...]:
    # absent combined score matches no band
    return _first_band(NEXT_STEP_BANDS, inputs)
