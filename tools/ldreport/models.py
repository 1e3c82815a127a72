from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Mapping, Optional, Union

RiskTier = Literal["Low", "Moderate", "High"]
FeatureValue = Union[float, int, str]


class AnalysisResultError(ValueError):
    """Raised when an analyzer payload cannot be read as a ModalityResult."""


def as_number(value: Any) -> Optional[float]:
    # bools are ints in Python, but never a measurement
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value):
        return None
    return float(value)


def _freeze(features: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(features))


@dataclass(frozen=True)
class ModalityResult:
    overall_score: float
    features: Mapping[str, FeatureValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "features", _freeze(self.features or {}))

    def feature(self, name: str) -> Optional[float]:
        """Numeric feature value, or None when missing or not a number."""
        return as_number(self.features.get(name))

    @classmethod
    def from_payload(cls, payload: Any) -> "ModalityResult":
        if not isinstance(payload, Mapping):
            raise AnalysisResultError(f"analyzer payload must be an object, got {type(payload).__name__}")
        score = as_number(payload.get("overall_score"))
        if score is None:
            raise AnalysisResultError("analyzer payload has no numeric overall_score")
        features = payload.get("features")
        if not isinstance(features, Mapping):
            features = {}
        return cls(overall_score=score, features={str(k): v for k, v in features.items()})


@dataclass(frozen=True)
class RiskAssessment:
    tier: RiskTier
    label: str
    description: str

    def to_dict(self) -> dict:
        return {"tier": self.tier, "level": self.label, "description": self.description}


@dataclass(frozen=True)
class CombinedAssessment:
    score: Optional[float]
    risk: Optional[RiskAssessment]
    confidence: int

    def to_dict(self) -> dict:
        return {
            "overallScore": self.score,
            "riskLevel": self.risk.to_dict() if self.risk is not None else None,
            "confidence": self.confidence,
        }
