"""
Threshold rule tables for per-modality strengths and concerns.

Each rule reads one numeric feature and fires independently of the others;
messages are emitted in table order. A feature that is missing or not a
number fails every rule that reads it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Tuple

from .models import ModalityResult, as_number


@dataclass(frozen=True)
class Rule:
    feature: str
    test: Callable[[float], bool]
    message: str

    def applies(self, features: Mapping[str, object]) -> bool:
        value = as_number(features.get(self.feature))
        return value is not None and self.test(value)


RuleTable = Tuple[Rule, ...]

HANDWRITING_STRENGTHS: RuleTable = (
    Rule("line_straightness", lambda v: v > 70, "Good line control and straightness"),
    Rule("letter_formation_quality", lambda v: v > 70, "Well-formed letters"),
    Rule("consistency_score", lambda v: v > 70, "Consistent letter sizing and spacing"),
    Rule("writing_pressure", lambda v: 20 < v < 80, "Appropriate writing pressure"),
    Rule("slant_angle", lambda v: abs(v) < 10, "Good slant control"),
)

HANDWRITING_CONCERNS: RuleTable = (
    Rule("line_straightness", lambda v: v < 40, "Difficulty maintaining straight lines"),
    Rule("letter_formation_quality", lambda v: v < 40, "Poor letter formation quality"),
    Rule("consistency_score", lambda v: v < 40, "Inconsistent letter sizes and spacing"),
    Rule("writing_pressure", lambda v: v < 20, "Very light writing pressure"),
    Rule("writing_pressure", lambda v: v > 90, "Excessive writing pressure"),
    Rule("slant_angle", lambda v: abs(v) > 20, "Inconsistent letter slant"),
)

SPEECH_STRENGTHS: RuleTable = (
    Rule("fluency_score", lambda v: v > 70, "Good speech fluency"),
    Rule("pronunciation_score", lambda v: v > 70, "Clear pronunciation"),
    Rule("speech_clarity", lambda v: v > 70, "Good speech clarity"),
    Rule("reading_speed_wpm", lambda v: 80 < v < 200, "Appropriate reading speed"),
    Rule("volume_consistency", lambda v: v > 70, "Consistent volume control"),
)

SPEECH_CONCERNS: RuleTable = (
    Rule("fluency_score", lambda v: v < 40, "Speech fluency difficulties"),
    Rule("pronunciation_score", lambda v: v < 40, "Pronunciation challenges"),
    Rule("speech_clarity", lambda v: v < 40, "Poor speech clarity"),
    Rule("reading_speed_wpm", lambda v: v < 60, "Slow reading speed"),
    Rule("pause_frequency", lambda v: v > 10, "Frequent pauses during reading"),
)

# (output key, feature name) for the headline numbers of each modality
HANDWRITING_KEY_FINDINGS: Tuple[Tuple[str, str], ...] = (
    ("lineStraightness", "line_straightness"),
    ("letterFormation", "letter_formation_quality"),
    ("consistency", "consistency_score"),
    ("writingPressure", "writing_pressure"),
    ("slantAngle", "slant_angle"),
)

SPEECH_KEY_FINDINGS: Tuple[Tuple[str, str], ...] = (
    ("readingSpeed", "reading_speed_wpm"),
    ("fluency", "fluency_score"),
    ("pronunciation", "pronunciation_score"),
    ("clarity", "speech_clarity"),
    ("pauseFrequency", "pause_frequency"),
)


def evaluate_rules(table: RuleTable, features: Optional[Mapping[str, object]]) -> Tuple[str, ...]:
    if features is None:
        return ()
    return tuple(r.message for r in table if r.applies(features))


def _features(result: Optional[ModalityResult]) -> Optional[Mapping[str, object]]:
    return result.features if result is not None else None


def identify_handwriting_strengths(result: Optional[ModalityResult]) -> Tuple[str, ...]:
    return evaluate_rules(HANDWRITING_STRENGTHS, _features(result))


def identify_handwriting_concerns(result: Optional[ModalityResult]) -> Tuple[str, ...]:
    return evaluate_rules(HANDWRITING_CONCERNS, _features(result))


def identify_speech_strengths(result: Optional[ModalityResult]) -> Tuple[str, ...]:
    return evaluate_rules(SPEECH_STRENGTHS, _features(result))


def identify_speech_concerns(result: Optional[ModalityResult]) -> Tuple[str, ...]:
    return evaluate_rules(SPEECH_CONCERNS, _features(result))


def key_findings(result: ModalityResult, keys: Tuple[Tuple[str, str], ...]) -> Dict[str, Optional[float]]:
    return {out: result.feature(name) for out, name in keys}
