from datetime import datetime, timezone

import pytest

from ldreport.ids import fixed_clock
from ldreport.models import ModalityResult

FROZEN_AT = datetime(2026, 3, 14, 9, 30, 15, 123456, tzinfo=timezone.utc)


@pytest.fixture
def frozen_clock():
    return fixed_clock(FROZEN_AT)


@pytest.fixture
def handwriting_features():
    return {
        "line_straightness": 78.0,
        "letter_formation_quality": 72.5,
        "consistency_score": 65.0,
        "writing_pressure": 55.0,
        "slant_angle": -4.0,
        "avg_letter_size": 12.5,
        "letter_spacing": 4.1,
        "word_spacing": 9.8,
        "contour_count": 42,
    }


@pytest.fixture
def speech_features():
    return {
        "transcript": "The quick brown fox jumps over the lazy dog",
        "reading_speed_wpm": 120.0,
        "fluency_score": 82.0,
        "pronunciation_score": 75.0,
        "speech_clarity": 68.0,
        "pause_frequency": 4,
        "volume_consistency": 80.0,
        "word_count": 48,
        "total_duration": 24.0,
    }


@pytest.fixture
def handwriting(handwriting_features):
    return ModalityResult(overall_score=85.0, features=handwriting_features)


@pytest.fixture
def speech(speech_features):
    return ModalityResult(overall_score=78.0, features=speech_features)
