from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional, Union

Age = Union[int, str]

DEFAULT_NAME = "Student"
DEFAULT_AGE = 8
DEFAULT_GRADE = "Grade 3"


@dataclass(frozen=True)
class SubjectInfo:
    """
    Identification of the assessed subject, as supplied by the operator.

    All fields are optional on input; merge_subject_info fills:
    - name -> "Student"
    - age -> 8
    - grade -> "Grade 3"
    - school, teacher -> ""
    - test_date -> today (ISO date)
    """

    name: Optional[str] = None
    age: Optional[Age] = None
    grade: Optional[str] = None
    school: Optional[str] = None
    teacher: Optional[str] = None
    test_date: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "SubjectInfo":
        data = data or {}
        return cls(
            name=data.get("name"),
            age=data.get("age"),
            grade=data.get("grade"),
            school=data.get("school"),
            teacher=data.get("teacher"),
            test_date=data.get("testDate", data.get("test_date")),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "age": self.age,
            "grade": self.grade,
            "school": self.school,
            "teacher": self.teacher,
            "testDate": self.test_date,
        }


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def _pick(value: Any, default: Any) -> Any:
    if not _present(value):
        return default
    return value.strip() if isinstance(value, str) else value


def merge_subject_info(partial: Optional[SubjectInfo], today: date) -> SubjectInfo:
    """Apply defaults to every missing or blank field."""
    p = partial or SubjectInfo()
    return SubjectInfo(
        name=_pick(p.name, DEFAULT_NAME),
        age=_pick(p.age, DEFAULT_AGE),
        grade=_pick(p.grade, DEFAULT_GRADE),
        school=_pick(p.school, ""),
        teacher=_pick(p.teacher, ""),
        test_date=_pick(p.test_date, today.isoformat()),
    )
