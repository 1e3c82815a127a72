"""
ldreport

Combined handwriting + speech screening reports:
- Combine two analyzer results (60/40) into one score, risk tier and confidence
- Rule tables for strengths, concerns, recommendations, interventions, next steps
- Exports: JSON document, one-row CSV, paginated PDF
"""
from .models import AnalysisResultError, ModalityResult
from .report import ReportDocument, build_report
from .subject import SubjectInfo

__all__ = ["AnalysisResultError", "ModalityResult", "ReportDocument", "SubjectInfo", "build_report"]
