"""Tests for JSON, CSV and printable exports."""

import csv
import dataclasses
import io
import json
import re

import pytest

from ldreport.config import ReportConfig
from ldreport.exporters import CSV_HEADERS, layout_printable, render_pdf, to_csv, to_json
from ldreport.models import ModalityResult
from ldreport.report import build_report
from ldreport.subject import SubjectInfo

PDF_PAGE_RE = re.compile(rb"/Type\s*/Page\b")


@pytest.fixture
def report(handwriting, speech_features, frozen_clock):
    speech = ModalityResult(overall_score=40.0, features=speech_features)
    return build_report(handwriting, speech, SubjectInfo(name="Ada"), clock=frozen_clock)


def _parse_csv(text):
    return list(csv.reader(io.StringIO(text)))


class TestJsonExport:
    def test_deterministic(self, report):
        assert to_json(report) == to_json(report)

    def test_round_trip(self, report):
        parsed = json.loads(to_json(report))
        combined = parsed["analysisResults"]["combined"]
        assert combined["overallScore"] == pytest.approx(report.combined.score)
        assert combined["riskLevel"]["level"] == "Moderate Risk"
        assert parsed["recommendations"] == list(report.recommendations)
        assert parsed["interventions"] == [i.to_dict() for i in report.interventions]

    def test_pretty_printed(self, report):
        assert to_json(report).startswith('{\n  "metadata": {')

    def test_non_finite_raw_features_become_null(self, speech, frozen_clock):
        hw = ModalityResult(overall_score=70.0, features={"line_straightness": float("inf"), "slant": float("nan")})
        text = to_json(build_report(hw, speech, clock=frozen_clock))
        assert "NaN" not in text
        assert "Infinity" not in text
        hw_doc = json.loads(text)["analysisResults"]["handwriting"]
        assert hw_doc["keyFindings"]["lineStraightness"] is None
        raw = hw_doc["rawFeatures"]
        assert raw == {"line_straightness": None, "slant": None}

    def test_does_not_mutate(self, report):
        before = report.to_dict()
        to_json(report)
        to_csv(report)
        layout_printable(report)
        assert report.to_dict() == before


class TestCsvExport:
    def test_header_and_row(self, report):
        rows = _parse_csv(to_csv(report))
        assert len(rows) == 2
        assert rows[0] == CSV_HEADERS
        assert len(rows[1]) == 13
        assert rows[1][1:] == [
            "Ada",
            "8",
            "2026-03-14",
            "67.0",
            "Moderate Risk",
            "75",
            "85.0",
            "40.0",
            "78.0",
            "72.5",
            "82.0",
            "75.0",
        ]
        assert rows[1][0] == report.metadata.report_id

    def test_missing_modality(self, speech, frozen_clock):
        rows = _parse_csv(to_csv(build_report(None, speech, clock=frozen_clock)))
        row = dict(zip(rows[0], rows[1]))
        assert row["Combined Score"] == "N/A"
        assert row["Risk Level"] == "N/A"
        assert row["Handwriting Score"] == "N/A"
        assert row["Line Straightness"] == "N/A"
        assert row["Speech Score"] == "78.0"

    def test_missing_feature(self, speech, frozen_clock):
        hw = ModalityResult(overall_score=70.0, features={"letter_formation_quality": 50})
        row = _parse_csv(to_csv(build_report(hw, speech, clock=frozen_clock)))[1]
        assert row[9] == "N/A"
        assert row[10] == "50.0"

    def test_ties_round_half_up(self, speech, frozen_clock):
        hw = ModalityResult(overall_score=72.25, features={"line_straightness": 0.25, "letter_formation_quality": 40.75})
        report = build_report(hw, speech, clock=frozen_clock)
        row = dict(zip(*_parse_csv(to_csv(report))))
        assert row["Handwriting Score"] == "72.3"
        assert row["Line Straightness"] == "0.3"
        assert row["Letter Formation"] == "40.8"

    def test_non_finite_feature_is_not_available(self, speech, frozen_clock):
        hw = ModalityResult(overall_score=70.0, features={"line_straightness": float("inf")})
        row = dict(zip(*_parse_csv(to_csv(build_report(hw, speech, clock=frozen_clock)))))
        assert row["Line Straightness"] == "N/A"

    def test_delimiters_are_quoted(self, handwriting, speech, frozen_clock):
        info = SubjectInfo(name='Doe, Jane "JJ"')
        text = to_csv(build_report(handwriting, speech, info, clock=frozen_clock))
        assert '"Doe, Jane ""JJ"""' in text
        assert _parse_csv(text)[1][1] == 'Doe, Jane "JJ"'


class TestPrintable:
    def test_section_order(self, report):
        pages = layout_printable(report)
        assert len(pages) == 1
        texts = [ln.text for ln in pages[0].lines]
        assert texts[0] == "Learning Disability Detection Report"
        order = [texts.index(t) for t in ("Student Information", "Overall Assessment", "Recommendations")]
        assert order == sorted(order)
        assert "Name: Ada" in texts
        assert "Age: 8 years" in texts
        assert "Combined Score: 67.0%" in texts
        assert "Risk Level: Moderate Risk" in texts
        assert "Confidence: 75%" in texts
        assert f"1. {report.recommendations[0]}" in texts
        assert texts[-1] == f"Generated: {report.metadata.generated_at}"

    def test_y_positions_follow_layout(self, report):
        lines = layout_printable(report)[0].lines
        assert [ln.y_mm for ln in lines[:3]] == [20.0, 40.0, 50.0]
        assert lines[-1].y_mm == 280.0

    def test_no_recommendations_section_when_empty(self, handwriting, speech, frozen_clock):
        pages = layout_printable(build_report(handwriting, speech, clock=frozen_clock))
        assert "Recommendations" not in [ln.text for ln in pages[0].lines]

    def test_absent_combined_score(self, speech, frozen_clock):
        texts = [ln.text for ln in layout_printable(build_report(None, speech, clock=frozen_clock))[0].lines]
        assert "Combined Score: N/A" in texts
        assert "Risk Level: N/A" in texts

    def test_page_break_and_footer_on_first_page_only(self, report):
        long_report = dataclasses.replace(report, recommendations=tuple(f"Item {i}" for i in range(30)))
        cfg = ReportConfig()
        pages = layout_printable(long_report, cfg)
        assert len(pages) == 2
        assert pages[1].lines[0].y_mm == cfg.page_top_mm
        footer = f"Generated: {report.metadata.generated_at}"
        assert [ln.text for ln in pages[0].lines].count(footer) == 1
        assert footer not in [ln.text for ln in pages[1].lines]
        body = [ln for p in pages for ln in p.lines if ln.text != footer]
        assert all(ln.y_mm <= cfg.page_bottom_margin_mm for ln in body)
        numbered = [ln.text for ln in body if ln.text[0].isdigit()]
        assert numbered[0] == "1. Item 0"
        assert numbered[-1] == "30. Item 29"

    def test_printable_score_rounds_half_up(self, report):
        tie = dataclasses.replace(report, combined=dataclasses.replace(report.combined, score=72.25))
        texts = [ln.text for ln in layout_printable(tie)[0].lines]
        assert "Combined Score: 72.3%" in texts

    def test_render_pdf(self, report):
        data = render_pdf(report)
        assert data.startswith(b"%PDF")
        assert render_pdf(report)[:8] == data[:8]

    def test_render_pdf_page_count_follows_layout(self, report):
        long_report = dataclasses.replace(report, recommendations=tuple(f"Item {i}" for i in range(30)))
        assert len(PDF_PAGE_RE.findall(render_pdf(report))) == 1
        assert len(PDF_PAGE_RE.findall(render_pdf(long_report))) == 2
