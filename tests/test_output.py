import json

from seocheck.models import CheckResult, Severity
from seocheck.output import render_text, write_report
from seocheck.scoring import aggregate


def sample_report():
    return aggregate(
        {
            "metaTags": [
                CheckResult(passed=True, message="Title tag present", severity=Severity.WARNING),
                CheckResult(passed=False, message="Meta description missing", severity=Severity.ERROR),
            ],
            "sitemap": [],
        },
        url="https://example.com/",
        timestamp="2026-01-01T00:00:00+00:00",
    )


def test_render_text():
    text = render_text(sample_report())
    assert "SEO report for https://example.com/" in text
    assert "metaTags (50/100)" in text
    assert "  ✓ Title tag present" in text
    assert "  ✗ [ERROR] Meta description missing" in text
    assert "sitemap: (disabled)" in text
    assert text.endswith("Score: 50/100\nChecks: 2 total, 1 passed, 1 failed")


def test_write_report_creates_parent_dirs(tmp_path):
    path = write_report(sample_report(), tmp_path / "out" / "report.json")
    raw = path.read_text(encoding="utf-8")
    assert raw.endswith("\n")
    data = json.loads(raw)
    assert data["score"] == 50
    assert data["checks"]["metaTags"][1]["severity"] == "error"
