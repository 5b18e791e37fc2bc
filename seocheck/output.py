import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from .models import SEOReport, Severity
from .scoring import category_scores

_BADGES = {
    Severity.ERROR: "[ERROR]",
    Severity.WARNING: "[WARN]",
    Severity.INFO: "[INFO]",
}


def now_iso():
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def render_text(report: SEOReport) -> str:
    lines: List[str] = []
    lines.append(f"SEO report for {report.url}")
    lines.append(f"Generated: {report.timestamp}")
    lines.append("")

    per_cat = category_scores(report.checks)
    for cat, results in report.checks.items():
        if not results:
            lines.append(f"{cat}: (disabled)")
            continue
        lines.append(f"{cat} ({per_cat[cat]}/100)")
        for r in results:
            if r.passed:
                lines.append(f"  ✓ {r.message}")
            else:
                badge = _BADGES.get(r.severity)
                lines.append(f"  ✗ {badge} {r.message}" if badge else f"  ✗ {r.message}")
        lines.append("")

    s = report.summary
    lines.append(f"Score: {report.score}/100")
    lines.append(f"Checks: {s.total} total, {s.passed} passed, {s.failed} failed")
    return "\n".join(lines)


def write_report(report: SEOReport, path) -> Path:
    p = Path(path)
    if p.parent and not p.parent.exists():
        p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)
        f.write("\n")
    return p
