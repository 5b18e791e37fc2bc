from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

REPORT_SCHEMA_VERSION = "1.0"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class CheckResult:
    """
    Outcome of a single check.

    `rule` is the rule id the result belongs to (e.g. "https-enabled"); the
    orchestrator uses it to look up per-rule config. `degraded` marks results
    synthesized by the graceful-degradation boundary instead of a real check.
    """
    passed: bool
    message: str
    category: Optional[str] = None
    severity: Optional[Severity] = None
    details: Dict[str, Any] = field(default_factory=dict)
    rule: Optional[str] = None
    degraded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"passed": self.passed, "message": self.message}
        if self.category:
            out["category"] = self.category
        if self.severity is not None:
            out["severity"] = self.severity.value
        if self.details:
            out["details"] = self.details
        if self.rule:
            out["rule"] = self.rule
        if self.degraded:
            out["degraded"] = True
        return out


@dataclass(frozen=True)
class Summary:
    total: int
    passed: int
    failed: int

    def to_dict(self) -> Dict[str, int]:
        return {"total": self.total, "passed": self.passed, "failed": self.failed}


@dataclass(frozen=True)
class SEOReport:
    url: str
    timestamp: str
    score: int
    summary: Summary
    checks: Dict[str, List[CheckResult]]
    schema_version: str = REPORT_SCHEMA_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schemaVersion": self.schema_version,
            "url": self.url,
            "timestamp": self.timestamp,
            "score": self.score,
            "summary": self.summary.to_dict(),
            "checks": {cat: [r.to_dict() for r in results] for cat, results in self.checks.items()},
        }


@dataclass(frozen=True)
class NavigationCapture:
    """Response data captured once during the initial page load."""
    requested_url: str
    final_url: str
    status: Optional[int]
    headers: Dict[str, str] = field(default_factory=dict)
    redirect_chain: List[str] = field(default_factory=list)
    elapsed_ms: Optional[float] = None

    @property
    def redirect_count(self) -> int:
        return len(self.redirect_chain)
