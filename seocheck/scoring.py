import math
from typing import Dict, List, Optional

from .models import CheckResult, SEOReport, Summary


def flatten(category_results: Dict[str, List[CheckResult]]) -> List[CheckResult]:
    out = []
    for items in category_results.values():
        out.extend(items)
    return out


def score_of(results: List[CheckResult]) -> int:
    # no checks at all scores 0, not 100
    total = len(results)
    if total == 0:
        return 0
    passed = sum(1 for r in results if r.passed)
    # half rounds up: 12.5 -> 13
    return int(math.floor(100 * passed / total + 0.5))


def category_scores(category_results: Dict[str, List[CheckResult]]) -> Dict[str, Optional[int]]:
    """Per-category score; None for categories that produced no checks."""
    return {
        cat: (score_of(items) if items else None)
        for cat, items in category_results.items()
    }


def aggregate(category_results: Dict[str, List[CheckResult]], url: str, timestamp: str) -> SEOReport:
    results = flatten(category_results)
    passed = sum(1 for r in results if r.passed)
    return SEOReport(
        url=url,
        timestamp=timestamp,
        score=score_of(results),
        summary=Summary(total=len(results), passed=passed, failed=len(results) - passed),
        # every category is kept, empty lists included
        checks={cat: list(items) for cat, items in category_results.items()},
    )
