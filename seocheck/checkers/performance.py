from __future__ import annotations

from typing import Any, Dict, Optional

from ..models import CheckResult
from .base import BaseChecker

_TIMING_JS = """() => {
    const t = performance.timing;
    const start = t.navigationStart;
    const paint = performance.getEntriesByType('paint').find((e) => e.name === 'first-contentful-paint');
    return {
        loadTime: t.loadEventEnd > 0 ? t.loadEventEnd - start : null,
        domContentLoaded: t.domContentLoadedEventEnd > 0 ? t.domContentLoadedEventEnd - start : null,
        firstContentfulPaint: paint ? paint.startTime : null,
    };
}"""


class PerformanceChecker(BaseChecker):
    category = "performance"
    RULES = {
        "load-time-acceptable": "check_load_time",
        "dom-content-loaded-acceptable": "check_dom_content_loaded",
        "dom-size-acceptable": "check_dom_size",
    }

    def __init__(self, context):
        super().__init__(context)
        self._metrics: Optional[Dict[str, Any]] = None

    async def metrics(self) -> Dict[str, Any]:
        # read-only evaluation of the already loaded page
        if self._metrics is None:
            data = await self.handler.execute_page_evaluation(lambda: self.page.evaluate(_TIMING_JS), "metrics")
            self._metrics = data or {}
        return self._metrics

    async def check_load_time(self) -> CheckResult:
        rule = "load-time-acceptable"
        limit_s = float(self.option(rule, "maxSeconds", 3))
        m = await self.metrics()
        load_ms = m.get("loadTime")
        if load_ms is None:
            load_ms = self.navigation.elapsed_ms
        if load_ms is None:
            return self.result(rule, True, "Load time not available")
        load_s = load_ms / 1000.0
        if load_s > limit_s:
            return self.result(rule, False, f"Page load time is slow ({load_s:.2f}s). Recommended: < {limit_s:g}s", loadTime=load_s)
        return self.result(rule, True, f"Page load time is good ({load_s:.2f}s)", loadTime=load_s)

    async def check_dom_content_loaded(self) -> CheckResult:
        rule = "dom-content-loaded-acceptable"
        limit_s = float(self.option(rule, "maxSeconds", 2))
        m = await self.metrics()
        dcl_ms = m.get("domContentLoaded")
        if dcl_ms is None:
            return self.result(rule, True, "DOMContentLoaded timing not available")
        dcl_s = dcl_ms / 1000.0
        if dcl_s > limit_s:
            return self.result(rule, False, f"DOM content loaded time is slow ({dcl_s:.2f}s). Recommended: < {limit_s:g}s", domContentLoaded=dcl_s)
        return self.result(rule, True, f"DOM content loaded time is good ({dcl_s:.2f}s)", domContentLoaded=dcl_s)

    def check_dom_size(self) -> CheckResult:
        rule = "dom-size-acceptable"
        limit = int(self.option(rule, "maxElements", 1500))
        n = int(self.body.get("element_count") or 0)
        if n > limit:
            return self.result(rule, False, f"DOM is large ({n} elements). Recommended: < {limit}", elements=n)
        return self.result(rule, True, f"DOM size is acceptable ({n} elements)", elements=n)
