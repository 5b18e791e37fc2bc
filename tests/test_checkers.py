import pytest

from config import CONFIG
from fakes import FakeFetcher, FakePage, ok_text
from seocheck.checkers.accessibility import AccessibilityChecker
from seocheck.checkers.content import ContentChecker, flesch_reading_ease, readability_level
from seocheck.checkers.headings import HeadingsChecker
from seocheck.checkers.images import ImagesChecker
from seocheck.checkers.links import LinksChecker
from seocheck.checkers.meta_tags import MetaTagsChecker
from seocheck.checkers.performance import PerformanceChecker
from seocheck.checkers.robots_txt import RobotsTxtChecker, disallows_everything
from seocheck.checkers.security import SecurityChecker
from seocheck.checkers.sitemap import SitemapChecker
from seocheck.checkers.technical import TechnicalChecker
from seocheck.checkers.url_factors import URLFactorsChecker
from seocheck.config_loader import resolve
from seocheck.models import Severity
from seocheck.orchestrator import CHECKER_REGISTRY, Orchestrator
from seocheck.retry import RetryOptions, backoff_delay
from seocheck.scoring import aggregate

BARE_HTML = "<html><head></head><body><p>hello</p></body></html>"


def by_rule(results):
    return {r.rule: r for r in results}


@pytest.mark.asyncio
async def test_http_page_fails_https_rule_with_forced_error_severity(make_context):
    config = resolve({"preset": "basic", "rules": {"security": {"enabled": True, "severity": "error"}}})
    page = FakePage(url="http://example.com/")
    context = make_context(url="http://example.com/", config=config, page=page)

    results = await Orchestrator(config).run_all(context)
    https = [r for r in results["security"] if r.rule == "https-enabled"]

    assert len(https) == 1
    assert https[0].passed is False
    assert https[0].severity == Severity.ERROR
    assert aggregate(results, url="http://example.com/", timestamp="t").score < 100
    assert page.goto_calls == 0


@pytest.mark.asyncio
async def test_full_registry_runs_on_a_healthy_page(make_context):
    config = resolve({"preset": "advanced"})
    results = await Orchestrator(config).run_all(make_context(config=config))
    assert list(results) == list(CHECKER_REGISTRY)
    assert all(results[c] for c in CHECKER_REGISTRY)
    assert not any(r.degraded for items in results.values() for r in items)


@pytest.mark.asyncio
async def test_meta_tags_on_good_page(make_context):
    results = by_rule(await MetaTagsChecker(make_context()).check_all())
    for rule in ("title-exists", "meta-description-exists", "viewport-meta-exists",
                 "canonical-url-exists", "og-title-exists", "twitter-card-exists", "charset-declared"):
        assert results[rule].passed, rule
    assert results["title-exists"].category == "metaTags"


@pytest.mark.asyncio
async def test_meta_tags_on_bare_page(make_context):
    results = by_rule(await MetaTagsChecker(make_context(html=BARE_HTML)).check_all())
    assert not results["title-exists"].passed
    assert not results["meta-description-exists"].passed
    assert not results["viewport-meta-exists"].passed


@pytest.mark.asyncio
async def test_disabled_rules_are_not_run(make_context):
    context = make_context(raw_config={"preset": "basic"})
    results = by_rule(await MetaTagsChecker(context).check_all())
    assert "canonical-url-exists" not in results
    assert "og-title-exists" not in results
    assert "title-exists" in results


@pytest.mark.asyncio
async def test_rule_options_change_thresholds(make_context):
    html = "<html><head><title>Widgets</title></head><body></body></html>"
    strict = by_rule(await MetaTagsChecker(make_context(html=html)).check_all())
    assert not strict["title-length-valid"].passed

    relaxed_context = make_context(html=html, raw_config={
        "rules": {"metaTags": {"title-length-valid": {"options": {"minLength": 5}}}},
    })
    relaxed = by_rule(await MetaTagsChecker(relaxed_context).check_all())
    assert relaxed["title-length-valid"].passed


@pytest.mark.asyncio
async def test_headings_hierarchy_and_count(make_context):
    html = "<html><body><h1>A</h1><h3>Skipped</h3><h1>B</h1></body></html>"
    results = by_rule(await HeadingsChecker(make_context(html=html)).check_all())
    assert results["h1-exists"].passed
    assert not results["h1-count-valid"].passed
    assert not results["heading-hierarchy-valid"].passed
    assert "H1 followed by H3" in results["heading-hierarchy-valid"].message


@pytest.mark.asyncio
async def test_images_missing_alt(make_context):
    html = '<html><body><img src="a.png"><img src="b.png" alt="Red bicycle" width="1" height="1"></body></html>'
    results = by_rule(await ImagesChecker(make_context(html=html)).check_all())
    assert not results["images-have-alt"].passed
    assert results["images-have-alt"].details["missing"] == ["a.png"]
    assert not results["image-dimensions-set"].passed


@pytest.mark.asyncio
async def test_security_mixed_content_and_headers(make_context):
    html = '<html><body><img src="http://cdn.example.com/x.png" alt="x"></body></html>'
    results = by_rule(await SecurityChecker(make_context(html=html)).check_all())
    assert results["https-enabled"].passed
    assert not results["mixed-content-check"].passed
    assert not results["security-headers"].passed

    headers = {
        "strict-transport-security": "max-age=63072000",
        "x-content-type-options": "nosniff",
        "x-frame-options": "DENY",
        "content-security-policy": "default-src 'self'",
    }
    results = by_rule(await SecurityChecker(make_context(headers=headers)).check_all())
    assert results["security-headers"].passed
    assert results["mixed-content-check"].passed


@pytest.mark.asyncio
async def test_technical_uses_captured_navigation(make_context):
    context = make_context(
        status=404,
        headers={"content-encoding": "gzip", "x-robots-tag": "noindex"},
        redirect_chain=["http://example.com/", "https://example.com"],
    )
    results = by_rule(await TechnicalChecker(context).check_all())
    assert not results["response-code-ok"].passed
    assert "404" in results["response-code-ok"].message
    assert not results["redirect-chain-short"].passed
    assert results["compression-enabled"].passed
    assert not results["indexable"].passed
    assert context.page.goto_calls == 0


@pytest.mark.asyncio
async def test_robots_txt_found_but_blocking(make_context):
    fetcher = FakeFetcher({"https://example.com/robots.txt": ok_text(
        "https://example.com/robots.txt", "User-agent: *\nDisallow: /\n"
    )})
    results = by_rule(await RobotsTxtChecker(make_context(fetcher=fetcher)).check_all())
    assert results["robots-txt-exists"].passed
    assert not results["robots-txt-valid"].passed
    assert fetcher.calls == ["https://example.com/robots.txt"]


@pytest.mark.asyncio
async def test_robots_txt_missing(make_context):
    results = by_rule(await RobotsTxtChecker(make_context()).check_all())
    assert not results["robots-txt-exists"].passed
    assert results["robots-txt-valid"].passed


def test_disallows_everything_only_for_all_agents():
    assert disallows_everything("User-agent: *\nDisallow: /")
    assert not disallows_everything("User-agent: BadBot\nDisallow: /\n\nUser-agent: *\nDisallow: /admin")
    assert not disallows_everything("# Disallow: /")


@pytest.mark.asyncio
async def test_sitemap_declared_in_robots(make_context):
    fetcher = FakeFetcher({
        "https://example.com/robots.txt": ok_text(
            "https://example.com/robots.txt", "User-agent: *\nSitemap: https://example.com/sm.xml\n"
        ),
        "https://example.com/sm.xml": ok_text(
            "https://example.com/sm.xml",
            '<?xml version="1.0"?><urlset><url><loc>https://example.com/</loc></url></urlset>',
        ),
    })
    results = by_rule(await SitemapChecker(make_context(fetcher=fetcher)).check_all())
    assert results["sitemap-exists"].passed
    assert results["sitemap-exists"].details["entries"] == 1
    assert results["sitemap-in-robots-txt"].passed


@pytest.mark.asyncio
async def test_sitemap_missing(make_context):
    results = by_rule(await SitemapChecker(make_context()).check_all())
    assert not results["sitemap-exists"].passed
    assert not results["sitemap-in-robots-txt"].passed


@pytest.mark.asyncio
async def test_performance_uses_page_timing(make_context):
    page = FakePage(evaluation={"loadTime": 5000, "domContentLoaded": 900})
    results = by_rule(await PerformanceChecker(make_context(page=page)).check_all())
    assert not results["load-time-acceptable"].passed
    assert results["dom-content-loaded-acceptable"].passed
    assert page.evaluate_calls == 1


@pytest.mark.asyncio
async def test_evaluation_failure_degrades_only_that_rule(make_context):
    page = FakePage(evaluate_error=RuntimeError("Execution context was destroyed"))
    results = by_rule(await PerformanceChecker(make_context(page=page)).check_all())

    degraded = results["load-time-acceptable"]
    assert degraded.degraded and degraded.passed
    assert degraded.details["error"]["kind"] == "Browser"
    assert degraded.details["error"]["context"]["checkName"] == "performance.load-time-acceptable"
    assert not results["dom-size-acceptable"].degraded


@pytest.mark.asyncio
async def test_accessibility_form_labels(make_context):
    html = '<html><body><label for="e">Email</label><input id="e"><input name="q"></body></html>'
    results = by_rule(await AccessibilityChecker(make_context(html=html)).check_all())
    assert not results["form-labels"].passed
    assert results["form-labels"].details["fields"] == ["q"]
    assert not results["html-lang"].passed


@pytest.mark.asyncio
async def test_links_absent(make_context):
    results = by_rule(await LinksChecker(make_context(html=BARE_HTML)).check_all())
    assert not results["link-structure"].passed
    assert not results["internal-links"].passed
    assert results["external-links"].passed


@pytest.mark.asyncio
async def test_url_factors(make_context):
    url = "https://example.com/Shop/Category/Sub/Item?sessionid=abc"
    results = by_rule(await URLFactorsChecker(make_context(url=url)).check_all())
    assert not results["url-lowercase"].passed
    assert not results["url-parameters"].passed
    assert not results["url-depth"].passed


@pytest.mark.asyncio
async def test_content_thin_page(make_context):
    results = by_rule(await ContentChecker(make_context(html=BARE_HTML)).check_all())
    assert not results["word-count-sufficient"].passed
    assert results["word-count-sufficient"].details["wordCount"] == 1


def test_readability_scores_simple_text_as_easy():
    text = "The cat sat on the mat. The dog ran to the park. We like the sun."
    score = flesch_reading_ease(text)
    assert score > 80
    assert readability_level(score) == "Very Easy"
    assert flesch_reading_ease("") == 0.0


@pytest.mark.asyncio
async def test_unreachable_robots_txt_is_fetched_once_for_all_rules(make_context, recording_sleep):
    fetcher = FakeFetcher({"https://example.com/robots.txt": ConnectionError("connection refused")})
    context = make_context(fetcher=fetcher, fetch_retry=RetryOptions(sleep=recording_sleep))

    results = by_rule(await RobotsTxtChecker(context).check_all())

    assert fetcher.calls == ["https://example.com/robots.txt"] * 3
    assert recording_sleep.calls == [1.0, 2.0]
    for rule in ("robots-txt-exists", "robots-txt-valid"):
        assert results[rule].degraded
        assert results[rule].details["error"]["kind"] == "Network"
        assert results[rule].details["error"]["context"]["checkName"] == f"robotsTxt.{rule}"


@pytest.mark.asyncio
async def test_sitemap_rules_share_robots_fetch_and_skip_dead_hosts(make_context, recording_sleep):
    fetcher = FakeFetcher({
        "https://example.com/robots.txt": ok_text("https://example.com/robots.txt", "User-agent: *\n"),
        "https://example.com/sitemap.xml": ConnectionError("connection reset"),
    })
    context = make_context(fetcher=fetcher, fetch_retry=RetryOptions(sleep=recording_sleep))

    results = by_rule(await SitemapChecker(context).check_all())

    assert fetcher.calls.count("https://example.com/robots.txt") == 1
    assert fetcher.calls.count("https://example.com/sitemap.xml") == 3
    assert "https://example.com/sitemap_index.xml" not in fetcher.calls
    assert not results["sitemap-exists"].passed
    assert not results["sitemap-exists"].degraded
    assert not results["sitemap-in-robots-txt"].passed


def test_check_budget_covers_a_full_fetch_retry_sequence():
    options = RetryOptions()
    backoff_ms = sum(backoff_delay(n, options) for n in range(1, options.max_attempts))
    assert CONFIG.CHECK_TIMEOUT_MS > options.max_attempts * CONFIG.REQUEST_TIMEOUT_S * 1000 + backoff_ms
