import json

import pytest

import cli
from seocheck.errors import NetworkError
from seocheck.models import CheckResult
from seocheck.scoring import aggregate


def report_with(*passed):
    return aggregate(
        {"metaTags": [CheckResult(passed=p, message=f"check {i}") for i, p in enumerate(passed)]},
        url="https://example.com/",
        timestamp="2026-01-01T00:00:00+00:00",
    )


class FakeChecker:
    instances = []

    def __init__(self, url, **kwargs):
        self.url = url
        self.kwargs = kwargs
        FakeChecker.instances.append(self)

    async def check(self):
        return self.report


@pytest.fixture
def fake_checker(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    FakeChecker.instances = []
    FakeChecker.report = report_with(True, True)
    monkeypatch.setattr(cli, "SEOChecker", FakeChecker)
    return FakeChecker


def test_all_passed_exits_zero(fake_checker, capsys):
    assert cli.main(["https://example.com/"]) == 0
    out = capsys.readouterr().out
    assert "Score: 100/100" in out
    kwargs = fake_checker.instances[0].kwargs
    assert kwargs["config"] == {"preset": "advanced"}
    assert kwargs["config_file"] is None
    assert kwargs["headless"] is True


def test_failures_exit_one(fake_checker):
    fake_checker.report = report_with(True, False)
    assert cli.main(["--url", "https://example.com/", "--preset", "basic"]) == 1
    assert fake_checker.instances[0].kwargs["config"] == {"preset": "basic"}


def test_json_output(fake_checker, capsys):
    cli.main(["https://example.com/", "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["score"] == 100
    assert data["schemaVersion"] == "1.0"


def test_output_file(fake_checker, tmp_path):
    cli.main(["https://example.com/", "-o", "reports/seo.json"])
    assert json.loads((tmp_path / "reports" / "seo.json").read_text(encoding="utf-8"))["url"] == "https://example.com/"


def test_missing_url(fake_checker, capsys):
    assert cli.main([]) == 1
    assert "❌ Error: a URL is required" in capsys.readouterr().err


def test_setup_error_is_reported(fake_checker, monkeypatch, capsys):
    class Failing(FakeChecker):
        async def check(self):
            raise NetworkError("net::ERR_CONNECTION_REFUSED")

    monkeypatch.setattr(cli, "SEOChecker", Failing)
    assert cli.main(["https://example.com/"]) == 1
    assert "❌ Error: net::ERR_CONNECTION_REFUSED" in capsys.readouterr().err


def test_config_file_in_cwd_is_discovered(fake_checker, tmp_path):
    (tmp_path / ".e2e-seo.json").write_text('{"preset": "basic"}', encoding="utf-8")
    cli.main(["https://example.com/"])
    kwargs = fake_checker.instances[0].kwargs
    assert kwargs["config"] == {}
    assert kwargs["config_file"].name == ".e2e-seo.json"


def test_init_config(fake_checker, tmp_path):
    assert cli.main(["--init-config"]) == 0
    data = json.loads((tmp_path / ".e2e-seo.json").read_text(encoding="utf-8"))
    assert data["preset"] == "advanced"
    assert fake_checker.instances == []


def test_parse_viewport():
    assert cli.parse_viewport("1280x720") == (1280, 720)
    with pytest.raises(Exception):
        cli.parse_viewport("wide")
    with pytest.raises(Exception):
        cli.parse_viewport("0x720")


def test_preset_help_names_the_default():
    help_text = " ".join(cli.build_parser().format_help().split())
    assert "default: advanced when no config file is found" in help_text
