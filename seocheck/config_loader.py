"""
Audit configuration: presets + user overrides -> fully resolved SEOConfig.

Raw config (JSON/YAML, camelCase keys):

    preset: basic | advanced | strict
    severity: error | warning | info
    rules:
      <checkerName>: true | false | {<ruleName>: true | false | {enabled, severity, options}}
    customRules: {<ruleName>: {enabled, severity, options}}
    failOnError: [<severity>, ...]

Inside a checker mapping the keys `enabled`, `severity` and `options` are
checker-wide settings; every other key is a rule name. Unknown top-level keys
are ignored, unknown checker names are kept as-is.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Union

import yaml

from .errors import ConfigError
from .models import Severity
from .presets import get_preset, has_preset, preset_names

SETTINGS_KEYS = ("enabled", "severity", "options")

CONFIG_FILENAMES = (
    ".e2e-seo.json",
    ".e2e-seo.yaml",
    ".e2e-seo.yml",
    "e2e-seo.config.json",
    "e2e-seo.config.yaml",
    "e2e-seo.config.yml",
)


@dataclass(frozen=True)
class RuleConfig:
    enabled: bool = True
    severity: Severity = Severity.WARNING
    options: Dict[str, Any] = field(default_factory=dict)


class CheckerMode(str, Enum):
    DISABLED = "disabled"
    DEFAULT = "default"      # enabled, every rule on its defaults
    RULES = "rules"          # enabled, with per-rule entries


@dataclass(frozen=True)
class CheckerConfig:
    mode: CheckerMode
    severity: Severity
    options: Dict[str, Any] = field(default_factory=dict)
    rules: Dict[str, RuleConfig] = field(default_factory=dict)

    @property
    def enabled(self) -> bool:
        return self.mode != CheckerMode.DISABLED


@dataclass(frozen=True)
class SEOConfig:
    default_severity: Severity = Severity.WARNING
    checkers: Dict[str, CheckerConfig] = field(default_factory=dict)
    preset: Optional[str] = None
    custom_rules: Dict[str, RuleConfig] = field(default_factory=dict)
    fail_on_error: FrozenSet[Severity] = frozenset()
    # merged raw rules, kept for display and for writing configs back out
    raw_rules: Dict[str, Any] = field(default_factory=dict)

    def default_rule(self) -> RuleConfig:
        return RuleConfig(enabled=True, severity=self.default_severity, options={})


# -------------------------
# Validation helpers
# -------------------------

def _severity(value: Any, where: str) -> Severity:
    try:
        return Severity(value)
    except (ValueError, TypeError):
        allowed = ", ".join(s.value for s in Severity)
        raise ConfigError(f"Invalid severity {value!r} at {where}; expected one of: {allowed}", {"path": where})


def _options(value: Any, where: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"Invalid options at {where}: must be a mapping", {"path": where})
    return dict(value)


def _enabled_flag(value: Any, where: str) -> bool:
    if value is None:
        return True
    if not isinstance(value, bool):
        raise ConfigError(f"Invalid enabled flag at {where}: must be true or false", {"path": where})
    return value


# -------------------------
# Raw-level merge
# -------------------------

def _merge_checker(base: Any, override: Mapping[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = dict(base) if isinstance(base, Mapping) else {}
    for key, value in override.items():
        current = merged.get(key)
        if key not in SETTINGS_KEYS and isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = {**current, **value}
        else:
            merged[key] = value
    return merged


def merge_rules(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Layers `override` rules on top of `base`, per checker:
      False   -> whole checker disabled, base rules dropped
      True    -> whole checker enabled with defaults
      mapping -> merged key by key with the base entry (rule entries merged too)
    """
    merged: Dict[str, Any] = dict(base)
    for checker_name, entry in override.items():
        if entry is True or entry is False:
            merged[checker_name] = entry
        elif isinstance(entry, Mapping):
            merged[checker_name] = _merge_checker(merged.get(checker_name), entry)
        else:
            raise ConfigError(
                f"Invalid config for checker {checker_name!r}: must be a boolean or a mapping",
                {"path": f"rules.{checker_name}"},
            )
    return merged


def merge_raw(base: Optional[Mapping[str, Any]], override: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Layers one raw config over another (e.g. CLI/API values over a config file)."""
    base = dict(base or {})
    override = dict(override or {})
    out = {**base, **{k: v for k, v in override.items() if k != "rules"}}
    if "rules" in base or "rules" in override:
        b = base.get("rules") or {}
        o = override.get("rules") or {}
        if not isinstance(b, Mapping) or not isinstance(o, Mapping):
            raise ConfigError("Invalid rules: must be a mapping", {"path": "rules"})
        out["rules"] = merge_rules(b, o)
    return out


# -------------------------
# Resolution
# -------------------------

def _resolve_rule(entry: Any, checker_severity: Severity, checker_options: Dict[str, Any], where: str) -> RuleConfig:
    if entry is True or entry is False:
        return RuleConfig(enabled=entry, severity=checker_severity, options=dict(checker_options))
    if not isinstance(entry, Mapping):
        raise ConfigError(f"Invalid rule config at {where}: must be a boolean or a mapping", {"path": where})
    sev = entry.get("severity")
    return RuleConfig(
        enabled=_enabled_flag(entry.get("enabled"), f"{where}.enabled"),
        severity=_severity(sev, f"{where}.severity") if sev is not None else checker_severity,
        options={**checker_options, **_options(entry.get("options"), f"{where}.options")},
    )


def _resolve_checker(name: str, entry: Any, default_severity: Severity) -> CheckerConfig:
    where = f"rules.{name}"
    if entry is False:
        return CheckerConfig(mode=CheckerMode.DISABLED, severity=default_severity)
    if entry is True:
        return CheckerConfig(mode=CheckerMode.DEFAULT, severity=default_severity)
    if not isinstance(entry, Mapping):
        raise ConfigError(f"Invalid config for checker {name!r}: must be a boolean or a mapping", {"path": where})

    enabled = _enabled_flag(entry.get("enabled"), f"{where}.enabled")
    sev = entry.get("severity")
    severity = _severity(sev, f"{where}.severity") if sev is not None else default_severity
    options = _options(entry.get("options"), f"{where}.options")

    rules: Dict[str, RuleConfig] = {}
    for rule_name, rule_entry in entry.items():
        if rule_name in SETTINGS_KEYS:
            continue
        rules[rule_name] = _resolve_rule(rule_entry, severity, options, f"{where}.{rule_name}")

    if not enabled:
        mode = CheckerMode.DISABLED
    elif rules:
        mode = CheckerMode.RULES
    else:
        mode = CheckerMode.DEFAULT
    return CheckerConfig(mode=mode, severity=severity, options=options, rules=rules)


def resolve(raw: Optional[Mapping[str, Any]] = None) -> SEOConfig:
    """
    Resolves a raw config into an SEOConfig whose lookups never come back empty.

    Order: named preset (or an empty base with severity "warning"), then the
    caller's rules merged on top. A global `severity` in the raw config wins
    over the preset's.
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigError("Invalid configuration: top level must be a mapping")

    preset_name = raw.get("preset")
    base_rules: Dict[str, Any] = {}
    base_severity: Optional[str] = None
    if preset_name is not None:
        if not isinstance(preset_name, str) or not has_preset(preset_name):
            raise ConfigError(
                f"Unknown preset: {preset_name!r} (available: {', '.join(preset_names())})",
                {"path": "preset"},
            )
        preset = get_preset(preset_name)
        base_rules = preset.get("rules", {})
        base_severity = preset.get("severity")

    default_severity = _severity(raw.get("severity") or base_severity or Severity.WARNING.value, "severity")

    overrides = raw.get("rules")
    if overrides is None:
        overrides = {}
    if not isinstance(overrides, Mapping):
        raise ConfigError("Invalid rules: must be a mapping", {"path": "rules"})
    merged = merge_rules(base_rules, overrides)

    checkers = {name: _resolve_checker(name, entry, default_severity) for name, entry in merged.items()}

    custom_raw = raw.get("customRules") or {}
    if not isinstance(custom_raw, Mapping):
        raise ConfigError("Invalid customRules: must be a mapping", {"path": "customRules"})
    custom_rules = {
        name: _resolve_rule(entry, default_severity, {}, f"customRules.{name}")
        for name, entry in custom_raw.items()
    }

    fail_raw = raw.get("failOnError") or []
    if isinstance(fail_raw, str):
        fail_raw = [fail_raw]
    if not isinstance(fail_raw, (list, tuple)):
        raise ConfigError("Invalid failOnError: must be a list of severities", {"path": "failOnError"})
    fail_on_error = frozenset(_severity(s, "failOnError") for s in fail_raw)

    return SEOConfig(
        default_severity=default_severity,
        checkers=checkers,
        preset=preset_name,
        custom_rules=custom_rules,
        fail_on_error=fail_on_error,
        raw_rules=merged,
    )


# -------------------------
# Lookups
# -------------------------

def is_checker_enabled(config: SEOConfig, checker_name: str) -> bool:
    # fails open: only an explicit disable turns a checker off
    checker = config.checkers.get(checker_name)
    return checker is None or checker.enabled


def checker_severity(config: SEOConfig, checker_name: str) -> Severity:
    checker = config.checkers.get(checker_name)
    return checker.severity if checker is not None else config.default_severity


def get_rule_config(config: SEOConfig, checker_name: str, rule_name: str) -> RuleConfig:
    checker = config.checkers.get(checker_name)
    if checker is None:
        return config.default_rule()
    if checker.mode == CheckerMode.DISABLED:
        return RuleConfig(enabled=False, severity=checker.severity, options=dict(checker.options))
    rule = checker.rules.get(rule_name)
    if rule is None:
        return RuleConfig(enabled=True, severity=checker.severity, options=dict(checker.options))
    return rule


def enabled_checkers(config: SEOConfig, names: Iterable[str]) -> List[str]:
    return [n for n in names if is_checker_enabled(config, n)]


# -------------------------
# Files
# -------------------------

def read_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Parses a JSON or YAML config file into the raw config shape (not resolved)."""
    p = Path(path)
    if not p.is_file():
        raise ConfigError(f"Configuration file not found: {p}", {"path": str(p)})

    ext = p.suffix.lower()
    if ext not in (".json", ".yaml", ".yml"):
        raise ConfigError(f"Unsupported configuration file format: {ext or '(none)'}. Use .json, .yaml, or .yml")

    with p.open("r", encoding="utf-8") as f:
        content = f.read()

    try:
        if ext == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to parse configuration file {p}: {e}", {"path": str(p)}) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid configuration file {p}: top level must be a mapping", {"path": str(p)})
    return data


def load_config_file(path: Union[str, Path]) -> SEOConfig:
    return resolve(read_config_file(path))


def find_config_file(directory: Union[str, Path, None] = None) -> Optional[Path]:
    base = Path(directory) if directory is not None else Path.cwd()
    for name in CONFIG_FILENAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def load_config(raw: Optional[Mapping[str, Any]] = None, config_file: Union[str, Path, None] = None) -> SEOConfig:
    """File first, then `raw` layered on top, then resolved."""
    base = read_config_file(config_file) if config_file else {}
    return resolve(merge_raw(base, raw))


def write_default_config(path: Union[str, Path], preset: str = "advanced") -> Path:
    if not has_preset(preset):
        raise ConfigError(f"Unknown preset: {preset!r} (available: {', '.join(preset_names())})")
    config = {
        "preset": preset,
        "severity": "warning",
        "rules": {
            "metaTags": {
                "title-length-valid": {"enabled": True, "severity": "warning"},
            },
        },
    }
    p = Path(path)
    if p.suffix.lower() in (".yaml", ".yml"):
        content = yaml.safe_dump(config, sort_keys=False, indent=2)
    else:
        content = json.dumps(config, indent=2) + "\n"
    with p.open("w", encoding="utf-8") as f:
        f.write(content)
    return p
