import asyncio

from flask import Flask, jsonify, request

from config import CONFIG
from seocheck.config_loader import resolve
from seocheck.errors import CategorizedError, ValidationError
from seocheck.logging_setup import setup_logging
from seocheck.presets import preset_names
from seocheck.runner import SEOChecker

CONFIG_KEYS = ("preset", "severity", "rules", "customRules", "failOnError")

app = Flask(__name__)
log = setup_logging("seocheck", CONFIG.LOG_LEVEL, CONFIG.LOG_FILE or None)


# ---------------------------
# Helpers
# ---------------------------
def raw_config_from(body: dict) -> dict:
    raw = {k: body[k] for k in CONFIG_KEYS if k in body}
    if "preset" not in raw:
        raw["preset"] = CONFIG.DEFAULT_PRESET
    return raw


def error_response(message: str, status: int):
    return jsonify({"ok": False, "error": message}), status


# ---------------------------
# Routes
# ---------------------------
@app.get("/api/presets")
def api_presets():
    return jsonify({"ok": True, "presets": preset_names()})


@app.post("/api/audit")
def api_audit():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return error_response("Request body must be a JSON object", 400)

    url = (body.get("url") or "").strip()
    if not url:
        return error_response("Missing url", 400)

    try:
        checker = SEOChecker(url, config=resolve(raw_config_from(body)))
        report = asyncio.run(checker.check())
    except ValidationError as e:
        return error_response(e.message, 400)
    except CategorizedError as e:
        log.error(f"Audit of {url} failed: [{e.kind.value}] {e.message}")
        return error_response(e.message, 502)

    return jsonify(report.to_dict())


if __name__ == "__main__":
    app.run(debug=True, port=5050)
