import copy
import json
import logging
import os

log = logging.getLogger(__name__)

SETTINGS_FILE = os.environ.get(
    "REQUEST_TESTER_SETTINGS",
    os.path.join(os.path.expanduser("~"), ".request_tester_settings.json"),
)

DEFAULT_SETTINGS = {
    "theme": "cyborg",
    "geometry": "900x700",
    "timeout": None,  # None = requests default (no timeout)
    "log_level": "INFO",
    "last_request": {"method": "GET", "url": "", "headers": "", "body": ""},
}


def deep_merge(a: dict, b: dict) -> dict:
    out = copy.deepcopy(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def load_settings(path: str = SETTINGS_FILE) -> dict:
    if not os.path.exists(path):
        return copy.deepcopy(DEFAULT_SETTINGS)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        log.exception("Failed to load settings from %s", path)
        return copy.deepcopy(DEFAULT_SETTINGS)
    if not isinstance(data, dict):
        log.warning("Ignoring settings file %s: not a JSON object", path)
        return copy.deepcopy(DEFAULT_SETTINGS)
    return deep_merge(DEFAULT_SETTINGS, data)


def save_settings(settings: dict, path: str = SETTINGS_FILE):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings, f, ensure_ascii=False, indent=2)
