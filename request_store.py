import json
import logging
from typing import Optional, Protocol

from tester_errors import DialogCancelled, FileIOError

log = logging.getLogger(__name__)


class DialogProvider(Protocol):
    def pick_save_path(self) -> Optional[str]: ...
    def pick_open_path(self) -> Optional[str]: ...


def save_request(content: str, dialogs: DialogProvider) -> str:
    path = dialogs.pick_save_path()
    if not path:
        raise DialogCancelled("Save cancelled")
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        log.exception("Failed to save request to %s", path)
        raise FileIOError(str(e)) from e
    log.info("Saved request to %s", path)
    return path


def load_request(dialogs: DialogProvider) -> str:
    path = dialogs.pick_open_path()
    if not path:
        raise DialogCancelled("Load cancelled")
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        log.exception("Failed to load request from %s", path)
        raise FileIOError(str(e)) from e


def dump_request(method: str, url: str, headers: str, body: str) -> str:
    return json.dumps({"method": method, "url": url, "headers": headers, "body": body}, indent=2)


def parse_request(text: str) -> dict:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise FileIOError(f"Not a saved request: {e}") from e
    if not isinstance(data, dict):
        raise FileIOError("Not a saved request: expected a JSON object")
    return {
        "method": data.get("method") or "GET",
        "url": data.get("url") or "",
        "headers": data.get("headers") or "",
        "body": data.get("body") or "",
    }
