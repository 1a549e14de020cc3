import json
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Callable, List, Optional, Tuple, Union

from tester_errors import BodyReadError

UNKNOWN_STATUS = "Unknown"


@dataclass
class RawResponse:
    """What a transport hands back: status line, headers in wire order, and a body reader."""
    status: int
    reason: Optional[str]
    headers: List[Tuple[str, Union[str, bytes]]]
    read_text: Callable[[], str]


@dataclass
class ResponseResult:
    status: int
    status_text: str
    headers: str
    body: Any
    body_is_json: bool = False

    def to_dict(self):
        return {"status": self.status, "status_text": self.status_text,
                "headers": self.headers, "body": self.body}

    def body_text(self) -> str:
        if self.body_is_json and not isinstance(self.body, str):
            return json.dumps(self.body, indent=2, ensure_ascii=False)
        return self.body


def status_phrase(status: int, reason: Optional[str] = None) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return reason or UNKNOWN_STATUS


def _header_value(value) -> str:
    # only visible ASCII (and tab) counts as text; anything else renders empty
    if isinstance(value, bytes):
        try:
            value = value.decode("ascii")
        except UnicodeDecodeError:
            return ""
    if not isinstance(value, str) or not all(c == "\t" or " " <= c <= "~" for c in value):
        return ""
    return value


def status_class(code: int) -> str:
    if 200 <= code < 300:
        return "success"
    if 300 <= code < 400:
        return "redirect"
    if 400 <= code < 500:
        return "client_error"
    if code >= 500:
        return "server_error"
    return "informational"


def flatten_headers(pairs) -> str:
    return "".join(f"{name}: {_header_value(value)}\n" for name, value in pairs)


def _reject_constant(name):
    raise ValueError(f"non-standard JSON constant {name}")


def decode_body(text: str) -> Tuple[Any, bool]:
    try:
        return json.loads(text, parse_constant=_reject_constant), True
    except (ValueError, RecursionError):
        return text, False


def normalize_response(raw: RawResponse) -> ResponseResult:
    try:
        text = raw.read_text()
    except BodyReadError:
        raise
    except (OSError, UnicodeDecodeError) as e:
        raise BodyReadError(str(e)) from e
    body, is_json = decode_body(text)
    return ResponseResult(
        status=raw.status,
        status_text=status_phrase(raw.status, raw.reason),
        headers=flatten_headers(raw.headers),
        body=body,
        body_is_json=is_json,
    )


def prettify_json(text: str) -> str:
    try:
        return json.dumps(json.loads(text), indent=2, ensure_ascii=False)
    except ValueError:
        return text
