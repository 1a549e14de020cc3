from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from tester_errors import UnsupportedMethod

METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


@dataclass
class RequestSpec:
    method: str
    url: str
    headers: List[Tuple[str, str]] = field(default_factory=list)
    body: Optional[str] = None


def parse_headers(text: str) -> List[Tuple[str, str]]:
    """Parse a "Name: Value" block; blank and colon-less lines are skipped."""
    pairs = []
    for raw in (text or "").splitlines():
        line = raw.strip()
        if not line or ":" not in line:
            continue
        name, value = line.split(":", 1)
        pairs.append((name.strip(), value.strip()))
    return pairs


def format_headers(pairs) -> str:
    return "".join(f"{k}: {v}\n" for k, v in pairs)


def build_request(method: str, url: str, headers_text: str = "", body: Optional[str] = None) -> RequestSpec:
    # exact match only: "get" and "HEAD" are rejected
    if method not in METHODS:
        raise UnsupportedMethod(method)
    if body is not None and not body.strip():
        body = None
    return RequestSpec(method=method, url=url, headers=parse_headers(headers_text), body=body)
