import logging
import time
from typing import Optional, Protocol

import requests

from request_builder import RequestSpec, build_request
from response_normalizer import RawResponse, ResponseResult, normalize_response
from tester_errors import BodyReadError, TransportError

log = logging.getLogger(__name__)


class Transport(Protocol):
    def send(self, spec: RequestSpec) -> RawResponse: ...


def _wire_headers(pairs):
    # requests takes a case-insensitive mapping: repeats become one comma-joined
    # field under the first spelling
    merged = {}
    for name, value in pairs:
        key = name.lower()
        if key in merged:
            first, prev = merged[key]
            merged[key] = (first, f"{prev}, {value}")
        else:
            merged[key] = (name, value)
    return dict(merged.values())


def _response_headers(response):
    raw_headers = getattr(response.raw, "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "iteritems"):
        return list(raw_headers.iteritems())
    return list(response.headers.items())


class RequestsTransport:
    """One requests.request() per send: no retries, library-default redirects."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def send(self, spec: RequestSpec) -> RawResponse:
        try:
            response = requests.request(
                method=spec.method,
                url=spec.url,
                headers=_wire_headers(spec.headers) or None,
                data=spec.body.encode("utf-8") if spec.body is not None else None,
                timeout=self.timeout,
                stream=True,
            )
        except (requests.exceptions.RequestException, ValueError) as e:
            # ValueError covers UnicodeEncodeError from http.client on non-latin-1 header values
            raise TransportError(str(e)) from e

        def read_text():
            try:
                return response.text
            except requests.exceptions.RequestException as e:
                raise BodyReadError(str(e)) from e
            finally:
                response.close()

        return RawResponse(status=response.status_code, reason=response.reason,
                           headers=_response_headers(response), read_text=read_text)


def execute_request(method: str, url: str, headers: str = "", body: Optional[str] = None,
                    transport: Optional[Transport] = None) -> ResponseResult:
    spec = build_request(method, url, headers, body)
    transport = transport or RequestsTransport()
    start = time.time()
    try:
        raw = transport.send(spec)
        result = normalize_response(raw)
    except (TransportError, BodyReadError) as e:
        log.warning("%s %s failed: %s", spec.method, spec.url, e)
        raise
    log.info("%s %s -> %s in %.0f ms", spec.method, spec.url, result.status, (time.time() - start) * 1000)
    return result
