"""Test helper functions."""

import json
from typing import Any, Dict, Optional


def owner_headers(owner_id: Optional[str], **extra: str) -> Dict[str, str]:
    """Headers as forwarded by the upstream auth layer."""
    headers = {"content-type": "application/json"}
    if owner_id is not None:
        headers["X-Owner-ID"] = owner_id
    headers.update(extra)
    return headers


def create_vercel_request(
    method: str = "GET",
    path: str = "/api/tasks",
    body: Any = None,
    headers: Dict[str, str] = None,
    query: Dict[str, str] = None,
) -> Dict[str, Any]:
    """Create a Vercel request object for testing."""
    if headers is None:
        headers = {"content-type": "application/json"}

    if body is None:
        raw_body = ""
    elif isinstance(body, (str, bytes)):
        raw_body = body
    else:
        raw_body = json.dumps(body)

    return {
        "method": method,
        "path": path,
        "headers": headers,
        "body": raw_body,
        "query": query or {},
    }


def response_json(response: Dict[str, Any]) -> Any:
    """Decode the JSON body of a handler response."""
    return json.loads(response["body"])


class MockSocket:
    """Socket stand-in that feeds a raw HTTP request and records the reply."""

    def __init__(self, raw_request: bytes):
        self.raw_request = raw_request
        self.sent = b""

    def makefile(self, *args, **kwargs):
        from io import BytesIO
        return BytesIO(self.raw_request)

    def sendall(self, data):
        self.sent += bytes(data)

    def close(self):
        pass

    def status_code(self) -> int:
        status_line = self.sent.split(b"\r\n", 1)[0]
        return int(status_line.split()[1])

    def body_json(self) -> Any:
        _, _, body = self.sent.partition(b"\r\n\r\n")
        return json.loads(body.decode("utf-8"))
