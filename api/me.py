"""Identity echo endpoint: tells the client whether it is signed in."""

from http.server import BaseHTTPRequestHandler
import json

from taskrush.services.identity import get_optional_owner


def describe_identity(headers: dict) -> dict:
    """Build the /api/me payload from request headers."""
    owner_id = get_optional_owner(headers)
    if not owner_id:
        return {"authenticated": False}
    return {"authenticated": True, "user": {"id": owner_id}}


class handler(BaseHTTPRequestHandler):
    """Vercel serverless function handler for /api/me."""

    def do_GET(self):
        payload = describe_identity(dict(self.headers.items()))
        self.send_response(200)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        self.wfile.write(json.dumps(payload).encode('utf-8'))
