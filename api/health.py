"""Health check endpoint."""

from http.server import BaseHTTPRequestHandler
import json

from taskrush.utils.config import AppConfig

SERVICE_NAME = "taskrush-backend"


def health_payload() -> dict:
    """Liveness plus whether storage credentials are present."""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "storage_configured": bool(AppConfig.supabase_url() and AppConfig.supabase_key()),
    }


class handler(BaseHTTPRequestHandler):
    """Health check handler for Vercel serverless function."""

    def do_GET(self):
        body = json.dumps(health_payload()).encode('utf-8')
        self.send_response(200)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Cache-Control', 'no-cache')
        self.end_headers()
        self.wfile.write(body)

    def do_HEAD(self):
        self.send_response(200)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
