"""Task CRUD endpoint for Vercel.

Routes (``/api/tasks/<id>`` is rewritten to ``/api/tasks?id=<id>``):

    GET     /api/tasks          list the caller's tasks, newest first
    GET     /api/tasks?id=...   fetch one task
    POST    /api/tasks          create a task
    PUT     /api/tasks?id=...   partially update a task
    DELETE  /api/tasks?id=...   delete a task
"""

from http.server import BaseHTTPRequestHandler
import asyncio
import json
from typing import Any, Optional
from urllib.parse import parse_qs, urlsplit

from taskrush.services.identity import get_header, resolve_owner
from taskrush.services.task_service import TaskService
from taskrush.services.task_store import SupabaseTaskStore
from taskrush.utils.config import AppConfig
from taskrush.utils.errors import (
    AuthenticationError,
    InvalidInputError,
    SupabaseError,
    TaskForbiddenError,
    TaskNotFoundError,
)
from taskrush.utils.logging import correlation_context, get_structured_logger, mask_user_id
from taskrush.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
logger = get_structured_logger(__name__)

_service: Optional[TaskService] = None


def get_task_service() -> TaskService:
    """Lazily build the Supabase-backed task service."""
    global _service
    if _service is None:
        _service = TaskService(SupabaseTaskStore())
    return _service


def _response(status: int, payload: Any, extra_headers: Optional[dict] = None) -> dict:
    headers = {"Content-Type": "application/json"}
    if extra_headers:
        headers.update(extra_headers)
    return {
        "statusCode": status,
        "headers": headers,
        "body": json.dumps(payload),
    }


def _task_id_from(request: dict) -> Optional[str]:
    """Task id from ``?id=`` or a trailing ``/api/tasks/<id>`` path segment."""
    query = request.get("query") or {}
    task_id = query.get("id")
    if isinstance(task_id, list):
        task_id = task_id[0] if task_id else None
    if task_id:
        return str(task_id)

    path = urlsplit(request.get("path") or "").path.rstrip("/")
    prefix = "/api/tasks/"
    if path.startswith(prefix) and len(path) > len(prefix):
        return path[len(prefix):]
    return None


def _parse_body(raw_body: Any) -> Any:
    if raw_body is None or raw_body == "" or raw_body == b"":
        return {}
    if isinstance(raw_body, (dict, list)):
        return raw_body
    if isinstance(raw_body, str):
        raw_body = raw_body.encode("utf-8")
    if len(raw_body) > AppConfig.max_body_bytes():
        raise InvalidInputError("body", "Request body too large")
    try:
        return json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise InvalidInputError("body", "Malformed JSON")


async def _dispatch(service: TaskService, method: str, owner_id: str, task_id: Optional[str], body: Any):
    if method == "GET":
        if task_id:
            task = await service.get_task(owner_id, task_id)
            return 200, task.to_response()
        tasks = await service.list_tasks(owner_id)
        return 200, [task.to_response() for task in tasks]

    if method == "POST":
        task = await service.create_task(owner_id, body)
        return 201, task.to_response()

    if method in ("PUT", "PATCH"):
        if not task_id:
            raise InvalidInputError("id", "Task id required")
        task = await service.update_task(owner_id, task_id, body)
        return 200, task.to_response()

    if method == "DELETE":
        if not task_id:
            raise InvalidInputError("id", "Task id required")
        await service.delete_task(owner_id, task_id)
        return 200, {"ok": True, "id": task_id}

    return 405, {"error": "method not allowed"}


def handle_request(request: dict, service: Optional[TaskService] = None) -> dict:
    """
    Handle one task API request.

    ``request`` uses the Vercel shape: method, path, headers, body, query.
    Returns a dict with statusCode, headers and a JSON body.
    """
    headers = request.get("headers") or {}
    method = (request.get("method") or "GET").upper()
    correlation_id = get_header(headers, LoggingConfig.LOG_CORRELATION_ID_HEADER)

    with correlation_context(correlation_id) as cid:
        cid_header = {LoggingConfig.LOG_CORRELATION_ID_HEADER: cid}
        try:
            owner_id = resolve_owner(headers)
            logger.info(
                "Task API request",
                method=method,
                path=request.get("path"),
                owner_id=mask_user_id(owner_id),
            )

            body = _parse_body(request.get("body")) if method in ("POST", "PUT", "PATCH") else None
            task_id = _task_id_from(request)

            status, payload = asyncio.run(
                _dispatch(service or get_task_service(), method, owner_id, task_id, body)
            )
            return _response(status, payload, cid_header)

        except InvalidInputError as e:
            logger.info("Rejected invalid task input", field=e.field, reason=e.message)
            return _response(400, {"error": e.message, "field": e.field}, cid_header)

        except AuthenticationError:
            logger.info("Unauthenticated task API request", method=method, path=request.get("path"))
            return _response(401, {"error": "Authentication required"}, cid_header)

        except TaskForbiddenError:
            if AppConfig.mask_forbidden_as_not_found():
                return _response(404, {"error": "Task not found"}, cid_header)
            return _response(403, {"error": "Not authorized"}, cid_header)

        except TaskNotFoundError:
            return _response(404, {"error": "Task not found"}, cid_header)

        except SupabaseError as e:
            logger.error(f"Task storage error: {e}", exc_info=True)
            return _response(500, {"error": "storage error"}, cid_header)

        except Exception as e:
            logger.exception(f"Error processing task request: {e}")
            return _response(500, {"error": "internal server error"}, cid_header)


class handler(BaseHTTPRequestHandler):
    """Vercel serverless function handler for task CRUD."""

    def _handle(self):
        split = urlsplit(self.path)
        query = {key: values[0] for key, values in parse_qs(split.query).items()}

        raw_body = b""
        try:
            content_length = int(self.headers.get('Content-Length', 0) or 0)
        except ValueError:
            self._write(_response(400, {"error": "Invalid Content-Length", "field": "body"}))
            return
        if content_length > AppConfig.max_body_bytes():
            self._write(_response(413, {"error": "Request body too large"}))
            return
        if content_length > 0:
            raw_body = self.rfile.read(content_length)

        response = handle_request({
            "method": self.command,
            "path": split.path,
            "headers": dict(self.headers.items()),
            "body": raw_body,
            "query": query,
        })
        self._write(response)

    def _write(self, response: dict):
        self.send_response(response["statusCode"])
        for key, value in response["headers"].items():
            self.send_header(key, value)
        self.end_headers()
        self.wfile.write(response["body"].encode('utf-8'))

    def do_GET(self):
        self._handle()

    def do_POST(self):
        self._handle()

    def do_PUT(self):
        self._handle()

    def do_PATCH(self):
        self._handle()

    def do_DELETE(self):
        self._handle()
