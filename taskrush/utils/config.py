"""Application settings read from the environment."""

import os


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() == "true"


class AppConfig:
    """Runtime settings for the task endpoints and storage.

    Values are read on access so tests (and Vercel env changes between cold
    starts) see the current environment.
    """

    @staticmethod
    def supabase_url() -> str:
        return os.environ.get("SUPABASE_URL", "").strip()

    @staticmethod
    def supabase_key() -> str:
        return os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "").strip()

    @staticmethod
    def tasks_table() -> str:
        return os.environ.get("TASKS_TABLE", "tasks")

    @staticmethod
    def owner_id_header() -> str:
        return os.environ.get("OWNER_ID_HEADER", "X-Owner-ID")

    @staticmethod
    def mask_forbidden_as_not_found() -> bool:
        return _env_flag("MASK_FORBIDDEN_AS_NOT_FOUND")

    @staticmethod
    def max_body_bytes() -> int:
        # 100kb JSON body limit
        return int(os.environ.get("MAX_BODY_BYTES", str(100 * 1024)))
