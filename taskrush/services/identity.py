"""Owner resolution for incoming requests.

Authentication happens upstream; the gateway forwards the authenticated
account id in a trusted header and this module only reads it.
"""

from typing import Any, Mapping, Optional

from taskrush.utils.config import AppConfig
from taskrush.utils.errors import AuthenticationError


def get_header(headers: Mapping[str, Any], name: str) -> Optional[str]:
    """Case-insensitive header lookup for dicts and ``email.message.Message``."""
    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                value = candidate
                break
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def get_optional_owner(headers: Mapping[str, Any]) -> Optional[str]:
    """Return the authenticated owner id, or None for anonymous requests."""
    return get_header(headers, AppConfig.owner_id_header())


def resolve_owner(headers: Mapping[str, Any]) -> str:
    """Return the authenticated owner id or raise AuthenticationError."""
    owner_id = get_optional_owner(headers)
    if not owner_id:
        raise AuthenticationError("Authentication required")
    return owner_id
