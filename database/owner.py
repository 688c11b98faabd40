import re

from utils.errors import AccessDenied

_SAFE_OWNER = re.compile(r"^[A-Za-z0-9_.@-]+$")


def check_owner_id(owner_id: str | None) -> str:
    """Reject missing owners and ids that could escape the per-user folder."""
    if not owner_id or not isinstance(owner_id, str):
        raise AccessDenied("No authenticated owner for this operation.")
    if not _SAFE_OWNER.match(owner_id) or owner_id in (".", ".."):
        raise AccessDenied(f"Invalid owner id '{owner_id}'.")
    return owner_id
