import uuid

from app.core.errors import BadRequest


def parse_id(value: str | None, label: str = "ID") -> str:
    """Canonical UUID string or BadRequest("Invalid <label>")."""
    if not value:
        raise BadRequest(f"Invalid {label}")
    try:
        return str(uuid.UUID(str(value)))
    except (ValueError, AttributeError, TypeError):
        raise BadRequest(f"Invalid {label}")
