from uuid import uuid4


def generate_id() -> str:
    """Opaque string identifier for new rows."""
    return uuid4().hex
