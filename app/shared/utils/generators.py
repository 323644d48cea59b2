"""Primary key generation."""

from cuid2 import cuid_wrapper

_next_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """CUID2 string used as the default id of every persisted row."""
    return _next_cuid()
