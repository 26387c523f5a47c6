"""Component id generation."""

import secrets
import time


def new_id(prefix: str = "") -> str:
    """Random component id, unique enough for one editor session."""
    return f"{prefix}{secrets.token_hex(6)}{int(time.time() * 1000):x}"
