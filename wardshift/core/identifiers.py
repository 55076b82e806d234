"""
Identifier generation for locally created records.
"""

import secrets
import uuid


def create_id(prefix: str) -> str:
    """Generate a unique record ID, e.g. ``patient_1a2b3c4d5e6f``."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def create_session_token() -> str:
    return secrets.token_urlsafe(32)
