"""
Helper functions for building record ids.
"""
import hashlib
import uuid

RECORD_ID_PREFIX = 'id'


def new_id() -> str:
    """
    Generate a new random record id.

    Returns:
        "id-" followed by a UUID4 string
    """
    return f"{RECORD_ID_PREFIX}-{uuid.uuid4()}"


def to_id(value: str) -> str:
    """
    Generate a predictable, fixed length id for a string.

    Args:
        value: The string to derive the id from

    Returns:
        "id-" followed by the SHA256 hex digest of value
    """
    return f"{RECORD_ID_PREFIX}-{hashlib.sha256(value.encode('utf-8')).hexdigest()}"
