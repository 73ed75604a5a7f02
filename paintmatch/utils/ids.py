"""
Paint Matcher Request ID Utilities
Generate unique IDs for analyses kept in the result store.
"""
import uuid
from datetime import datetime


def generate_request_id(prefix: str = "wall") -> str:
    """
    Generate a unique request ID for tracking.

    Args:
        prefix: Short tag identifying the kind of request

    Returns:
        Unique request ID string like ``wall-20240101120000-1a2b3c4d``
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    short_uuid = str(uuid.uuid4())[:8]
    return f"{prefix}-{timestamp}-{short_uuid}"

