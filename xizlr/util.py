"""Small helpers shared across the package."""

import uuid


def uuid_v4() -> str:
    """Generate a random (version 4) UUID string."""
    return str(uuid.uuid4())
