"""
Revocation List Interface.
"""

from datetime import datetime
from typing import Optional, Protocol


class RevokedTokenRepository(Protocol):
    """Session token ids rejected until their natural expiry."""

    def add(self, jti: str, expires_at: datetime, user_id: Optional[int] = None) -> None:
        """Record a revocation. Adding the same jti twice is a no-op."""
        ...

    def is_revoked(self, jti: str) -> bool:
        ...

    def purge_expired(self, now: datetime) -> int:
        """Delete entries whose expiry has passed; returns the count."""
        ...
