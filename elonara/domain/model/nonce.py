"""Action nonce."""

from datetime import datetime
from typing import Optional

from elonara.domain.model.common import DomainModel
from elonara.domain.value import NonceScope, UserId, ValueObject, utcnow


class NonceKey(ValueObject):
    """What a nonce is bound to: browser session, action family and user."""

    session_id: str
    scope: NonceScope
    subject_id: Optional[UserId] = None


class Nonce(DomainModel):
    """Short-lived token proving a mutating request came from our own page."""

    key: NonceKey
    value: str
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utcnow()) >= self.expires_at
