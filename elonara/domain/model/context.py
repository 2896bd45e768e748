"""Per-request caller context."""

from typing import Optional

from elonara.domain.model.common import DomainModel
from elonara.domain.value import UserId


class RequestContext(DomainModel):
    """Who is calling, resolved once per request.

    ``session_id`` identifies the browser (anonymous guests included) and
    is what nonces are bound to.
    """

    session_id: str
    user_id: Optional[UserId] = None
    is_admin: bool = False
