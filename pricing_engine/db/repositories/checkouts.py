from typing import Dict, Optional

from pricing_engine.domain.checkout.schemas import CheckoutData


class CheckoutRepository:
    """Holds live checkout sessions by session id.

    A session is owned by one checkout flow; callers must not run two
    pricing passes over the same session at once.
    """

    def __init__(self):
        self._sessions: Dict[str, CheckoutData] = {}

    def save(self, checkout: CheckoutData) -> CheckoutData:
        self._sessions[checkout.session_id] = checkout
        return checkout

    def get(self, session_id: str) -> Optional[CheckoutData]:
        return self._sessions.get(session_id)
