from __future__ import annotations

import logging
from typing import MutableMapping, Optional

from xeno_crm.api_client import BackendClient, BackendError
from xeno_crm.models import Session

logger = logging.getLogger(__name__)

SESSION_KEY = "xeno_session"


def sign_in(client: BackendClient, email: Optional[str], name: Optional[str] = None) -> Optional[Session]:
    """Register the identity-provider user with the backend and build a Session.

    Returns None when the user has no email or the backend refuses them.
    """
    if not email:
        logger.error("User email is required but missing.")
        return None
    try:
        customer = client.register_customer(email)
    except BackendError:
        logger.exception("Backend rejected sign-in for %s", email)
        return None
    return Session(customer_id=customer.id, name=name or customer.name or email, email=email)


def current_session(state: MutableMapping) -> Optional[Session]:
    return state.get(SESSION_KEY)


def store_session(state: MutableMapping, session: Session) -> None:
    state[SESSION_KEY] = session


def clear_session(state: MutableMapping) -> None:
    state.pop(SESSION_KEY, None)
