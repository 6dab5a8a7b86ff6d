"""Actor — the already-authenticated identity performing a mutation.

Supplied by the identity provider (upstream auth gateway); this service
trusts it and performs no credential verification.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel


class Actor(BaseModel):
    """Who is making a change, plus optional request context for the audit log."""

    id: uuid.UUID | None = None
    label: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None

    model_config = {"frozen": True}


SYSTEM_ACTOR = Actor(label="system")
