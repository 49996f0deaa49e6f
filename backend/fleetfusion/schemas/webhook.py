from typing import Any

from pydantic import BaseModel


class IdentityEvent(BaseModel):
    """Identity-provider webhook envelope."""
    type: str
    data: dict[str, Any] = {}


class IdentityEventResult(BaseModel):
    ok: bool = True
    type: str
    outcome: str  # processed | skipped | ignored
