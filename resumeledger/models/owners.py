"""Owner model — an authenticated identity with a public username."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class Owner(BaseModel):
    """Owns one main ledger and any number of locked ledgers."""

    model_config = ConfigDict(frozen=True)

    owner_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    username: str = Field(min_length=1)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
