from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from complexlens.models.verdict import ComplexityVerdict


class CacheEntry(BaseModel):
    """Cached classifier verdict for one piece of code text.

    Never updated in place: changed code hashes differently and gets a new entry.
    """

    model_config = ConfigDict(frozen=True)

    content_hash: str  # SHA-256 of the code text (primary key)
    verdict: ComplexityVerdict
    created_at: datetime
