from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

InsightCategory = Literal["pattern", "timing", "mood", "content"]


class InsightSignal(BaseModel):
    """Structured facts behind one insight; rendering is left to the caller."""

    model_config = ConfigDict(frozen=True)

    category: InsightCategory
    kind: str = Field(..., min_length=1)
    signal: dict[str, Any] = Field(default_factory=dict)


__all__ = ["InsightCategory", "InsightSignal"]
