"""
Pydantic request/response models for the shortlink HTTP API.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import Link


class LinkCreate(BaseModel):
    """Request payload for creating a new short link."""

    # Missing or null url is reported as an invalid URL rather than a schema error.
    url: Optional[str] = None
    code: Optional[str] = None


class LinkOut(BaseModel):
    """A Link as returned by the API (camelCase field names)."""

    model_config = ConfigDict(populate_by_name=True)

    code: str
    url: str
    total_clicks: int = Field(alias="totalClicks")
    last_clicked: Optional[datetime] = Field(default=None, alias="lastClicked")
    created_at: datetime = Field(alias="createdAt")

    @classmethod
    def from_link(cls, link: Link) -> "LinkOut":
        return cls(
            code=link.code,
            url=link.url,
            total_clicks=link.total_clicks,
            last_clicked=link.last_clicked,
            created_at=link.created_at,
        )


class ErrorOut(BaseModel):
    error: str
