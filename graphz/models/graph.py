"""Graph form models for the admin panel."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, EmailStr, Field, HttpUrl, field_validator

from graphz.kernel.types import SUBJECTS


class GraphForm(BaseModel):
    """
    What the admin create / edit form submits.

    Required text fields are trimmed and must be non-empty. Tags may come
    in as a list or as the form's comma-separated string.
    """

    model_config = {"extra": "forbid", "str_strip_whitespace": True}

    name: str = Field(min_length=1, max_length=200)
    alias: str = ""
    description: str = Field(min_length=1, max_length=5000)
    subject: str
    tags: list[str] = Field(default_factory=list)
    image_url: HttpUrl
    source: str = ""

    @field_validator("subject")
    @classmethod
    def _known_subject(cls, v: str) -> str:
        if v not in SUBJECTS:
            raise ValueError(f"subject must be one of {', '.join(SUBJECTS)}")
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, list | tuple):
            return [str(t).strip() for t in v if str(t).strip()]
        return v

    def to_record_fields(self) -> dict[str, Any]:
        """Fields the store accepts on create / update, URLs as plain strings."""
        return self.model_dump(mode="json")


class UserProfile(BaseModel):
    """A signed-in user's profile document."""

    uid: str
    email: EmailStr | None = None
    display_name: str | None = None
    bookmarks: list[str] = Field(default_factory=list)
    is_premium: bool = False
