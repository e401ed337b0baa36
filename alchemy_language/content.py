"""Content sources an analysis call can run against."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import RequestCompositionError


class RequestType(str, Enum):
    HTML = "html"
    URL = "url"
    TEXT = "text"


class _Source(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _reject_blank(self) -> "_Source":
        if not getattr(self, self.kind).strip():
            raise ValueError(f"Content source '{self.kind}' is blank.")
        return self

    @property
    def request_type(self) -> RequestType:
        return RequestType(self.kind)

    def as_form(self) -> Dict[str, str]:
        """Return the single form field carrying this source."""
        return {self.kind: getattr(self, self.kind)}


class HtmlSource(_Source):
    kind: Literal["html"] = "html"
    html: str = Field(..., min_length=1, description="Raw HTML document to analyse.")


class UrlSource(_Source):
    kind: Literal["url"] = "url"
    url: str = Field(..., min_length=1, description="Public URL the service fetches itself.")


class TextSource(_Source):
    kind: Literal["text"] = "text"
    text: str = Field(..., min_length=1, description="Plain text to analyse.")


ContentSource = Union[HtmlSource, UrlSource, TextSource]


def content_source(
    *,
    html: Optional[str] = None,
    url: Optional[str] = None,
    text: Optional[str] = None,
) -> ContentSource:
    """Build a source from three optional fields, exactly one of which must be set."""
    supplied = {
        name: value
        for name, value in (("html", html), ("url", url), ("text", text))
        if value is not None
    }
    if len(supplied) != 1:
        names = ", ".join(sorted(supplied)) or "none"
        raise RequestCompositionError(
            f"Exactly one of html, url or text must be supplied (got: {names})."
        )

    name, value = next(iter(supplied.items()))
    if not value.strip():
        raise RequestCompositionError(f"Content source '{name}' is empty.")
    if name == "html":
        return HtmlSource(html=value)
    if name == "url":
        return UrlSource(url=value)
    return TextSource(text=value)
