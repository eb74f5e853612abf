from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class ContentKind(str, Enum):
    POST = "post"
    PROFILE = "profile"
    DM = "dm"


@dataclass(frozen=True, slots=True)
class ContentItem:
    """A single piece of content submitted for review.

    Built by the calling boundary and treated as read-only by the core;
    ``metadata`` is wrapped in a read-only mapping on construction.
    """

    id: str
    kind: ContentKind = ContentKind.POST
    text: str | None = None
    author_id: str | None = None
    author_username: str | None = None
    author_bio: str | None = None
    author_profile_image: str | None = None
    created_at: datetime | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ContentKind(self.kind))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata or {})))
        if self.author_username:
            object.__setattr__(self, "author_username", self.author_username.lstrip("@"))

    @classmethod
    def post(cls, username: str, text: str, **kwargs: Any) -> "ContentItem":
        item_id = kwargs.pop("id", None) or f"post_{username.lstrip('@')}_{uuid.uuid4().hex[:12]}"
        return cls(id=item_id, kind=ContentKind.POST, text=text, author_username=username, **kwargs)

    @classmethod
    def profile(cls, username: str, **kwargs: Any) -> "ContentItem":
        item_id = kwargs.pop("id", None) or f"profile_{username.lstrip('@')}"
        return cls(id=item_id, kind=ContentKind.PROFILE, text="", author_username=username, **kwargs)
