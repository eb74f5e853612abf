from .base import ContentItem, ContentKind
from .credibility import CredibleSourceFilter

__all__ = [
    "ContentItem",
    "ContentKind",
    "CredibleSourceFilter",
]
