from .instant import InstantClassifier

__all__ = [
    "InstantClassifier",
]
