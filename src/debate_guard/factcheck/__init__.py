from .base import ClaimAssessment, ClaimDetection, ClaimType, FactCheckResult, FactCheckVerdict
from .checker import FactChecker

__all__ = [
    "ClaimAssessment",
    "ClaimDetection",
    "ClaimType",
    "FactCheckResult",
    "FactCheckVerdict",
    "FactChecker",
]
