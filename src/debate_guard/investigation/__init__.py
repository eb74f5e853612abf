from .base import (
    ContentSignals,
    FollowerNetwork,
    InvestigationPlan,
    InvestigationResult,
    InvestigationTool,
    PlannedAction,
    Priority,
    ProfileImageAnalysis,
)
from .investigator import Investigator
from .network import classify_network_pattern

__all__ = [
    "ContentSignals",
    "FollowerNetwork",
    "InvestigationPlan",
    "InvestigationResult",
    "InvestigationTool",
    "Investigator",
    "PlannedAction",
    "Priority",
    "ProfileImageAnalysis",
    "classify_network_pattern",
]
