from .base import (
    EnrichedProfile,
    LegitimacyAssessment,
    PostRecord,
    ProfileDataService,
    ProfileRecord,
    PublicMetrics,
    RiskLevel,
    ScamRiskFactors,
)
from .legitimacy import enrich_profile
from .x_api import NullProfileService, XApiProfileService

__all__ = [
    "EnrichedProfile",
    "LegitimacyAssessment",
    "NullProfileService",
    "PostRecord",
    "ProfileDataService",
    "ProfileRecord",
    "PublicMetrics",
    "RiskLevel",
    "ScamRiskFactors",
    "XApiProfileService",
    "enrich_profile",
]
