from ._version import __version__
from .classifiers.instant import InstantClassifier
from .content.base import ContentItem, ContentKind
from .debate.base import DebateResult, DebateRound
from .debate.engine import DebateConfig, DebateOrchestrator
from .factcheck.base import FactCheckResult, FactCheckVerdict
from .factcheck.checker import FactChecker
from .guard.core import Guard, GuardStats
from .investigation.investigator import Investigator
from .judges.base import Classification, ClassificationThresholds, FinalVerdict, RecommendedAction
from .personas.base import Persona
from .personas.registry import PersonaRegistry

__all__ = [
    "__version__",
    "Classification",
    "ClassificationThresholds",
    "ContentItem",
    "ContentKind",
    "DebateConfig",
    "DebateOrchestrator",
    "DebateResult",
    "DebateRound",
    "FactCheckResult",
    "FactCheckVerdict",
    "FactChecker",
    "FinalVerdict",
    "Guard",
    "GuardStats",
    "InstantClassifier",
    "Investigator",
    "Persona",
    "PersonaRegistry",
    "RecommendedAction",
]
