from .base import Persona, Stance
from .registry import PersonaRegistry

__all__ = [
    "Persona",
    "PersonaRegistry",
    "Stance",
]
