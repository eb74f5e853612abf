from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Stance(str, Enum):
    PROSECUTION = "prosecution"
    DEFENSE = "defense"


@dataclass(frozen=True, slots=True)
class Persona:
    name: str
    role: str
    system_prompt: str
    stance: Stance
    known_bias: str | None = None
