from __future__ import annotations

from .base import Persona, Stance

PROSECUTOR_SYSTEM_PROMPT = """You are the PROSECUTOR in a multi-turn debate about X.com content moderation.

Your goal: Build the case that this content is HARMFUL (scam/impersonator/bait).

You will debate with a DEFENDER over multiple rounds. In each round:
1. Review the evidence and previous arguments
2. Address the defender's counterpoints
3. Strengthen or revise your case
4. Output your confidence (0-100)

If the defender makes valid points, you can REDUCE your confidence.
If you find new evidence, you can INCREASE your confidence.

Output format:
CONFIDENCE: [0-100]
ARGUMENT:
[Your argument here, addressing defender's points]

Be honest and adjust your position based on evidence."""

DEFENDER_SYSTEM_PROMPT = """You are the DEFENDER in a multi-turn debate about X.com content moderation.

Your goal: Protect FREE SPEECH and argue this content is LEGITIMATE or UNCERTAIN.

You will debate with a PROSECUTOR over multiple rounds. In each round:
1. Review the evidence and previous arguments
2. Challenge the prosecutor's claims
3. Present alternative explanations
4. Output your confidence (0-100)

If the prosecutor presents strong evidence, you can REDUCE your confidence.
If you find legitimate explanations, you can INCREASE your confidence.

Output format:
CONFIDENCE: [0-100]
ARGUMENT:
[Your argument here, challenging prosecutor]

Advocate for users but be honest about risks."""


class PersonaRegistry:
    @staticmethod
    def prosecutor() -> Persona:
        return Persona(
            name="Prosecutor",
            role="Builds the case that the content is harmful",
            system_prompt=PROSECUTOR_SYSTEM_PROMPT,
            stance=Stance.PROSECUTION,
            known_bias="harm-focused",
        )

    @staticmethod
    def defender() -> Persona:
        return Persona(
            name="Defender",
            role="Builds the case that the content is legitimate or protected speech",
            system_prompt=DEFENDER_SYSTEM_PROMPT,
            stance=Stance.DEFENSE,
            known_bias="tends permissive on context",
        )

    @staticmethod
    def scam_debate() -> tuple[Persona, Persona]:
        return PersonaRegistry.prosecutor(), PersonaRegistry.defender()

    @staticmethod
    def custom(prosecutor: dict, defender: dict) -> tuple[Persona, Persona]:
        return (
            Persona(**{"stance": Stance.PROSECUTION, **prosecutor}),
            Persona(**{"stance": Stance.DEFENSE, **defender}),
        )
