DEFAULT_MODEL = "xai/grok-4-1-fast-reasoning"
DEFAULT_FAST_MODEL = "xai/grok-3-mini"
DEFAULT_VISION_MODEL = "xai/grok-2-vision-1212"

DEFAULT_TIMEOUT_S = 30.0

DEFAULT_MAX_ROUNDS = 5
DEFAULT_CONVERGENCE_THRESHOLD = 20
DEFAULT_CONSENSUS_SCORE = 80

NEUTRAL_CONFIDENCE = 50
