"""Global configuration values."""

import os
from pathlib import Path

# External capability provider: "gemini" or "openai"
LLM_PROVIDER = os.environ.get("LLM_PROVIDER", "gemini").lower()

# Default Gemini model (can be overridden via env)
DEFAULT_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")

# Model used when LLM_PROVIDER=openai
OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")

# Seconds allowed for a single scoring / intro call before falling back
LLM_TIMEOUT_SECONDS = float(os.environ.get("LLM_TIMEOUT_SECONDS", "20"))

# Worker threads shared by all blocking provider calls
LLM_MAX_WORKERS = int(os.environ.get("LLM_MAX_WORKERS", "16"))

# Suggestions scoring at or below this value are dropped
MATCH_SCORE_THRESHOLD = int(os.environ.get("MATCH_SCORE_THRESHOLD", "50"))

# Maximum number of candidates scored per run
CANDIDATE_POOL_LIMIT = int(os.environ.get("CANDIDATE_POOL_LIMIT", "10"))

# Only match against synthetic pool profiles
CANDIDATE_POOL_ONLY = os.environ.get("CANDIDATE_POOL_ONLY", "false").lower() in ("1", "true", "yes")

# Toggle intro blurbs on returned suggestions
GENERATE_INTROS = os.environ.get("GENERATE_INTROS", "true").lower() in ("1", "true", "yes")

# Data directory for the JSON-backed stores
#   - production: mounted persistent disk
#   - local development: ./data
DATA_DIR = Path(os.environ.get("DATA_DIR", Path(__file__).parent / "data"))
PROFILES_FILE = Path(os.environ.get("PROFILES_FILE", DATA_DIR / "profiles.json"))
SUGGESTIONS_FILE = Path(os.environ.get("SUGGESTIONS_FILE", DATA_DIR / "suggestions.jsonl"))
