"""
Configuration module for the state proof verifier.

Centralizes settings with environment variable support. Values are read
once at import; the verification core takes everything else as explicit
arguments.
"""

import os

# ============================================================
# Environment Configuration
# ============================================================

ENV = os.getenv("STATEPROOF_ENV", "dev")  # dev|stage|prod

# Logging
LOG_LEVEL = os.getenv("STATEPROOF_LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("STATEPROOF_LOG_JSON", "true").lower() in ("1", "true", "yes")
LOG_FILE = os.getenv("STATEPROOF_LOG_FILE", "")

# Largest accepted state proof payload (bytes)
MAX_PAYLOAD_BYTES = int(os.getenv("STATEPROOF_MAX_PAYLOAD_BYTES", str(16 * 1024 * 1024)))


# ============================================================
# Feature Flags
# ============================================================

def is_production() -> bool:
    """Check if running in production mode."""
    return ENV == "prod"


def is_debug() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("STATEPROOF_DEBUG", "").lower() in ("1", "true", "yes")


def effective_log_level(level: str) -> str:
    """Debug mode forces DEBUG over any configured level."""
    return "DEBUG" if is_debug() else level
