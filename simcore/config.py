import os


def _optional_int(name: str):
    raw = os.environ.get(name, "").strip()
    return int(raw) if raw else None


# ============================================================================
# HISTORY
# ============================================================================

# Newest-first record list, truncated on insert
HISTORY_LIMIT = int(os.environ.get("QSIM_HISTORY_LIMIT", "50"))

# ============================================================================
# SIMULATION
# ============================================================================

# Seed used by the API when a request carries none (unset = fresh draws per run)
DEFAULT_SEED = _optional_int("QSIM_DEFAULT_SEED")

# ============================================================================
# SERVICE
# ============================================================================

LOG_LEVEL = os.environ.get("QSIM_LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.environ.get("QSIM_CORS_ORIGINS", "*").split(",") if o.strip()]
