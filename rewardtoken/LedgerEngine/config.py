# Ledger Engine Configuration
# Genesis parameters and storage settings for the token ledger

import os
from pathlib import Path

# Token metadata
TOKEN_NAME = "RewardToken"
TOKEN_SYMBOL = "RWT"

# Genesis supply (whole units, held by the ledger's own account)
INITIAL_SUPPLY = 1_000_000

# Burn destination / "no account" marker
NULL_ADDRESS = "0x" + "0" * 40

# Storage (relative to project root unless absolute)
BASE_DIR = Path(__file__).resolve().parents[2]
DB_PATH = os.getenv("LEDGER_DB_PATH", str(BASE_DIR / "Data" / "RewardToken.sqlite"))

# Identity used for genesis when no owner is given explicitly
DEFAULT_OWNER = os.getenv("LEDGER_OWNER", "0x" + "0" * 39 + "1")

# Optional fixed ledger address (derived from the owner when empty)
LEDGER_ADDRESS = os.getenv("LEDGER_ADDRESS", "")

# Verify supply/pool invariants before every commit
STRICT_INVARIANTS = os.getenv("LEDGER_STRICT_INVARIANTS", "1").lower() not in ("0", "false", "no")
