# Faucet Configuration
# Fixed grant per claim and the minimum wait between claims

import os

# Units moved from the pool to the caller on every successful claim
CLAIM_AMOUNT = int(os.getenv("FAUCET_CLAIM_AMOUNT", "100"))

# Seconds an account must wait between two claims (10 minutes)
COOLDOWN_SECONDS = int(os.getenv("FAUCET_COOLDOWN_SECONDS", "600"))
