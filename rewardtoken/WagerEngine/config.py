# Wager Engine Configuration
# Russian roulette table parameters

# Outcome slots per round (revolver chambers)
CHAMBERS = 6

# Risk level = number of loaded chambers (losing slots)
MIN_RISK_LEVEL = 1
MAX_RISK_LEVEL = 5

# Monte Carlo defaults
SIM_ROUNDS = 100_000
SIM_STAKE = 100
SIM_SEED = 42
