"""
===========================================
REWARDTOKEN LEDGER - MAIN API
===========================================
Faucet + Russian roulette + owner supply control over one ledger.
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment before any config module reads it
load_dotenv()

from rewardtoken import __version__  # noqa: E402
from rewardtoken.Services.router import router as token_router  # noqa: E402
from rewardtoken.Services.token_service import get_token_service  # noqa: E402

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("RewardTokenAPI")

# ===========================================
# CONFIGURATION
# ===========================================
ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

app = FastAPI(title="RewardToken Ledger", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(token_router)


@app.get("/")
def root():
    return {"name": "RewardToken Ledger", "version": __version__, "docs": "/docs"}


@app.get("/api/health")
def health():
    service = get_token_service()
    state = service.check_invariants()
    return {
        "status": "ok",
        "ledger": state.address,
        "total_supply": state.total_supply,
        "available_pool": state.available_pool,
    }
