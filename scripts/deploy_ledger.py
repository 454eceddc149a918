"""
Deploy / inspect a RewardToken ledger.

Creates the ledger database on first run (genesis mints the initial supply
to the ledger's own account) and reports its initial state.

    python scripts/deploy_ledger.py --owner 0xabc... --db Data/RewardToken.sqlite
"""
import argparse
import logging
import os
import sys

# Ensure local imports work outside package context
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv  # noqa: E402

load_dotenv()

from rewardtoken.LedgerEngine import config  # noqa: E402
from rewardtoken.LedgerEngine.ledger import Ledger  # noqa: E402

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def deploy(db_path: str, owner: str) -> dict:
    ledger = Ledger(db_path=db_path, owner=owner)
    try:
        state = ledger.check_invariants()
        report = {
            "address": state.address,
            "owner": state.owner,
            "total_supply": state.total_supply,
            "ledger_balance": state.ledger_balance,
            "available_pool": state.available_pool,
        }
    finally:
        ledger.close()

    logger.info(f"RewardToken deployed to: {report['address']}")
    logger.info(f"Initial total supply: {report['total_supply']}")
    logger.info(f"Contract balance: {report['ledger_balance']}")
    return report


def main(argv=None):
    parser = argparse.ArgumentParser(description="Deploy or inspect a RewardToken ledger")
    parser.add_argument("--db", default=config.DB_PATH, help="SQLite database path")
    parser.add_argument("--owner", default=config.DEFAULT_OWNER, help="Owner identity for genesis")
    args = parser.parse_args(argv)

    report = deploy(args.db, args.owner)
    for key, value in report.items():
        print(f"{key:>16}: {value}")


if __name__ == "__main__":
    main()
