"""
End-to-end scenarios over the public token surface.
Mirrors the deployment-level behaviour: genesis, claims, roulette,
transfers, owner grants and burns against one ledger.
"""
import random
import sys
import unittest
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from rewardtoken.LedgerEngine import config
from rewardtoken.LedgerEngine.errors import (
    CooldownActive,
    InsufficientBalance,
    InvalidAmount,
    InvalidRecipient,
    InvalidRiskLevel,
    InvalidSender,
    LedgerError,
)
from rewardtoken.LedgerEngine.ledger import Ledger
from rewardtoken.Services.token_service import TokenService

OWNER = "0x" + "a" * 40
USER1 = "0x" + "1" * 40
USER2 = "0x" + "2" * 40


class FakeClock:
    def __init__(self, start=1_700_000_000):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class TestTokenService(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.service = TokenService(ledger=Ledger(db_path=":memory:", owner=OWNER, clock=self.clock))

    def tearDown(self):
        self.service.ledger.close()

    def test_metadata(self):
        self.assertEqual(self.service.name, "RewardToken")
        self.assertEqual(self.service.symbol, "RWT")
        self.assertEqual(self.service.owner, OWNER)

    def test_genesis(self):
        self.assertEqual(self.service.get_available_tokens(), 1_000_000)
        self.assertEqual(self.service.balance_of(self.service.address), 1_000_000)
        self.assertEqual(self.service.total_supply(), 1_000_000)

    def test_claim_and_cooldown(self):
        self.service.claim_tokens(USER1)
        self.assertEqual(self.service.get_token_balance(USER1), 100)
        self.assertEqual(self.service.get_available_tokens(), 999_900)
        self.assertGreater(self.service.get_time_until_next_claim(USER1), 0)

        with self.assertRaises(CooldownActive):
            self.service.claim_tokens(USER1)

        self.clock.advance(600)
        self.assertEqual(self.service.get_time_until_next_claim(USER1), 0)
        self.service.claim_tokens(USER1)
        self.assertEqual(self.service.get_token_balance(USER1), 200)

    def test_bad_roulette_inputs(self):
        with self.assertRaises(InvalidRiskLevel):
            self.service.play_russian_roulette(USER1, 100, 6)
        with self.assertRaises(InvalidAmount):
            self.service.play_russian_roulette(USER1, 0, 1)
        with self.assertRaises(InsufficientBalance):
            self.service.play_russian_roulette(USER1, 1, 1)

    def test_roulette_changes_balance(self):
        self.service.claim_tokens(USER1)
        result = self.service.play_russian_roulette(USER1, 50, 1)
        self.assertNotEqual(self.service.get_token_balance(USER1), 100)
        self.assertEqual(result.balance_after, self.service.get_token_balance(USER1))

    def test_transfers(self):
        self.service.claim_tokens(USER1)
        self.service.transfer_tokens(USER1, USER2, 50)
        self.assertEqual(self.service.balance_of(USER2), 50)

        with self.assertRaises(InvalidRecipient):
            self.service.transfer_tokens(USER1, config.NULL_ADDRESS, 10)
        with self.assertRaises(InvalidRecipient):
            self.service.transfer_tokens(USER1, self.service.address, 10)
        self.assertEqual(self.service.balance_of(USER1), 50)

    def test_undistributed_supply_cannot_be_sent_by_address(self):
        with self.assertRaises(InvalidSender):
            self.service.transfer_tokens(self.service.address, USER1, 999_950)

        state = self.service.get_state()
        self.assertEqual(state.pool_drift, 0)
        self.assertEqual(self.service.get_token_balance(USER1), 0)

        claim = self.service.claim_tokens(USER1)
        self.assertEqual(claim.balance_after, 100)
        self.assertEqual(self.service.get_available_tokens(), 999_900)

    def test_burn_then_claim_then_wager(self):
        self.service.burn_tokens(OWNER, 100_000)
        self.assertEqual(self.service.total_supply(), 900_000)
        self.assertEqual(self.service.get_available_tokens(), 900_000)

        self.service.claim_tokens(USER1)
        self.assertEqual(self.service.get_token_balance(USER1), 100)

        self.service.play_russian_roulette(USER1, 10, 1)
        self.assertNotEqual(self.service.get_token_balance(USER1), 100)
        state = self.service.check_invariants()
        self.assertTrue(0 <= state.available_pool <= state.total_supply)

        self.service.transfer_tokens(USER1, OWNER, 10)
        self.assertEqual(self.service.balance_of(OWNER), 10)

    def test_quote(self):
        q = self.service.quote_roulette(50, 1)
        self.assertEqual(q.reward, 10)

    def test_event_history(self):
        self.service.claim_tokens(USER1)
        self.service.transfer_tokens(USER1, USER2, 5)
        events = self.service.events(account=USER1)
        self.assertEqual([e.event_type.value for e in events], ["TRANSFER", "CLAIM"])

    def test_invariants_hold_under_random_activity(self):
        rng = random.Random(1234)
        accounts = [OWNER, USER1, USER2, "0x" + "3" * 40, self.service.address]
        ops = ["claim", "wager", "transfer", "grant", "burn"]

        for _ in range(300):
            self.clock.advance(rng.randint(0, 400))
            caller = rng.choice(accounts)
            op = rng.choice(ops)
            try:
                if op == "claim":
                    self.service.claim_tokens(caller)
                elif op == "wager":
                    self.service.play_russian_roulette(caller, rng.randint(0, 120), rng.randint(0, 6))
                elif op == "transfer":
                    self.service.transfer_tokens(caller, rng.choice(accounts + [config.NULL_ADDRESS]), rng.randint(0, 80))
                elif op == "grant":
                    self.service.add_tokens_to_address(caller, rng.choice(accounts), rng.randint(0, 500))
                else:
                    self.service.burn_tokens(caller, rng.randint(0, 5000))
            except LedgerError:
                pass

            state = self.service.check_invariants()
            self.assertEqual(sum(self.service.ledger.holders().values()), state.total_supply)
            self.assertTrue(0 <= state.available_pool <= state.total_supply)
            self.assertEqual(state.pool_drift, 0)


if __name__ == '__main__':
    unittest.main()
