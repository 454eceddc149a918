import sys
import unittest
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from rewardtoken.LedgerEngine.errors import InvalidAmount, InvalidRiskLevel
from rewardtoken.WagerEngine.calculator import (
    calculate_reward,
    loss_probability,
    quote,
    reward_multiplier,
    win_probability,
)
from rewardtoken.WagerEngine.simulation import simulate_risk_level, simulate_table


class TestPayoutCalculator(unittest.TestCase):

    def test_probabilities(self):
        # 1 bullet => 1/6 lose, 5/6 win
        self.assertAlmostEqual(loss_probability(1), 1 / 6, places=6)
        self.assertAlmostEqual(win_probability(1), 5 / 6, places=6)
        # 5 bullets => 5/6 lose
        self.assertAlmostEqual(loss_probability(5), 5 / 6, places=6)

    def test_multiplier_grows_with_risk(self):
        multipliers = [reward_multiplier(level) for level in range(1, 6)]
        self.assertEqual(multipliers, sorted(multipliers))
        self.assertAlmostEqual(reward_multiplier(1), 0.2, places=6)
        self.assertAlmostEqual(reward_multiplier(3), 1.0, places=6)
        self.assertAlmostEqual(reward_multiplier(5), 5.0, places=6)

    def test_reward_is_floored(self):
        # 10 * 1 / 5 = 2
        self.assertEqual(calculate_reward(10, 1), 2)
        # 7 * 2 / 4 = 3.5 -> 3
        self.assertEqual(calculate_reward(7, 2), 3)
        # 4 * 1 / 5 = 0.8 -> floor 0, paid the 1 unit minimum
        self.assertEqual(calculate_reward(4, 1), 1)
        self.assertEqual(calculate_reward(1, 2), 1)

    def test_invalid_inputs(self):
        with self.assertRaises(InvalidRiskLevel):
            calculate_reward(100, 6)
        with self.assertRaises(InvalidRiskLevel):
            reward_multiplier(True)
        with self.assertRaises(InvalidAmount):
            calculate_reward(0, 1)
        with self.assertRaises(InvalidAmount):
            calculate_reward(-5, 1)

    def test_quote_is_fair_when_exact(self):
        # 100 at 3 bullets: reward 100, EV = 0.5 * 100 - 0.5 * 100 = 0
        q = quote(100, 3)
        self.assertEqual(q.reward, 100)
        self.assertAlmostEqual(q.expected_value, 0.0, places=6)

    def test_quote_never_favours_player(self):
        # Stakes large enough that the 1 unit minimum never applies
        for stake in (7, 13, 100, 999):
            for level in range(1, 6):
                self.assertLessEqual(quote(stake, level).expected_value, 1e-9)


class TestRouletteSimulation(unittest.TestCase):

    def test_measured_rtp_tracks_theory(self):
        result = simulate_risk_level(2, rounds=20_000, stake=100, seed=7)
        self.assertEqual(result.rounds, 20_000)
        self.assertAlmostEqual(result.hit_rate, 4 / 6, delta=0.02)
        self.assertAlmostEqual(result.rtp_measured, result.rtp_theoretical, delta=0.05)

    def test_table_covers_all_levels(self):
        table = simulate_table(rounds=2_000, stake=60)
        self.assertEqual([r.risk_level for r in table], [1, 2, 3, 4, 5])
        # 60 divides evenly at every level, so the table is exactly fair
        for r in table:
            self.assertAlmostEqual(r.house_edge_theoretical, 0.0, places=6)

    def test_rounds_must_be_positive(self):
        with self.assertRaises(ValueError):
            simulate_risk_level(1, rounds=0)


if __name__ == '__main__':
    unittest.main()
