import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rewardtoken.WagerEngine import config  # noqa: E402
from rewardtoken.WagerEngine.simulation import simulate_table  # noqa: E402


def main(argv=None):
    parser = argparse.ArgumentParser(description="Monte Carlo check of the roulette payout table")
    parser.add_argument("--rounds", type=int, default=config.SIM_ROUNDS)
    parser.add_argument("--stake", type=int, default=config.SIM_STAKE)
    parser.add_argument("--seed", type=int, default=config.SIM_SEED)
    args = parser.parse_args(argv)

    print(f"{'risk':>4} {'reward':>8} {'hit rate':>9} {'RTP (sim)':>10} {'RTP (theory)':>13} {'edge':>8}")
    for r in simulate_table(rounds=args.rounds, stake=args.stake, seed=args.seed):
        print(
            f"{r.risk_level:>4} {r.reward:>8} {r.hit_rate:>9.2%} {r.rtp_measured:>10.4f} "
            f"{r.rtp_theoretical:>13.4f} {r.house_edge_theoretical:>8.2%}"
        )


if __name__ == "__main__":
    main()
