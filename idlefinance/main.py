"""
Idle Finance headless simulator.

Runs the economy core against a balance file with a simple greedy player
(always buys the cheapest affordable unlocked asset) and prints where the
run ended up. Useful for sanity checking balance changes.

Examples:
  python -m idlefinance.main simulate --seconds 3600 --step 1
  python -m idlefinance.main simulate --seconds 86400 --step 10 --prestige --json
  python -m idlefinance.main simulate --seconds 600 --demo --balance my_balance.yaml
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict, dataclass, field, replace
from typing import Dict, List, Optional, Sequence

from idlefinance.core.config import Config, ConfigValidationError
from idlefinance.core.config.balance import load_balance_file
from idlefinance.core.logging import LogContext, get_logger, setup_logging
from idlefinance.domain.models.catalog import AssetConfig, EngineConfig
from idlefinance.domain.models.player import PlayerState
from idlefinance.modules.game.service import GameService

logger = get_logger(__name__)

# Guards against zero-cost assets looping forever within one step
MAX_PURCHASES_PER_STEP = 100


@dataclass
class SimulationSummary:
    simulated_seconds: float
    steps: int
    cash: float
    net_worth: float
    income_per_sec: float
    assets_owned: Dict[str, int]
    purchases: int = 0
    prestige_resets: int = 0
    prestige_points: int = 0
    portfolio: Optional[Dict[str, Dict[str, float]]] = None
    prestige_history: List[int] = field(default_factory=list)


def _cheapest_affordable(state: PlayerState, config: EngineConfig) -> Optional[AssetConfig]:
    best: Optional[AssetConfig] = None
    best_cost = 0.0
    for asset in GameService.unlocked_assets(state, config):
        cost = GameService.quote_asset(state, asset.id, 1, config)
        if cost > state.cash:
            continue
        if best is None or cost < best_cost:
            best, best_cost = asset, cost
    return best


def run_simulation(
    config: EngineConfig,
    seconds: float,
    step: float,
    tick_multiplier: float = 1.0,
    allow_prestige: bool = False,
    start_ms: float = 0.0,
) -> SimulationSummary:
    """
    Simulate ``seconds`` of wall time in ``step``-second ticks.

    Each step the greedy player buys assets until nothing affordable is
    left, optionally prestiges, then the state accrues
    ``step * tick_multiplier`` seconds of income. After a prestige the
    next run begins with ``config.starting_cash`` and keeps its points.
    """
    if step <= 0:
        raise ValueError("step must be positive")

    state = GameService.create_default_state(config, now=start_ms)
    purchases = 0
    prestige_history: List[int] = []
    elapsed = 0.0
    steps = 0

    while elapsed < seconds:
        dt = min(step, seconds - elapsed)

        for _ in range(MAX_PURCHASES_PER_STEP):
            asset = _cheapest_affordable(state, config)
            if asset is None:
                break
            state = GameService.purchase_asset(state, asset.id, 1, config)
            purchases += 1

        if allow_prestige and GameService.can_prestige(state, config):
            outcome = GameService.prestige_reset(state, config, now=state.last_seen_at)
            # The next run starts over with the configured starting cash
            state = replace(outcome.state, cash=config.starting_cash)
            prestige_history.append(outcome.points_earned)
            logger.info(
                "Simulated prestige",
                extra={"elapsed_seconds": elapsed, "points_earned": outcome.points_earned},
            )

        state = GameService.tick(state, dt * tick_multiplier, config)
        elapsed += dt
        steps += 1

    derived = GameService.compute_derived(state, config)
    breakdown = GameService.portfolio_breakdown(state, config)

    return SimulationSummary(
        simulated_seconds=elapsed,
        steps=steps,
        cash=state.cash,
        net_worth=derived.net_worth,
        income_per_sec=derived.income_per_sec,
        assets_owned={k: v for k, v in state.assets_owned.items() if v > 0},
        purchases=purchases,
        prestige_resets=len(prestige_history),
        prestige_points=state.prestige.points_total,
        portfolio=(
            {"income": breakdown.income_share, "net_worth": breakdown.net_worth_share}
            if breakdown
            else None
        ),
        prestige_history=prestige_history,
    )


def _format_summary(summary: SimulationSummary) -> str:
    lines = [
        f"Simulated {summary.simulated_seconds:.0f}s in {summary.steps} steps",
        f"  cash:            {summary.cash:,.2f}",
        f"  net worth:       {summary.net_worth:,.2f}",
        f"  income/sec:      {summary.income_per_sec:,.2f}",
        f"  purchases:       {summary.purchases}",
        f"  prestige resets: {summary.prestige_resets} ({summary.prestige_points} points)",
    ]
    for asset_id, owned in summary.assets_owned.items():
        lines.append(f"  {asset_id:<24} x{owned}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idlefinance",
        description="Idle Finance economy tools",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sim = sub.add_parser("simulate", help="Run a headless greedy simulation")
    sim.add_argument("--seconds", type=float, default=3600.0, help="wall-clock seconds to simulate")
    sim.add_argument(
        "--step",
        type=float,
        default=None,
        help="seconds per tick (default: SIM_STEP_SECONDS)",
    )
    sim.add_argument("--demo", action="store_true", help="apply the balance file's demo settings")
    sim.add_argument("--balance", type=str, default=None, help="balance YAML to use")
    sim.add_argument("--prestige", action="store_true", help="prestige whenever unlocked")
    sim.add_argument("--json", action="store_true", help="print the summary as JSON")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    step = args.step if args.step is not None else Config.SIM_STEP_SECONDS
    if step <= 0 or args.seconds < 0:
        logger.error("--step must be positive and --seconds non-negative")
        return 2

    try:
        balance = load_balance_file(args.balance)
    except ConfigValidationError as e:
        logger.error("Cannot load balance file", extra={"file": e.path, "error": str(e)})
        return 1

    config = balance.for_demo() if args.demo else balance.engine_config
    tick_multiplier = balance.demo.tick_multiplier if args.demo else 1.0

    with LogContext(operation="simulate", component="cli"):
        summary = run_simulation(
            config,
            seconds=args.seconds,
            step=step,
            tick_multiplier=tick_multiplier,
            allow_prestige=args.prestige,
        )

    if args.json:
        print(json.dumps(asdict(summary), indent=2))
    else:
        print(_format_summary(summary))
    return 0


if __name__ == "__main__":
    sys.exit(main())
