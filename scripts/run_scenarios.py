"""Project mortality rates for one or more scenarios (thin CLI glue).

Usage:
  python scripts/run_scenarios.py baseline scale_up --plot out/comparison.png
  python scripts/run_scenarios.py --effectiveness 0.2 --decline 0.05 --n-steps 20

Policy:
- No numerics here: no RHS/integrators.
- Orchestration only.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Allow running directly from a src-layout repo without installation.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from mortality.models import DecayParams
from mortality.scenarios import Scenario, list_scenarios, load_scenario
from mortality.simulate import SimulationConfig, simulate_all


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="RK4 projection of child pneumonia mortality")
    p.add_argument("scenarios", nargs="*", help="Scenario names (JSON filename stem; default: all)")
    p.add_argument("--effectiveness", type=float, default=None, help="Ad-hoc vaccination effectiveness in [0, 0.5]")
    p.add_argument("--decline", type=float, default=None, help="Ad-hoc natural decline in [0, 0.2]")
    p.add_argument("--y0", type=float, default=50.0, help="Initial rate per 1000 children (default: 50)")
    p.add_argument("--t0", type=float, default=0.0, help="Initial time in years (default: 0)")
    p.add_argument("--h", type=float, default=1.0, help="Step size in years (default: 1)")
    p.add_argument("--n-steps", type=int, default=10, help="Number of steps (default: 10)")
    p.add_argument("--plot", type=str, default=None, help="Write the comparison chart to this image file")
    p.add_argument("--show", action="store_true", help="Open an interactive chart window")
    return p.parse_args(argv)


def _collect(args: argparse.Namespace) -> list[Scenario]:
    if args.effectiveness is not None or args.decline is not None:
        defaults = DecayParams()
        params = DecayParams(
            vaccination_effectiveness=(
                defaults.vaccination_effectiveness if args.effectiveness is None else args.effectiveness
            ),
            natural_decline=defaults.natural_decline if args.decline is None else args.decline,
        )
        return [Scenario(name="custom", params=params, label="Custom")]

    names = args.scenarios if args.scenarios else list_scenarios()
    if not names:
        raise SystemExit("No scenario definitions found")
    return [load_scenario(name) for name in names]


def run(args: argparse.Namespace) -> int:
    if args.n_steps < 0:
        raise SystemExit(f"--n-steps must be non-negative, got {args.n_steps}")

    try:
        scenarios = _collect(args)
        config = SimulationConfig(y0=args.y0, t0=args.t0, h=args.h, n_steps=args.n_steps)
        result = simulate_all(scenarios, config=config)
    except (ValueError, FileNotFoundError) as e:
        raise SystemExit(str(e)) from e

    print(result.to_frame().to_string(float_format=lambda v: f"{v:.4f}"))
    print()
    print("Final values:")
    for label, value in result.final_values().items():
        print(f"  {label:<24} {value:.4f}")

    if args.plot is not None:
        from mortality.visualize import render_comparison

        out = render_comparison(result, args.plot)
        print(f"Saved: {out}")

    if args.show:
        from mortality.visualize import show_comparison

        show_comparison(result)

    return 0


def main(argv=None) -> int:
    return run(_parse_args(argv))


if __name__ == "__main__":
    raise SystemExit(main())
