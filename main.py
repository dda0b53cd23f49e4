# main.py
import argparse

from pool_sim.app.build import build
from pool_sim.io.config import load_scenario


def run(path: str, ticks: int | None = None, until_idle: bool = False) -> None:
    model = load_scenario(path)
    app = build(model)
    n = model.sim.ticks if ticks is None else ticks
    if until_idle:
        app.driver.run_until_idle(max_ticks=n)
    else:
        app.driver.run(n)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run a pooled dispatch scenario headless.")
    parser.add_argument("scenario", help="YAML scenario file")
    parser.add_argument("--ticks", type=int, default=None, help="override sim.ticks")
    parser.add_argument(
        "--until-idle", action="store_true", help="stop early once all demand is served"
    )
    args = parser.parse_args()
    run(args.scenario, ticks=args.ticks, until_idle=args.until_idle)
