import argparse
import logging
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import yaml

from securebox.box import SecureBox
from securebox.unlocker import METHODS, open_box
from securebox.viz import show_solution

ROOT = Path(__file__).resolve().parents[1]


def load_config(path) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)["experiment"]


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Scramble a SecureBox and open it.")
    ap.add_argument("--config", default=None, help="YAML config path")
    ap.add_argument("--rows", type=int, default=None)
    ap.add_argument("--cols", type=int, default=None)
    ap.add_argument("--seed", type=int, default=None, help="Scramble seed")
    ap.add_argument("--method", choices=METHODS, default=None)
    ap.add_argument("--plot", default=None, help="Save before/after figure here")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    cfg = load_config(args.config) if args.config else {}
    box_cfg = cfg.get("box", {})
    rows = args.rows if args.rows is not None else int(box_cfg.get("rows", 10))
    cols = args.cols if args.cols is not None else int(box_cfg.get("cols", 10))
    seed = args.seed if args.seed is not None else cfg.get("seed", None)
    method = args.method or cfg.get("method", "auto")
    if method not in METHODS:
        raise ValueError(f"Unknown method: {method}")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    box = SecureBox(rows, cols, rng=np.random.default_rng(seed))
    before = box.get_state()
    print(box)

    report = open_box(box, method=method)
    if report.consistent:
        print("Solved SecureBox:")
    else:
        print("No solution for SecureBox")
    print(box)

    if args.plot:
        show_solution(before, report.toggles, box.get_state())
        plt.savefig(args.plot)
        plt.close("all")
        print(f"Figure: {args.plot}")

    print("BOX: LOCKED!" if report.locked else "BOX: OPENED!")
    return int(report.locked)


if __name__ == "__main__":
    sys.exit(main())
