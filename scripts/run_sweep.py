import argparse
import csv
import multiprocessing as mp
import os
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

import numpy as np
import yaml

from securebox.box import SecureBox
from securebox.evaluation.metrics import (
    inconsistent_broken,
    presses_used,
    solved,
)
from securebox.unlocker import METHODS, open_box

# Limit threads per worker
os.environ["OMP_NUM_THREADS"] = "1"
os.environ["OPENBLAS_NUM_THREADS"] = "1"
os.environ["MKL_NUM_THREADS"] = "1"
mp.freeze_support()

ROOT = Path(__file__).resolve().parents[1]

FIELDNAMES = [
    "rows",
    "cols",
    "method",
    "seed",
    "box_id",
    "initial_locked",
    "consistent",
    "solved",
    "presses_used",
    "time_ms",
    "inconsistent",
    "broken",
]


def parse_sizes(cfg_sizes):
    """Parse box sizes from YAML: either [rows, cols] pairs or a square int."""
    parsed = []
    for item in cfg_sizes:
        if isinstance(item, int):
            parsed.append((item, item))
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            parsed.append((int(item[0]), int(item[1])))
        else:
            raise ValueError(f"Invalid box size: {item}")
    return parsed


def _task_seed(base_seed: int, *coords: int) -> int:
    """Generate deterministic seed for each box."""
    ss = np.random.SeedSequence([int(base_seed)] + [int(c) for c in coords])

    return int(
        ss.generate_state(1, dtype=np.uint64)[0] & np.uint64((1 << 63) - 1)
    )


def make_batches(sizes, methods, n_samples, batch_size):
    """Create job batches for parallel processing."""
    ranges = [
        (i, min(i + batch_size, n_samples))
        for i in range(0, n_samples, batch_size)
    ]
    for method in methods:
        for rows, cols in sizes:
            for lo, hi in ranges:
                yield {
                    "rows": rows,
                    "cols": cols,
                    "method": method,
                    "idx_lo": lo,
                    "idx_hi": hi,
                }


def _run_batch(job):
    """Scramble and open one batch of boxes."""
    rows, cols = job["rows"], job["cols"]
    base_seed = job["base_seed"]
    out = []
    for box_id in range(job["idx_lo"], job["idx_hi"]):
        # same seed for every method so they all see the same boxes
        rng = np.random.default_rng(_task_seed(base_seed, rows, cols, box_id))
        box = SecureBox(rows, cols, rng=rng)
        initial_locked = box.count_locked()

        start_time = time.perf_counter()
        report = open_box(box, method=job["method"])
        time_ms = (time.perf_counter() - start_time) * 1000

        is_solved = solved(report)
        inconsistent, broken = inconsistent_broken(
            int(report.consistent), is_solved
        )
        out.append(
            {
                "rows": rows,
                "cols": cols,
                "method": job["method"],
                "seed": base_seed,
                "box_id": box_id,
                "initial_locked": initial_locked,
                "consistent": int(report.consistent),
                "solved": is_solved,
                "presses_used": presses_used(report),
                "time_ms": time_ms,
                "inconsistent": inconsistent,
                "broken": broken,
            }
        )
    return out


def run_pool(jobs, writer, workers, total_jobs=None):
    """Run jobs in parallel and write results as they complete."""
    ctx = mp.get_context("spawn")
    done = 0
    total_rows = 0
    start_time = time.time()

    with ProcessPoolExecutor(max_workers=workers, mp_context=ctx) as ex:
        futures = [ex.submit(_run_batch, j) for j in jobs]
        for fut in as_completed(futures):
            rows = fut.result()
            writer.writerows(rows)
            done += 1
            total_rows += len(rows)

            elapsed = time.time() - start_time
            print(
                f"\r[progress] {done}/{total_jobs} batches | "
                f"{total_rows:>7,} boxes | "
                f"elapsed: {int(elapsed // 60)}m {int(elapsed % 60)}s",
                end="",
                flush=True,
            )
    print()


def main():
    n_cpus = os.cpu_count() or 1
    default_workers = max(n_cpus - 1, 1)

    ap = argparse.ArgumentParser()
    ap.add_argument(
        "--config",
        default=str(ROOT / "experiments" / "configs" / "sweep.yaml"),
    )
    ap.add_argument("--out", default=None, help="Output CSV path")
    ap.add_argument(
        "--workers", type=int, default=default_workers, help="Number of workers"
    )
    ap.add_argument(
        "--batch-size", type=int, default=50, help="Boxes per batch"
    )
    args = ap.parse_args()

    with open(args.config, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)["experiment"]

    sizes = parse_sizes(cfg["sizes"])
    methods = list(cfg["methods"])
    for method in methods:
        if method not in METHODS:
            raise ValueError(f"Unknown method: {method}")
    n_samples = int(cfg["n_samples"])
    base_seed = int(cfg.get("seed", 0))
    out_dir = Path(cfg.get("output_dir", "results/runs"))
    out_dir.mkdir(parents=True, exist_ok=True)
    out_csv = args.out or str(out_dir / "sweep.csv")

    jobs = []
    for j in make_batches(sizes, methods, n_samples, args.batch_size):
        j["base_seed"] = base_seed
        jobs.append(j)

    print(
        f"\nStarting {len(jobs):,} batches "
        f"({len(sizes) * n_samples:,} boxes x {len(methods)} methods) "
        f"with {args.workers} workers...\n"
    )

    start_time = time.time()
    with open(out_csv, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        run_pool(jobs, writer, workers=args.workers, total_jobs=len(jobs))

    elapsed = time.time() - start_time
    print(f"\nDone in {int(elapsed/60)}m {int(elapsed%60)}s")
    print(f"Output: {out_csv}\n")


if __name__ == "__main__":
    main()
