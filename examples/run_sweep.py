# examples/run_sweep.py
from __future__ import annotations
import os, sys, time, argparse, subprocess

def run_once(fec: str, p: float, channel: str, workers: int, show_inner: bool, output_root: str) -> int:
    env = os.environ.copy()
    if show_inner:
        env["BER_TQDM"] = "1"
    else:
        env.pop("BER_TQDM", None)

    cmd = [sys.executable, "-u", "examples/simulate_ber.py",
           "--fec", fec, "--channel", channel, "--flip_prob", str(p),
           "--workers", str(workers), "--output_root", output_root]
    print(f"\n=== Run: {fec:>9s} @ p={p:<8g} | {channel} | workers={workers} ===")
    t0 = time.time()
    rc = subprocess.run(cmd, env=env).returncode
    dt = time.time() - t0
    print(f"--- finished ({fec}@p={p:g}) in {dt:.1f}s, rc={rc} ---")
    return rc

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--probs", type=float, nargs="+", default=[1e-3, 3e-3, 1e-2, 3e-2])
    ap.add_argument("--fecs", type=str, nargs="+", default=["none", "repeat", "hamming74"])
    ap.add_argument("--channel", type=str, choices=["bsc","burst"], default="bsc")
    ap.add_argument("--workers", type=int, default=1)
    ap.add_argument("--output_root", type=str, default="outputs")
    ap.add_argument("--show_inner", action="store_true", help="show per-frame tqdm bars")
    args = ap.parse_args()

    rc_total = 0
    for fec in args.fecs:
        for p in args.probs:
            rc_total |= run_once(fec, p, args.channel, args.workers, args.show_inner, args.output_root)
    sys.exit(rc_total)

if __name__ == "__main__":
    main()
