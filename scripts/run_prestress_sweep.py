"""L 形框架的预应力频率扫描。

``K``、``Kg`` 与 ``M`` 由有限元程序在静载求解后写入缓存
（``stiffness``、``geometric_stiffness``、``mass``）。
"""
from __future__ import annotations

import argparse
from pathlib import Path

from structural_modal.io import ModalResultCache
from structural_modal.reporting import plot_prestress_sweep
from structural_modal.solver import (
    FrameProperties,
    PrestressSweepConfig,
    sweep_fundamental_frequency,
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Sweep the fundamental frequency of the prestressed L-frame over load factors.")
    parser.add_argument("--cache-dir", type=Path, default=Path("cache"),
                        help="Directory holding the cached frame matrices.")
    parser.add_argument("--cache-key", default="argyris_frame",
                        help="Cache subdirectory with the frame matrices.")
    parser.add_argument("--points", type=int, default=400,
                        help="Load factors per branch.")
    parser.add_argument("--max-positive", type=float, default=68000.0)
    parser.add_argument("--min-negative", type=float, default=-109000.0)
    parser.add_argument("--num-eigenvalues", type=int, default=4)
    parser.add_argument("--plot", type=Path, default=None,
                        help="Write the frequency-vs-load figure to this file.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    frame = FrameProperties()
    print(
        f"Frame: L={frame.leg_length} m, b={frame.width} m, h={frame.height} m, "
        f"A={frame.area:.3e} m^2, I={frame.second_moments[0]:.3e}/{frame.second_moments[1]:.3e} m^4")

    cache = ModalResultCache(args.cache_dir)
    matrices = cache.load_matrices(args.cache_key)
    missing = [key for key in ("stiffness", "geometric_stiffness", "mass")
               if key not in matrices]
    if missing:
        raise SystemExit(
            f"Cache entry '{args.cache_key}' lacks matrices: {', '.join(missing)}")
    K = matrices["stiffness"]
    Kg = matrices["geometric_stiffness"]
    M = matrices["mass"]

    config = PrestressSweepConfig(
        positive=(0.0, args.max_positive, args.points),
        negative=(args.min_negative, 0.0, args.points),
        num_eigenvalues=args.num_eigenvalues,
    )
    positive, negative = config.load_factors()

    sweeps = []
    for label, factors in (("positive", positive), ("negative", negative)):
        sweep = sweep_fundamental_frequency(K, Kg, M, factors, config=config)
        sweeps.append(sweep)
        bracket = sweep.buckling_bracket()
        print(
            f"[{label}] f(P=0)={sweep.frequencies[abs(sweep.load_factors).argmin()]:.4f} Hz "
            f"buckled_at={'--' if bracket is None else f'{bracket:.1f}'}")

    if args.plot is not None:
        plot_prestress_sweep(sweeps, title="Argyris frame: fundamental frequency",
                             output_path=str(args.plot))
        print(f"Saved plot to {args.plot}")


if __name__ == "__main__":
    main()
