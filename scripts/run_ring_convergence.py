"""自由圆环（NAFEMS 固有频率基准）的网格收敛与 Richardson 外推。

有限元程序把三个网格层级的频谱，或仅刚度与质量矩阵，写入缓存目录，
键名为 ``ring_n{每半径单元数}``。只有矩阵时在此求解并回写频谱。
"""
from __future__ import annotations

import argparse
from pathlib import Path

from structural_modal.io import ModalResultCache
from structural_modal.reporting import plot_convergence
from structural_modal.solver import round_significant
from structural_modal.validation import (
    BenchmarkValidator,
    RingStudyConfig,
    analyze_modes,
    format_report,
    level_frequencies,
    select_mode_frequencies,
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extrapolate ring natural frequencies from three mesh resolutions.")
    parser.add_argument("--cache-dir", type=Path, default=Path("cache"),
                        help="Directory holding the cached ring spectra.")
    parser.add_argument("--radius", type=float, default=1.0,
                        help="Ring radius in metres.")
    parser.add_argument("--tolerance", type=float, default=1e-2,
                        help="Relative deviation from the NAFEMS target accepted as PASS.")
    parser.add_argument("--plot", type=Path, default=None,
                        help="Write the convergence figure to this file.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    config = RingStudyConfig(radius=args.radius)
    print(
        f"Ring: R={config.radius} m, d={config.diameter} m, E={config.youngs_modulus:.3e} Pa, "
        f"nu={config.poisson_ratio}, rho={config.density} kg/m^3, shift={config.mass_shift:.4e}, "
        f"neigvs={config.num_eigenvalues}")
    cache = ModalResultCache(args.cache_dir)

    results = []
    for level in config.levels:
        key = config.cache_key(level)
        if not cache.available(key):
            raise SystemExit(
                f"Missing cached spectrum or matrices '{key}' in {args.cache_dir}.")
        try:
            frequencies, solved = level_frequencies(cache, level, config)
        except FileNotFoundError as exc:
            raise SystemExit(str(exc)) from exc
        source = "solved" if solved else "cached"
        print(
            f"[{key}] nperradius={level[0]} nL={level[1]} source={source} "
            f"Eigenvalues: {round_significant(frequencies).tolist()} [Hz]")
        results.append(select_mode_frequencies(frequencies, config))

    rows = analyze_modes(results, config)
    print("\n外推结果：")
    for line in format_report(rows):
        print(line)

    validator = BenchmarkValidator()
    for row in rows:
        if row.result is not None:
            validator.compare(row.modes, row.result.value, tol=args.tolerance)

    if args.plot is not None:
        drawn = plot_convergence(rows, title="3D: Convergence of modes 7, ..., 12",
                                 output_path=str(args.plot))
        print(f"Saved {drawn} curve(s) to {args.plot}")


if __name__ == "__main__":
    main()
