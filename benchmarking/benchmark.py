"""
Benchmark the escape-time renderer (full-frame vs tiled engines).

Usage examples:
  python -m benchmarking.benchmark --res 512x512,1280x720 --max-iter 400 --runs 5

  python -m benchmarking.benchmark --engines tile --tile-size 64x64 --workers 8 \
      --variant parameterized --constant 0.285
"""

import os
import csv
import time
import logging
import argparse
import platform
from typing import List, Tuple, Optional

from fractals.base import RenderConfig, Standard, Parameterized
from fractals.complex import Complex
from fractals.config import validate_config
from rendering.core import FractalRenderer
from rendering.engines.base import BaseRenderEngine
from rendering.engines.full_frame import FullFrameEngine
from rendering.engines.tile import TileEngine
from rendering.executor import RenderExecutor

logger = logging.getLogger(__name__)

# --- Helpers -----------------------------------------------------------------

def parse_resolution_list(res_str: str) -> List[Tuple[int, int]]:
    """
    Parse resolutions like "800x600,1280x720".
    """
    if not res_str:
        return [(512, 512), (1280, 720), (1920, 1080)]
    out: List[Tuple[int, int]] = []
    for token in res_str.split(','):
        token = token.strip().lower()
        if not token:
            continue
        w, h = token.split('x')
        out.append((int(w), int(h)))
    return out

def parse_tile_size(token: str) -> Tuple[int, int]:
    """
    Parse tile size like "128x128".
    """
    token = token.strip().lower().replace(' ', '')
    w, h = token.split('x')
    return int(w), int(h)

def cpu_summary() -> str:
    return platform.processor() or platform.machine() or "Unknown CPU"

# --- Benchmark core ----------------------------------------------------------

def make_engine(tag: str, tile_size: Tuple[int, int]) -> BaseRenderEngine:
    tag = tag.lower().strip()
    if tag == "full":
        return FullFrameEngine()
    if tag == "tile":
        return TileEngine(tile_w=tile_size[0], tile_h=tile_size[1])
    raise ValueError(f"Unknown engine tag: {tag}")

def benchmark_combo(engine: BaseRenderEngine,
                    config: RenderConfig,
                    width: int,
                    height: int,
                    runs: int,
                    workers: Optional[int] = None,
                    warmup: int = 1) -> Tuple[float, float]:
    """
    Runs warmups (not timed, they also trigger numba compilation), then
    'runs' timed renders. Returns (avg_time_seconds, fps).
    """
    renderer = FractalRenderer(width, height, config,
                               engine=engine,
                               executor=RenderExecutor(max_workers=workers))

    for _ in range(max(0, warmup)):
        renderer.render()

    times = []
    for _ in range(max(1, runs)):
        t0 = time.perf_counter()
        renderer.render()
        times.append(time.perf_counter() - t0)

    avg = sum(times) / len(times)
    fps = 1.0 / avg if avg > 0 else 0.0
    return avg, fps

# --- CSV writer --------------------------------------------------------------

def write_csv_row(writer,
                  resolution: Tuple[int, int],
                  rows_by_engine: List[Tuple[str, Optional[Tuple[float, float]]]]):
    """
    rows_by_engine: list of (engine_label, (avg, fps)); the tuple is None if the run failed
    """
    base = [f"{resolution[0]}x{resolution[1]}"]
    for _, result in rows_by_engine:
        if result is None:
            base.extend(["n/a", "n/a"])
        else:
            avg, fps = result
            base.extend([f"{avg:.4f}", f"{fps:.2f}"])
    writer.writerow(base)

# --- CLI ---------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> None:
    p = argparse.ArgumentParser(description="Benchmark the escape-time renderer.")
    p.add_argument("--engines", type=str, default="full,tile",
                   help="Comma separated list: full,tile")
    p.add_argument("--res", type=str, default="512x512,1280x720,1920x1080",
                   help="Comma separated WxH list")
    p.add_argument("--max-iter", type=int, default=400)
    p.add_argument("--escape-radius", type=float, default=20.0)
    p.add_argument("--variant", type=str, default="standard", choices=["standard", "parameterized"])
    p.add_argument("--constant", type=float, default=0.285,
                   help="Parameterized constant c, used as c + c*i")
    p.add_argument("--runs", type=int, default=3)
    p.add_argument("--warmup", type=int, default=1)
    p.add_argument("--tile-size", type=str, default="128x128")
    p.add_argument("--workers", type=int, default=None)
    p.add_argument("--csv", type=str, default="benchmark_results.csv")
    args = p.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    engine_tags = [t.strip().lower() for t in args.engines.split(",") if t.strip()]
    resolutions = parse_resolution_list(args.res)
    tile_size = parse_tile_size(args.tile_size)

    variant = Standard() if args.variant == "standard" else Parameterized(Complex.of(args.constant))
    config = RenderConfig(max_iterations=args.max_iter,
                          escape_radius=args.escape_radius,
                          variant=variant)
    validate_config(config)

    cpu_info = cpu_summary()
    print("=== Hardware Summary ===")
    print("CPU:", cpu_info)
    print()

    if os.path.exists(args.csv):
        os.remove(args.csv)
    with open(args.csv, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["Hardware Summary"])
        writer.writerow(["CPU", cpu_info])
        writer.writerow([])

        header = ["Resolution"]
        for tag in engine_tags:
            header.extend([f"{tag} Time (s)", f"{tag} FPS"])
        writer.writerow(header)

        print(f"Settings: max_iter={args.max_iter}, escape_radius={args.escape_radius}, "
              f"variant={args.variant}, tile={tile_size}")
        print()

        for (w, h) in resolutions:
            print(f"=== {w}x{h} ===")
            row_results: List[Tuple[str, Optional[Tuple[float, float]]]] = []
            for tag in engine_tags:
                try:
                    avg, fps = benchmark_combo(
                        engine=make_engine(tag, tile_size),
                        config=config,
                        width=w,
                        height=h,
                        runs=args.runs,
                        workers=args.workers,
                        warmup=args.warmup,
                    )
                    print(f"{tag:>12}  avg={avg:.4f}s  fps={fps:.2f}")
                    row_results.append((tag, (avg, fps)))
                except Exception as e:
                    logger.exception("Benchmark failed for %s at %dx%d", tag, w, h)
                    print(f"{tag:>12}  FAIL: {e}")
                    row_results.append((tag, None))
            write_csv_row(writer, (w, h), row_results)
            print()

    print(f"Benchmark results saved to {args.csv}")

if __name__ == "__main__":
    main()
