# squash_BenchmarkReporter/main.py
from __future__ import annotations
from pathlib import Path
import argparse
import logging
import sys
import yaml

from squash_BenchmarkReporter.core.context import BenchmarkContext
from squash_BenchmarkReporter.core.errors import ConfigError, LoadError
from squash_BenchmarkReporter.core.page import build_error_page, write_page
from squash_BenchmarkReporter.core.pipeline import run_pipeline
from squash_BenchmarkReporter.loaders import json_loader

DEFAULT_CONFIG = Path(__file__).resolve().parent / "config.yaml"

def load_config(cfg_path: Path) -> dict:
    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read config {cfg_path}: {e}") from e
    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"config {cfg_path} must be a mapping")
    return cfg

def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Render squash benchmark results as an HTML report.")
    ap.add_argument("--config", type=Path, default=DEFAULT_CONFIG, help="YAML config (default: %(default)s)")
    ap.add_argument("--source", help="benchmark data.json path or URL (overrides input.source)")
    ap.add_argument("--out", type=Path, help="output folder (overrides output.root)")
    return ap.parse_args(argv)

def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    # ---------- config ----------
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        print(f"[ERROR] {e.log_message()}")
        return 2
    # an empty section in the yaml loads as None
    cfg["input"] = cfg.get("input") or {}
    cfg["output"] = cfg.get("output") or {}
    if args.source:
        cfg["input"]["source"] = args.source
    if args.out:
        cfg["output"]["root"] = str(args.out)

    log_cfg = cfg.get("logging", {}) or {}
    logging.basicConfig(level=str(log_cfg.get("level", "INFO")).upper(),
                        format="%(levelname)s %(name)s: %(message)s")
    verbose = bool(log_cfg.get("verbose", True))

    source = str(cfg["input"].get("source", "data.json"))
    out_root = Path(cfg["output"].get("root", "out")).resolve()
    if verbose:
        print(f"[cfg] source={source}")
        print(f"[cfg] output={out_root}")

    # ---------- load ----------
    try:
        datasets = json_loader.load(source, cfg)
    except LoadError as e:
        print(f"[ERROR] {e.log_message()}")
        page_name = str(cfg["output"].get("page_name", "index.html"))
        write_page(build_error_page(e.user_message, cfg), out_root / page_name)
        return 1
    if verbose:
        print(f"[load] {len(datasets)} dataset(s): {', '.join(datasets) or '-'}")

    # ---------- render ----------
    context = BenchmarkContext.from_datasets(source, datasets)
    try:
        run_pipeline(context, cfg, out_root)
    except ConfigError as e:
        print(f"[ERROR] {e.log_message()}")
        return 2
    finally:
        context.teardown()
    return 0

if __name__ == "__main__":
    sys.exit(main())
