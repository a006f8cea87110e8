from __future__ import annotations

import argparse
from datetime import datetime, timezone
import json
from pathlib import Path
import subprocess

import matplotlib

from penguin_paradox.config import PenguinPaths, ReportConfig, load_report_config
from penguin_paradox.logging_utils import get_logger, set_package_level
from penguin_paradox.renderers import RENDERER_CHOICES
from penguin_paradox.report import generate_paradox_report

logger = get_logger(__name__)


def _git_commit_hash(cwd: Path) -> str | None:
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            cwd=cwd,
            check=True,
            capture_output=True,
            text=True,
        )
    except Exception:
        return None
    value = result.stdout.strip()
    return value or None


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render the Simpson's Paradox walk-through on the Palmer penguins dataset."
    )
    parser.add_argument("--output-dir", type=str, default=None)
    parser.add_argument("--report-version", type=str, default="1.0.0")
    parser.add_argument("--csv", type=str, default=None, help="Local CSV with the palmerpenguins columns.")
    parser.add_argument("--synthetic", action="store_true", help="Use the offline synthetic table.")
    parser.add_argument("--renderer", choices=list(RENDERER_CHOICES), default=None)
    parser.add_argument("--config", type=str, default=None, help="Optional YAML with figure text overrides.")
    parser.add_argument("--log-level", type=str, default="INFO")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> dict[str, object]:
    args = parse_args(argv)
    set_package_level(args.log_level)
    matplotlib.use("Agg")

    paths = PenguinPaths.default()
    config = load_report_config(args.config) if args.config else ReportConfig()

    if args.output_dir:
        output_dir = Path(args.output_dir).resolve()
    else:
        output_dir = config.output_dir or paths.reports_dir

    report_version = args.report_version
    commit_hash = _git_commit_hash(paths.project_root)
    if commit_hash is not None:
        report_version = f"{report_version}+{commit_hash[:8]}"

    result = generate_paradox_report(
        output_dir=output_dir,
        report_version=report_version,
        csv_path=Path(args.csv) if args.csv else None,
        force_synthetic=bool(args.synthetic),
        renderer=args.renderer or config.renderer,
        text=config.figure_text,
    )

    manifest: dict[str, object] = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "report_version": report_version,
        "output_dir": str(output_dir),
        "artifacts": result["artifacts"],
        "reversal_detected": result["report"]["reversal_detected"],
    }
    manifest_path = output_dir / "manifest.json"
    manifest_path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    logger.info("[DONE] Simpson's Paradox report completed.")
    print(json.dumps(manifest, indent=2))
    return manifest


if __name__ == "__main__":
    main()
