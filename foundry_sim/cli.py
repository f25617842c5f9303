"""Command-line interface for crucible scenarios.

Usage:
    python -m foundry_sim.cli run examples/scenarios/iron_copper.yaml
    python -m foundry_sim.cli run scenario.yaml --output-dir out --no-figures
    python -m foundry_sim.cli info
"""

import argparse
import logging
import sys
from pathlib import Path

from foundry_sim import __version__
from foundry_sim.config.simulation_config import create_default_config
from foundry_sim.crucible.casts import list_casts
from foundry_sim.materials.registry import MaterialRegistry, create_default_registry, default_materials_path
from foundry_sim.runners.config import load_output_config
from foundry_sim.runners.orchestration import run_scenario
from foundry_sim.runners.scenario import load_scenario

logger = logging.getLogger(__name__)


def cmd_run(args: argparse.Namespace) -> int:
    """Run a scenario file."""
    try:
        scenario = load_scenario(args.scenario)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Cannot load scenario: {e}")
        return 1

    output_config = load_output_config(scenario.raw)
    if args.output_dir is not None:
        output_config.output_dir = Path(args.output_dir)
    if args.no_figures:
        output_config.enable_figures = False
    if args.quiet:
        output_config.verbosity = 0

    result = run_scenario(scenario, output_config=output_config)

    if scenario.pour is not None and result.alloy is None:
        logger.warning(f"Pour rejected: {result.pour_report.reason.value}")
        return 2
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Display materials, casts and default configuration."""
    registry = (
        MaterialRegistry.from_yaml(args.materials) if args.materials else create_default_registry()
    )
    config = create_default_config()

    print("\n" + "=" * 60)
    print(f"FOUNDRY SIM {__version__}")
    print("=" * 60)

    print(f"\n[Materials] ({args.materials or default_materials_path()})")
    print(f"  {'id':<12} {'name':<12} {'melt C':>8} {'dur s':>6}   W   S   T   D   A")
    for m in registry:
        s = m.stats
        print(
            f"  {m.id:<12} {m.name:<12} {m.melting_point:8.0f} {m.melt_duration:6.1f} "
            f"{s.workability:3.0f} {s.sharpenability:3.0f} {s.toughness:3.0f} "
            f"{s.density:3.0f} {s.arcana:3.0f}"
        )

    print("\n[Casts]")
    for cast in list_casts():
        print(f"  {cast.cast_id:<14} {cast.display_name:<14} {cast.volume:.2f} L")

    print("\n[Defaults]")
    for section, values in config.to_dict().items():
        print(f"  {section}:")
        for key, value in values.items():
            print(f"    {key}: {value}")

    print("\n" + "=" * 60)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Crucible melting and alloy pouring simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run a scenario and write CSVs and figures to its output directory
  python -m foundry_sim.cli run examples/scenarios/iron_copper.yaml

  # Override the output directory, skip figures
  python -m foundry_sim.cli run scenario.yaml --output-dir out --no-figures

  # Show materials, casts and defaults
  python -m foundry_sim.cli info
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    run_parser = subparsers.add_parser("run", help="Run a scenario YAML file")
    run_parser.add_argument("scenario", help="Path to scenario YAML")
    run_parser.add_argument("--output-dir", default=None, help="Override the output directory")
    run_parser.add_argument("--no-figures", action="store_true", help="Skip figure generation")
    run_parser.add_argument("-q", "--quiet", action="store_true", help="Suppress progress output")

    info_parser = subparsers.add_parser("info", help="Display materials, casts and defaults")
    info_parser.add_argument("--materials", default=None, help="Alternative materials YAML")

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "run":
        return cmd_run(args)
    if args.command == "info":
        return cmd_info(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
