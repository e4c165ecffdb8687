"""
Command-line interface for replaying recorded hand frames through mappings.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

import yaml
from rich.console import Console
from rich.table import Table

from handmap.config import MapperConfig
from handmap.core.mapper import GestureMapper
from handmap.presets import PRESET_IDS, get_preset
from handmap.types import FrameObservation

console = Console()


def setup_logging(level: str = "INFO"):
    """Configure logging for the application."""
    formatter = logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)
    root_logger.addHandler(console_handler)

    logging.getLogger('handmap').setLevel(level.upper())


def load_frames(path: Path) -> List[FrameObservation]:
    """
    Load recorded frames from a JSON file.

    Accepts either a list of frames or an object with a "frames" list.
    """
    with open(path, "r") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("frames", [])

    return [FrameObservation.from_dict(frame) for frame in data]


def build_mapper(config: MapperConfig, preset_ids: List[str]) -> GestureMapper:
    """Create a mapper with the given presets registered, ignoring repeats."""
    mapper = GestureMapper(config)
    for preset_id in dict.fromkeys(preset_ids):
        mapper.add_mapping(get_preset(preset_id))
    return mapper


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Replay recorded hand frames through gesture mappings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Replay with the starter presets
  handmap --frames session.json

  # Choose presets explicitly
  handmap --frames session.json --preset rotation-pan --preset wrist-x-detune

  # Use custom configuration
  handmap --frames session.json --config mapper.yaml
        """,
    )

    parser.add_argument(
        "--frames",
        type=Path,
        required=True,
        help="Recorded frames (JSON)",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Configuration file (YAML)",
    )

    parser.add_argument(
        "--preset",
        action="append",
        choices=PRESET_IDS,
        help="Preset mapping to register (repeatable)",
    )

    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (overrides configuration)",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print every emitted value",
    )

    args = parser.parse_args(argv)

    try:
        config = MapperConfig.from_yaml(args.config) if args.config else MapperConfig()
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        return 1

    if args.preset:
        config.presets = args.preset

    setup_logging(args.log_level or config.log_level)

    issues = config.validate()
    if issues:
        console.print("[red]Configuration errors:[/red]")
        for issue in issues:
            console.print(f"  - {issue}")
        return 1

    try:
        frames = load_frames(args.frames)
    except (OSError, ValueError, KeyError, TypeError) as e:
        console.print(f"[red]Error loading frames:[/red] {e}")
        return 1

    mapper = build_mapper(config, config.presets)

    if args.verbose:
        mapper.set_output_callback(
            lambda target, param, value: console.print(f"  {target}.{param} = {value:.4f}")
        )

    console.print(f"\n[bold green]Replaying {len(frames)} frames[/bold green] through {len(mapper)} mappings")

    for frame in frames:
        mapper.process(frame)

    table = Table(title="Final mapping states")
    table.add_column("Mapping", style="cyan")
    table.add_column("Target")
    table.add_column("Raw", justify="right")
    table.add_column("Smoothed", justify="right")
    table.add_column("Output", justify="right", style="green")
    table.add_column("Last update", justify="right")

    states = mapper.get_all_states()
    for mapping in mapper.get_mappings():
        state = states[mapping.id]
        table.add_row(
            mapping.name,
            f"{mapping.output.target_id}.{mapping.output.parameter_name}",
            f"{state.raw_value:.4f}",
            f"{state.smoothed_value:.4f}",
            f"{state.output_value:.4f}",
            f"{state.last_update:g}",
        )

    console.print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
