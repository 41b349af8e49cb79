#!/usr/bin/env python3
"""
Care Node CLI

Command-line interface for running care-node scenarios.

Commands:
- simulate: Replay a JSON scenario through a node and show the delegation decision
- critical-info: Show the critical information class for a competence
- config: Show the effective configuration

Scenario file:
    {
      "node": {"node_address": "10.1.1.1", "competence": "nurse"},
      "tiers": ["doctor", "nurse", "caregiver"],
      "min_trust": null,
      "rounds": [
        [{"ip": "10.1.1.2", "competence": "doctor", "interests": ["cardio"], "trust": 0.9}]
      ],
      "calls": [{"ip": "10.1.1.3", "critical_data": "InfoB", "priority": 2}],
      "closed_calls": []
    }
"""

import sys
import json
import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError

from ...config import NodeConfig, load_config
from ...core.errors import MeshError
from ...core.profile import get_critical_info
from ..node import Beacon, CareNode


class InterceptHandler(logging.Handler):
    """Route stdlib logging records into loguru."""

    def emit(self, record: logging.LogRecord):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller that issued the logging call
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure loguru sinks and capture stdlib logging.

    Args:
        level: Minimum log level
        log_file: Optional log file (rotated daily, kept 7 days)

    Raises:
        ValueError: If level is not a known loguru level (sinks are left untouched)
    """
    logger.level(level)

    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        logger.add(log_file, rotation="1 day", retention="7 days", level=level)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


class CareNodeCLI:
    """
    CLI for care-node scenarios.
    """

    def __init__(self, config: Optional[NodeConfig] = None):
        self.config = config

    def _load_config(self) -> NodeConfig:
        if self.config is None:
            self.config = load_config()
        return self.config

    @staticmethod
    def _read_scenario(path: str) -> Dict[str, Any]:
        with open(Path(path), "r", encoding="utf-8") as f:
            scenario = json.load(f)
        if not isinstance(scenario, dict):
            raise ValueError("Scenario must be a JSON object")
        return scenario

    def build_node(self, scenario: Dict[str, Any]) -> CareNode:
        """Build the scenario's node from configuration plus overrides."""
        config = self._load_config()
        overrides = scenario.get("node", {})
        if overrides:
            config = NodeConfig(**{**config.model_dump(), **overrides})
        return CareNode.from_config(config)

    def simulate(self, args) -> int:
        """Replay a scenario."""
        scenario = self._read_scenario(args.scenario)
        node = self.build_node(scenario)

        print(f"🏥 Node {node.address} ({node.profile.competence}, {node.profile.status.value})")
        print("=" * 60)

        for index, beacons in enumerate(scenario.get("rounds", []), start=1):
            heard = [Beacon(**beacon) for beacon in beacons]
            pruned = node.process_round(heard)
            print(
                f"Round {index}: heard {len(heard)}, "
                f"neighbors {node.neighbors.count()}, pruned {len(pruned)}"
            )

        for call in scenario.get("calls", []):
            node.on_attending_call(call["ip"], call["critical_data"], call["priority"])
        for ip in scenario.get("closed_calls", []):
            node.on_attending_closed(ip)

        self._print_neighbors(node)
        self._print_calls(node)

        tiers = scenario.get("tiers") or node.selector.default_tiers
        delegate = node.choose_delegate(tiers, scenario.get("min_trust"))
        print(f"\n✅ Delegate for tiers {list(tiers)}: {delegate}")
        print(f"   Critical info: {node.critical_info_for(delegate)}")

        if args.stats:
            print("\n📊 Statistics:")
            print(json.dumps(node.get_stats(), indent=2, default=str))

        return 0

    @staticmethod
    def _print_neighbors(node: CareNode):
        print(f"\n{'Neighbor':<18} {'Competence':<12} {'Trust':<8} {'Alive'}")
        print("-" * 60)
        for record in node.neighbors.records():
            print(
                f"{str(record.ip):<18} {record.competence:<12} "
                f"{record.trust:<8.3f} {record.alive}"
            )

    @staticmethod
    def _print_calls(node: CareNode):
        print(f"\nPending attending calls: {node.attending.count()}")
        for call in node.attending.calls():
            print(f"  {str(call.ip):<18} priority={call.priority} data={call.critical_data}")

    def critical_info(self, args) -> int:
        print(get_critical_info(args.competence))
        return 0

    def show_config(self, args) -> int:
        print(self._load_config().model_dump_json(indent=2))
        return 0

    def create_parser(self) -> argparse.ArgumentParser:
        """Create argument parser."""
        parser = argparse.ArgumentParser(
            description="Care Node CLI",
            formatter_class=argparse.RawDescriptionHelpFormatter
        )
        parser.add_argument("--log-level", default=None, help="Log level (default: MEDMESH_LOG_LEVEL)")
        parser.add_argument("--log-file", default=None, help="Also log to this file")

        subparsers = parser.add_subparsers(dest="command", help="Commands")

        simulate_parser = subparsers.add_parser("simulate", help="Replay a scenario file")
        simulate_parser.add_argument("scenario", help="Scenario JSON file")
        simulate_parser.add_argument("--stats", action="store_true", help="Print node statistics")

        info_parser = subparsers.add_parser("critical-info", help="Critical info for a competence")
        info_parser.add_argument("competence", help="Competence tag")

        subparsers.add_parser("config", help="Show effective configuration")

        return parser

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run CLI (entry point)."""
        parser = self.create_parser()
        args = parser.parse_args(argv)

        if not args.command:
            parser.print_help()
            return 1

        try:
            configure_logging(args.log_level or self._load_config().log_level, args.log_file)

            if args.command == "simulate":
                return self.simulate(args)
            elif args.command == "critical-info":
                return self.critical_info(args)
            elif args.command == "config":
                return self.show_config(args)
        except MeshError as e:
            logger.error(f"❌ {e}")
            return 1
        except (OSError, ValueError, KeyError, TypeError, ValidationError) as e:
            logger.error(f"❌ Invalid scenario or configuration: {e}")
            return 1

        print("❌ Unknown command. Use --help for usage.")
        return 1


def main():
    """CLI entry point."""
    cli = CareNodeCLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
