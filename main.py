"""
Lameness - command line interface to lameness analyzers and classifiers.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Any, Dict, List, Optional

import lib.utils as utils
from internal.config.manager import ConfigManager
from internal.services.lameness import LamenessService
from lib.lameness import ANALYZERS, ClassifierKey, LamenessError
from lib.logging_utils import initLogging

# Configure basic logging first
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.WARNING)
logger = logging.getLogger(__name__)


class LamenessApp:
    """Command line application coordinating config, logging and lameness service."""

    def __init__(self, configPath: str = "config.toml", config_dirs: Optional[List[str]] = None):
        """Initialize application with all components."""
        self.configManager = ConfigManager(configPath, config_dirs)

        initLogging(self.configManager.getLoggingConfig())

        self.service = LamenessService.fromConfigManager(self.configManager)

    def check(self, text: str, validations: List[str], options: Dict[str, Any]) -> int:
        """Run analyzers on text, print violations and return exit code"""
        failed = False
        for validation in validations:
            messages = self.service.analyze(text, validation, options)
            if messages:
                failed = True
                for message in messages:
                    print(f"{validation}: {message}")

        if not failed:
            print("OK")
        return 1 if failed else 0

    def reportLame(self, text: str, entity: str, field: Optional[str]) -> int:
        trained = self.service.reportLame(text, entity, field)
        print("trained" if trained else "already lame, skipped")
        return 0

    def reportUnlame(self, text: str, entity: str, field: Optional[str]) -> int:
        self.service.reportUnlame(text, entity, field)
        print("trained")
        return 0

    def isLame(self, text: str, entity: str, field: Optional[str]) -> int:
        """Print classification, exit code 1 means lame"""
        isLame = self.service.isLame(text, entity, field)
        print("lame" if isLame else "not lame")
        return 1 if isLame else 0

    def stats(self, entity: Optional[str], field: Optional[str]) -> int:
        """Print stats of one classifier, or of all classifiers of the entity (or all)"""
        if entity is not None and field is not None:
            if not self.service.hasClassifier(entity, field):
                print(f"No classifier for {entity}/{field}", file=sys.stderr)
                return 1
            keys = [ClassifierKey(entity, field)]
        else:
            keys = self.service.listClassifiers(entity)

        for key in keys:
            stats = self.service.getModelStats(key.entityType, key.fieldName)
            print(
                utils.jsonDumps(
                    {
                        "key": str(key),
                        "lameDocuments": stats.lameDocuments,
                        "unlameDocuments": stats.unlameDocuments,
                        "totalTokens": stats.totalTokens,
                        "vocabularySize": stats.vocabularySize,
                    }
                )
            )
        return 0


def _parseOptionValue(value: str) -> Any:
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    for converter in (int, float):
        try:
            return converter(value)
        except ValueError:
            pass
    return value


def parseOptions(rawOptions: Optional[List[str]]) -> Dict[str, Any]:
    """
    Parse analyzer options given as key=value

    Integer, float and boolean values are converted, everything else is kept as string.

    Raises:
        ValueError: If an option has no "="
    """
    options: Dict[str, Any] = {}
    for rawOption in rawOptions or []:
        key, sep, value = rawOption.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid option '{rawOption}', expected key=value")

        options[key.strip()] = _parseOptionValue(value)
    return options


def readText(text: str) -> str:
    """Read text from stdin if it is "-" """
    if text == "-":
        return sys.stdin.read()
    return text


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Lameness - detect shouting and exclamation spam in text, dood!")
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file (default: config.toml)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times), dood!",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit, dood!",
    )

    subparsers = parser.add_subparsers(dest="command")

    checkParser = subparsers.add_parser("check", help="Run heuristic analyzers on text")
    checkParser.add_argument("text", help='Text to check, "-" to read from stdin')
    checkParser.add_argument(
        "--validation",
        action="append",
        choices=sorted(ANALYZERS.keys()),
        help="Analyzer to run (can be specified multiple times, default: all)",
    )
    checkParser.add_argument(
        "-o",
        "--option",
        action="append",
        help="Analyzer option as key=value, e.g. maximum_together=2 (can be specified multiple times)",
    )

    for command, helpText in (
        ("report-lame", "Train classifier with lame text"),
        ("report-unlame", "Train classifier with unlame text"),
        ("is-lame", "Classify text, exit code 1 if lame"),
    ):
        commandParser = subparsers.add_parser(command, help=helpText)
        commandParser.add_argument("text", help='Text, "-" to read from stdin')
        commandParser.add_argument("--entity", required=True, help="Entity type, e.g. Comment")
        commandParser.add_argument("--field", help="Field name, e.g. body")

    statsParser = subparsers.add_parser("stats", help="Print classifier statistics")
    statsParser.add_argument("--entity", help="Entity type to filter by")
    statsParser.add_argument("--field", help="Field name (requires --entity)")

    args = parser.parse_args(argv)
    args.config = os.path.abspath(args.config)

    if args.config_dir:
        args.config_dir = [os.path.abspath(dir_path) for dir_path in args.config_dir]

    if args.command is None and not args.print_config:
        parser.error("command is required, dood!")

    return args


def prettyPrintConfig(config_manager: ConfigManager):
    """Pretty-print the loaded configuration, dood!"""
    print("=== Lameness Configuration ===")
    print()
    print(utils.jsonDumps(config_manager.config, indent=2))
    print()
    print("=== Configuration loaded successfully, dood! ===")


def run(args) -> int:
    """Run parsed command and return exit code"""
    if args.print_config:
        prettyPrintConfig(ConfigManager(args.config, args.config_dir))
        return 0

    app = LamenessApp(configPath=args.config, config_dirs=args.config_dir)

    match args.command:
        case "check":
            validations = args.validation or ["validate_capitalization_of", "validate_exclamation_marks_of"]
            return app.check(readText(args.text), validations, parseOptions(args.option))
        case "report-lame":
            return app.reportLame(readText(args.text), args.entity, args.field)
        case "report-unlame":
            return app.reportUnlame(readText(args.text), args.entity, args.field)
        case "is-lame":
            return app.isLame(readText(args.text), args.entity, args.field)
        case "stats":
            return app.stats(args.entity, args.field)
        case _:
            raise ValueError(f"Unknown command: {args.command}")


def main():
    """Main entry point."""
    args = parse_arguments()

    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        logger.info("Stopped by user")
    except (LamenessError, ValueError) as e:
        logger.error(f"Lameness command failed: {e}")
        sys.exit(2)


if __name__ == "__main__":
    main()
