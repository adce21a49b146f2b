"""Command-line entry point for scanning Java sources."""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import networkx as nx
from dotenv import load_dotenv

from .config import StructureMapperConfig
from .logger import get_logger, set_log_level
from .project_scanner import ProjectScanner

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def expand_paths(paths: Sequence[str], suffix: str = ".java") -> List[str]:
    """Files are kept as given; directories expand to their sources in sorted order."""
    files = []
    for raw_path in paths:
        path = Path(raw_path)
        if path.is_dir():
            files.extend(str(p) for p in sorted(path.rglob(f"*{suffix}")) if p.is_file())
        else:
            files.append(raw_path)
    return files


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="structure-mapper",
        description="Map classes, relationships and usages of a Java codebase",
    )
    parser.add_argument("--config", "-c", help="JSON configuration file")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, help="Logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="Emit the project structure model")
    scan.add_argument("paths", nargs="+", help="Source files or directories")
    scan.add_argument("--output", "-o", help="Write to this file instead of stdout")
    scan.add_argument("--format", choices=["json", "graphml"], default="json")

    usages = subparsers.add_parser("usages", help="Usage examples of a method")
    usages.add_argument("paths", nargs="+")
    usages.add_argument("--class", dest="class_name", required=True)
    usages.add_argument("--method", required=True)

    class_usages = subparsers.add_parser("class-usages", help="How a class is instantiated or injected")
    class_usages.add_argument("paths", nargs="+")
    class_usages.add_argument("--class", dest="class_name", required=True)

    stats = subparsers.add_parser("stats", help="Usage statistics of a method")
    stats.add_argument("paths", nargs="+")
    stats.add_argument("--class", dest="class_name", required=True)
    stats.add_argument("--method", required=True)

    summary = subparsers.add_parser("summary", help="Architecture layer summary")
    summary.add_argument("paths", nargs="+")

    return parser


def _emit(text: str, output: Optional[str] = None):
    if output:
        Path(output).write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text + "\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    config = StructureMapperConfig.from_file(args.config) if args.config else StructureMapperConfig()
    if args.log_level:
        config.log_level = args.log_level
    set_log_level(config.log_level)

    scanner = ProjectScanner(config)
    files = expand_paths(args.paths, config.java_file_suffix)
    if not files:
        get_logger().warning("No source files found")
    structure = scanner.scan(files)

    if args.command == "scan":
        if args.format == "graphml":
            graph = scanner.get_graph()
            _emit("\n".join(nx.generate_graphml(graph)), args.output)
        else:
            _emit(structure.to_json(), args.output)
    elif args.command == "usages":
        examples = scanner.find_method_usages(args.class_name, args.method)
        _emit(json.dumps([e.to_dict() for e in examples], indent=2, ensure_ascii=False))
    elif args.command == "class-usages":
        examples = scanner.find_class_usage_patterns(args.class_name)
        _emit(json.dumps([e.to_dict() for e in examples], indent=2, ensure_ascii=False))
    elif args.command == "stats":
        stats = scanner.get_method_usage_stats(args.class_name, args.method)
        _emit(json.dumps(stats.to_dict(), indent=2))
    elif args.command == "summary":
        _emit(json.dumps(scanner.summarize(), indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())
