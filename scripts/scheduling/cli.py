"""
CLI interface for the scheduling engine.

Usage:
    python -m scripts.scheduling.cli critical-path --data-dir data/
    python -m scripts.scheduling.cli check-dependency --source a --target b
    python -m scripts.scheduling.cli wbs
"""

import argparse
import sys
from pathlib import Path

from src.config.settings import settings
from src.utils.logger import configure_logging
from .analysis.critical_path import (
    print_critical_path_report,
    summarize_critical_path,
    write_critical_path_tables,
)
from .cpm.engine import CPMEngine
from .cpm.errors import DataIntegrityError, SchedulingError
from .cpm.gateway import add_dependency
from .cpm.hierarchy import depth_of, hierarchical_order
from .cpm.models import InsufficientData
from .data_loader import load_task_graph

logger = configure_logging('scripts.scheduling')


def cmd_critical_path(args) -> int:
    graph = load_task_graph(args.data_dir, verbose=args.verbose)

    try:
        result = CPMEngine(graph).run()
    except DataIntegrityError as e:
        logger.error("Schedule data is inconsistent: %s", e)
        return 2

    if isinstance(result, InsufficientData):
        print(f"No critical path: {result.reason}")
        return 0

    print_critical_path_report(summarize_critical_path(result, args.near_critical_days))

    if args.output_dir:
        task_path, edge_path = write_critical_path_tables(result, args.output_dir)
        logger.info("Wrote %s and %s", task_path, edge_path)
    return 0


def cmd_check_dependency(args) -> int:
    graph = load_task_graph(args.data_dir)
    try:
        add_dependency(graph, args.source, args.target)
    except SchedulingError as e:
        print(f"Rejected: {e.message}")
        return 1
    print(f"OK: {args.target} may depend on {args.source}")
    return 0


def cmd_wbs(args) -> int:
    graph = load_task_graph(args.data_dir)
    for task in hierarchical_order(graph):
        indent = '  ' * depth_of(task.task_id, graph)
        marker = '[G]' if task.is_group else '[M]' if task.is_milestone else '   '
        print(f"{indent}{marker} {task.task_id}: {task.name} ({task.duration}d, {task.progress}%)")
    return 0


def add_common_options(parser: argparse.ArgumentParser, defaults: bool = True) -> None:
    """
    Options accepted both before and after the subcommand.

    Subcommand copies use SUPPRESS defaults so they only override the
    top-level value when given.
    """
    data_dir_default = settings.DATA_DIR if defaults else argparse.SUPPRESS
    verbose_default = False if defaults else argparse.SUPPRESS
    parser.add_argument('--data-dir', type=Path, default=data_dir_default,
                        help='Directory with tasks.csv and task_dependencies.csv')
    parser.add_argument('-v', '--verbose', action='store_true', default=verbose_default,
                        help='Log graph statistics')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Project scheduling engine')
    add_common_options(parser)
    common = argparse.ArgumentParser(add_help=False)
    add_common_options(common, defaults=False)
    sub = parser.add_subparsers(dest='command', required=True)

    cp = sub.add_parser('critical-path', parents=[common],
                        help='Compute and report the critical path')
    cp.add_argument('--near-critical-days', type=int, default=None,
                    help='Float threshold for near-critical tasks')
    cp.add_argument('--output-dir', type=Path, default=None,
                    help='Also write critical_path.csv and critical_path_edges.csv here')
    cp.set_defaults(func=cmd_critical_path)

    dep = sub.add_parser('check-dependency', parents=[common],
                         help='Check whether a new dependency is allowed')
    dep.add_argument('--source', required=True, help='Predecessor task id')
    dep.add_argument('--target', required=True, help='Dependent task id')
    dep.set_defaults(func=cmd_check_dependency)

    wbs = sub.add_parser('wbs', parents=[common], help='Print the task hierarchy')
    wbs.set_defaults(func=cmd_wbs)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
