# Copyright (c) 2025 John Brosnihan
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Command-line interface for the component hierarchy viewer.
"""

import argparse
import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, Any, List, Optional

from component_hierarchy import __version__
from component_hierarchy.presentation import (
    DEFAULT_CONTAINER_MARKER,
    PresentationOptions,
    present,
)
from component_hierarchy.tree_report import (
    OUTPUT_FORMATS,
    TreeReportError,
    count_nodes,
    write_tree_report,
)
from component_hierarchy.tree_walker import (
    ComponentTreeError,
    WalkOptions,
    build_component_tree,
)
from component_hierarchy.usage_detector import DEFAULT_MARKUP_LIBRARY


DEFAULT_CONFIG_FILE = "component-hierarchy.config.json"

# Config key -> accepted types
CONFIG_SCHEMA = {
    'hide_containers': (bool,),
    'hide_third_party': (bool,),
    'module_dir': (str,),
    'scan_depth': (int,),
    'container_marker': (str,),
    'markup_library': (str,),
    'format': (str,),
}


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""
    pass


def get_repository_root() -> Optional[Path]:
    """
    Get the repository root directory using git.

    Returns:
        Path to repository root, or None if not in a git repository
    """
    try:
        result = subprocess.run(
            ['git', 'rev-parse', '--show-toplevel'],
            capture_output=True,
            text=True,
            check=True
        )
        return Path(result.stdout.strip()).resolve()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


def validate_config(config: Dict[str, Any]) -> None:
    """
    Check configuration keys and value types.

    Raises:
        ConfigurationError: On unknown keys or wrongly typed values
    """
    for key, value in config.items():
        if key not in CONFIG_SCHEMA:
            raise ConfigurationError(f"Unknown configuration key: {key}")
        expected = CONFIG_SCHEMA[key]
        # bool is an int subclass; reject it where a number is expected
        if isinstance(value, bool) and bool not in expected:
            raise ConfigurationError(f"Invalid value for {key}: {value!r}")
        if not isinstance(value, expected):
            raise ConfigurationError(f"Invalid value for {key}: {value!r}")

    if config.get('format') is not None and config['format'] not in OUTPUT_FORMATS:
        raise ConfigurationError(
            f"Invalid value for format: {config['format']!r} "
            f"(expected one of: {', '.join(OUTPUT_FORMATS)})"
        )


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from file.

    Args:
        config_path: Path to configuration file. If None, tries default location.

    Returns:
        Configuration dictionary

    Raises:
        ConfigurationError: If config file is invalid or user-specified file not found
    """
    user_specified = config_path is not None

    if config_path is None:
        repo_root = get_repository_root()
        if repo_root is not None:
            config_path = str(repo_root / DEFAULT_CONFIG_FILE)
        else:
            config_path = DEFAULT_CONFIG_FILE

    if not os.path.exists(config_path):
        if user_specified:
            raise ConfigurationError(f"Configuration file not found: {config_path}")
        return {}

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file {config_path}: {e}")
    except IOError as e:
        raise ConfigurationError(f"Error reading config file {config_path}: {e}")

    if not isinstance(config, dict):
        raise ConfigurationError("Configuration file must contain a JSON object")

    validate_config(config)
    return config


def merge_config(file_config: Dict[str, Any], cli_args: argparse.Namespace) -> Dict[str, Any]:
    """
    Merge configuration from file and CLI arguments.
    CLI arguments take precedence over file configuration.

    Args:
        file_config: Configuration loaded from file
        cli_args: Parsed command-line arguments

    Returns:
        Merged configuration dictionary with every key present
    """
    config = file_config.copy()

    # Flags only override when given; their default False means "not set"
    if cli_args.hide_containers:
        config['hide_containers'] = True
    if cli_args.hide_third_party:
        config['hide_third_party'] = True

    if cli_args.module_dir is not None:
        config['module_dir'] = cli_args.module_dir
    if cli_args.scan_depth is not None:
        config['scan_depth'] = cli_args.scan_depth
    if cli_args.format is not None:
        config['format'] = cli_args.format

    config.setdefault('hide_containers', False)
    config.setdefault('hide_third_party', False)
    config.setdefault('module_dir', None)
    config.setdefault('scan_depth', None)
    config.setdefault('container_marker', DEFAULT_CONTAINER_MARKER)
    config.setdefault('markup_library', DEFAULT_MARKUP_LIBRARY)
    config.setdefault('format', 'text')

    return config


def build_walk_options(config: Dict[str, Any]) -> WalkOptions:
    """Translate merged configuration into walker options."""
    module_dir = config['module_dir']
    return WalkOptions(
        scan_depth=config['scan_depth'],
        module_dir=Path(module_dir).resolve() if module_dir else None,
        hide_third_party=config['hide_third_party'],
        markup_library=config['markup_library'],
    )


def build_presentation_options(config: Dict[str, Any]) -> PresentationOptions:
    """Translate merged configuration into presentation options."""
    return PresentationOptions(
        hide_containers=config['hide_containers'],
        container_marker=config['container_marker'],
    )


def run(root: str, config: Dict[str, Any], output: Optional[str] = None, verbose: bool = False) -> int:
    """
    Walk the hierarchy of a root component and write the tree.

    Args:
        root: Path to the root component (extension optional)
        config: Merged configuration dictionary
        output: Output file; None for stdout
        verbose: Report per-file scan errors on stderr

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        result = build_component_tree(Path(root), build_walk_options(config))

        if verbose:
            for error in result.errors:
                print(f"Warning: {error}", file=sys.stderr)

        if not result.has_resolved_children():
            print(f"Error: Could not find any components in {root}", file=sys.stderr)
            return 1

        display = present(result.root, build_presentation_options(config))
        write_tree_report(
            display,
            output_path=Path(output) if output else None,
            output_format=config['format'],
        )

        if verbose:
            print(
                f"Components: {result.node_count} found, {count_nodes(display)} shown, "
                f"{result.unresolved_count} unresolved, {result.cycle_count} cyclic",
                file=sys.stderr
            )

        return 0

    except (ComponentTreeError, TreeReportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 2


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='component-hierarchy',
        usage='%(prog)s [opts] <path/to/rootComponent>',
        description='React component hierarchy viewer.'
    )
    parser.add_argument(
        'root',
        nargs='?',
        help='Root component file (the .js/.jsx extension may be omitted)'
    )
    parser.add_argument(
        '-c', '--hide-containers',
        action='store_true',
        help='Hide redux container components'
    )
    parser.add_argument(
        '-t', '--hide-third-party',
        action='store_true',
        help='Hide third party components'
    )
    parser.add_argument(
        '-m', '--module-dir',
        type=str,
        metavar='DIR',
        help='Path to additional modules not included in the root component directory'
    )
    parser.add_argument(
        '-s', '--scan-depth',
        type=int,
        metavar='DEPTH',
        help='Deepest level of the hierarchy whose files are scanned (minimum 1)'
    )
    parser.add_argument(
        '-f', '--format',
        choices=OUTPUT_FORMATS,
        help='Output format (default: text)'
    )
    parser.add_argument(
        '-o', '--output',
        type=str,
        help='Output file (default: stdout)'
    )
    parser.add_argument(
        '--config',
        type=str,
        help=f'Configuration file path (default: {DEFAULT_CONFIG_FILE})'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Report files that could not be read or parsed'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.root is None:
        parser.print_help()
        sys.exit(1)

    try:
        config = merge_config(load_config(args.config), args)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(run(args.root, config, output=args.output, verbose=args.verbose))


if __name__ == '__main__':
    main()
