#!/usr/bin/env python3
"""bmalph CLI entrypoint."""

import sys
import argparse
import logging
from pathlib import Path

from bmalph.commands import transition as cmd_transition_module


def get_project_dir(args) -> Path:
    """Resolve the project directory from --project-dir or the cwd."""
    project_dir = Path(args.project_dir).resolve() if args.project_dir else Path.cwd()
    if not project_dir.is_dir():
        print(f"ERROR: Project directory not found: {project_dir}", file=sys.stderr)
        sys.exit(2)
    return project_dir


def cmd_transition(args):
    return cmd_transition_module.cmd_transition(args, get_project_dir(args))


def main(argv=None):
    parser = argparse.ArgumentParser(prog='bmalph', description='BMAD to Ralph transition CLI')
    parser.add_argument('--project-dir', '-C', help='Project directory (defaults to the current directory)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Show debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # bmalph transition
    p_transition = subparsers.add_parser('transition', help='Generate Ralph inputs from BMAD artifacts')
    p_transition.set_defaults(func=cmd_transition)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
