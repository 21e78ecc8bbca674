"""
bmalph transition - Convert BMAD planning artifacts into Ralph inputs.
"""

import sys
from pathlib import Path

from bmalph.transition.orchestration import TransitionError, run_transition


def cmd_transition(args, project_dir: Path) -> int:
    """Run the transition and report the result."""
    print("Transitioning BMAD artifacts to Ralph format...")

    try:
        result = run_transition(project_dir)
    except TransitionError as e:
        print(f"ERROR: Transition failed: {e}", file=sys.stderr)
        return 1

    print(f"Generated fix_plan.md with {result.stories_count} stories")
    if result.fix_plan_preserved:
        print("Preserved completed stories from the previous fix_plan.md")
    for warning in result.warnings:
        print(f"Warning: {warning}")

    return 0
