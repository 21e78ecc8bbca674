"""
Transition from BMAD planning artifacts to Ralph loop inputs.

Parses epics/stories into a fix plan, copies the specs, records what changed
in them, and renders the loop's operational prompt.
"""

from bmalph.transition.models import (
    Story,
    FixPlanItem,
    TechStack,
    ProjectContext,
    SpecsChange,
    SpecFileMetadata,
    SpecsIndex,
    TransitionResult,
)
from bmalph.transition.sections import extract_section, extract_section_with_info
from bmalph.transition.stories import parse_stories, parse_stories_with_warnings
from bmalph.transition.tech_stack import (
    detect_tech_stack,
    detect_tech_stack_in_document,
    customize_agent_md,
)
from bmalph.transition.fix_plan import (
    generate_fix_plan,
    parse_fix_plan,
    has_fix_plan_progress,
    merge_fix_plan,
    merge_fix_plan_items,
)
from bmalph.transition.changelog import diff_specs, format_changelog, snapshot_specs
from bmalph.transition.specs_index import generate_specs_index, format_specs_index_md
from bmalph.transition.context import (
    extract_project_context,
    generate_project_context_md,
    generate_prompt,
)
from bmalph.transition.artifacts import find_artifacts_dir, find_stories_file, validate_artifacts
from bmalph.transition.orchestration import (
    run_transition,
    TransitionError,
    ArtifactsNotFoundError,
    StoriesFileNotFoundError,
    StoriesFileUnreadableError,
    NoStoriesParsedError,
)

__all__ = [
    "Story",
    "FixPlanItem",
    "TechStack",
    "ProjectContext",
    "SpecsChange",
    "SpecFileMetadata",
    "SpecsIndex",
    "TransitionResult",
    "extract_section",
    "extract_section_with_info",
    "parse_stories",
    "parse_stories_with_warnings",
    "detect_tech_stack",
    "detect_tech_stack_in_document",
    "customize_agent_md",
    "generate_fix_plan",
    "parse_fix_plan",
    "has_fix_plan_progress",
    "merge_fix_plan",
    "merge_fix_plan_items",
    "diff_specs",
    "format_changelog",
    "snapshot_specs",
    "generate_specs_index",
    "format_specs_index_md",
    "extract_project_context",
    "generate_project_context_md",
    "generate_prompt",
    "find_artifacts_dir",
    "find_stories_file",
    "validate_artifacts",
    "run_transition",
    "TransitionError",
    "ArtifactsNotFoundError",
    "StoriesFileNotFoundError",
    "StoriesFileUnreadableError",
    "NoStoriesParsedError",
]
