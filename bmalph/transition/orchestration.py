"""
The BMAD -> Ralph transition.

Runs every step in order against one project directory and returns a
TransitionResult. Fatal problems (no artifacts, no stories file, no stories)
raise before anything is written; everything else becomes a warning.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from bmalph.lib.config import resolve_project_name
from bmalph.lib.constants import (
    AGENT_FILE,
    ARTIFACT_DIR_CANDIDATES,
    FIX_PLAN_FILE,
    PROJECT_CONTEXT_FILE,
    PROJECT_NAME_PLACEHOLDER,
    PROMPT_FILE,
    RALPH_DIR,
    SPECS_CHANGELOG_FILE,
    SPECS_DIR_NAME,
    SPECS_INDEX_FILE,
)
from bmalph.lib.fsutil import atomic_write, replace_dir_with_copy
from bmalph.transition.artifacts import (
    find_artifacts_dir,
    find_stories_file,
    list_artifact_files,
    validate_artifacts,
)
from bmalph.transition.changelog import diff_specs, format_changelog, snapshot_specs
from bmalph.transition.context import (
    detect_truncation,
    extract_project_context,
    generate_project_context_md,
    generate_prompt,
)
from bmalph.transition.fix_plan import (
    detect_orphaned_completed_stories,
    detect_renumbered_stories,
    generate_fix_plan,
    has_fix_plan_progress,
    merge_fix_plan,
    parse_fix_plan,
)
from bmalph.transition.models import FixPlanItem, ProjectContext, Story, TransitionResult
from bmalph.transition.specs_index import format_specs_index_md, generate_specs_index
from bmalph.transition.stories import parse_stories_with_warnings
from bmalph.transition.tech_stack import customize_agent_md, detect_tech_stack_in_document

logger = logging.getLogger(__name__)


class TransitionError(Exception):
    """The transition cannot run. The message says what to do first."""
    pass


class ArtifactsNotFoundError(TransitionError):
    def __init__(self, project_dir: Path):
        self.project_dir = project_dir
        super().__init__(
            f"No BMAD artifacts found in {project_dir} (checked: {', '.join(ARTIFACT_DIR_CANDIDATES)}). "
            f"Run BMAD planning phases first (at minimum: Create PRD, Create Architecture, "
            f"Create Epics and Stories)."
        )


class StoriesFileNotFoundError(TransitionError):
    def __init__(self, artifacts_dir: Path, files: list[str]):
        self.artifacts_dir = artifacts_dir
        self.files = files
        available = ", ".join(files) if files else "(none)"
        super().__init__(
            f"No epics/stories file found in {artifacts_dir}. Available files: {available}. "
            f"Run 'CE' (Create Epics and Stories) first."
        )


class NoStoriesParsedError(TransitionError):
    def __init__(self, stories_file: str):
        self.stories_file = stories_file
        super().__init__(
            f"No stories parsed from {stories_file}. "
            f"Ensure stories follow the format: ### Story N.M: Title"
        )


class StoriesFileUnreadableError(TransitionError):
    def __init__(self, stories_file: str, reason: Exception):
        self.stories_file = stories_file
        self.reason = reason
        super().__init__(
            f"Could not read stories file {stories_file}: {reason}. "
            f"The epics/stories document must be UTF-8 markdown; rename or move other files "
            f"whose names contain 'epic' or 'story'."
        )


def _load_stories(project_dir: Path) -> tuple[Path, list[str], str, list[Story], list[str]]:
    """Steps 1-3: locate and parse the stories. Raises TransitionError."""
    logger.info("Locating BMAD artifacts...")
    artifacts_dir = find_artifacts_dir(project_dir)
    if artifacts_dir is None:
        raise ArtifactsNotFoundError(project_dir)

    files = list_artifact_files(artifacts_dir)
    stories_file = find_stories_file(files)
    if stories_file is None:
        logger.debug(f"Files in artifacts dir: {', '.join(files)}")
        raise StoriesFileNotFoundError(artifacts_dir, files)
    logger.debug(f"Using stories file: {stories_file}")

    logger.info("Parsing stories...")
    try:
        content = (artifacts_dir / stories_file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StoriesFileUnreadableError(stories_file, e) from e
    stories, parse_warnings = parse_stories_with_warnings(content)
    if not stories:
        raise NoStoriesParsedError(stories_file)

    return artifacts_dir, files, stories_file, stories, parse_warnings


def _read_previous_fix_plan(fix_plan_path: Path, warnings: list[str]) -> str | None:
    if not fix_plan_path.exists():
        logger.debug("No existing fix_plan found, starting fresh")
        return None
    try:
        return fix_plan_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        message = f"Could not read existing fix_plan, completion status not preserved: {e}"
        logger.warning(message)
        warnings.append(message)
        return None


def _write_fix_plan(ralph_dir: Path, stories: list[Story], stories_file: str, warnings: list[str]) -> bool:
    """Step 4: generate, merge and write @fix_plan.md. Returns fix_plan_preserved."""
    fix_plan_path = ralph_dir / FIX_PLAN_FILE
    logger.info(f"Generating fix plan for {len(stories)} stories...")
    fix_plan = generate_fix_plan(stories, stories_file)

    previous_items: list[FixPlanItem] = []
    previous = _read_previous_fix_plan(fix_plan_path, warnings)
    if previous is not None:
        previous_items = parse_fix_plan(previous)
        logger.debug(f"Found {sum(i.completed for i in previous_items)} completed stories in existing fix_plan")
        fix_plan = merge_fix_plan(fix_plan, previous)

    for message in (
        detect_orphaned_completed_stories(previous_items, {s.id for s in stories})
        + detect_renumbered_stories(previous_items, stories)
    ):
        logger.warning(message)
        warnings.append(message)

    atomic_write(fix_plan_path, fix_plan)
    return has_fix_plan_progress(parse_fix_plan(fix_plan))


def _copy_specs(ralph_dir: Path, artifacts_dir: Path) -> None:
    """Step 5: copy specs, then write SPECS_CHANGELOG.md and SPECS_INDEX.md."""
    specs_dir = ralph_dir / SPECS_DIR_NAME
    previous = snapshot_specs(specs_dir)

    logger.info(f"Copying specs to {RALPH_DIR}/{SPECS_DIR_NAME}/...")
    replace_dir_with_copy(artifacts_dir, specs_dir)

    changes = diff_specs(previous, snapshot_specs(specs_dir))
    timestamp = datetime.now(timezone.utc).isoformat()
    atomic_write(ralph_dir / SPECS_CHANGELOG_FILE, format_changelog(changes, timestamp))
    logger.debug(f"Generated {SPECS_CHANGELOG_FILE} with {len(changes)} changes")

    logger.info(f"Generating {SPECS_INDEX_FILE}...")
    index = generate_specs_index(specs_dir)
    atomic_write(ralph_dir / SPECS_INDEX_FILE, format_specs_index_md(index))


def _read_artifacts(artifacts_dir: Path, files: list[str], warnings: list[str]) -> dict[str, str]:
    contents = {}
    for name in files:
        if not name.lower().endswith(".md"):
            continue
        try:
            contents[name] = (artifacts_dir / name).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            message = f"Could not read artifact {name}: {e}"
            logger.warning(message)
            warnings.append(message)
    return contents


def _write_prompt(ralph_dir: Path, project_name: str, context: ProjectContext | None) -> None:
    """Write PROMPT.md, filling in a scaffolded template if one is present."""
    prompt_path = ralph_dir / PROMPT_FILE
    prompt = None
    if prompt_path.exists():
        existing = prompt_path.read_text(encoding="utf-8")
        if PROJECT_NAME_PLACEHOLDER in existing:
            prompt = existing.replace(PROJECT_NAME_PLACEHOLDER, project_name)
    if prompt is None:
        prompt = generate_prompt(project_name, context)
    atomic_write(prompt_path, prompt)


def _customize_agent(ralph_dir: Path, artifacts: dict[str, str], warnings: list[str]) -> None:
    """Fill @AGENT.md build/test commands from the architecture doc's tech stack."""
    agent_path = ralph_dir / AGENT_FILE
    architecture = next((content for name, content in artifacts.items() if "architect" in name.lower()), None)
    if architecture is None or not agent_path.exists():
        return

    stack = detect_tech_stack_in_document(architecture)
    if stack is None:
        logger.debug("No tech stack detected in architecture document")
        return

    try:
        atomic_write(agent_path, customize_agent_md(agent_path.read_text(encoding="utf-8"), stack))
        logger.debug(f"Customized {AGENT_FILE} with detected tech stack")
    except (OSError, UnicodeDecodeError) as e:
        message = f"Could not customize {AGENT_FILE}: {e}"
        logger.warning(message)
        warnings.append(message)


def run_transition(project_dir: Path | str) -> TransitionResult:
    """Turn the project's BMAD planning artifacts into Ralph inputs.

    Raises:
        TransitionError: artifacts dir, stories file or stories missing.
            Nothing has been written when this is raised.
    """
    project_dir = Path(project_dir)
    ralph_dir = project_dir / RALPH_DIR

    artifacts_dir, files, stories_file, stories, parse_warnings = _load_stories(project_dir)
    warnings = list(parse_warnings)
    warnings.extend(validate_artifacts(files, artifacts_dir))

    fix_plan_preserved = _write_fix_plan(ralph_dir, stories, stories_file, warnings)

    _copy_specs(ralph_dir, artifacts_dir)

    artifacts = _read_artifacts(artifacts_dir, files, warnings)
    project_name = resolve_project_name(project_dir, warnings)

    context = None
    if artifacts:
        logger.info(f"Generating {PROJECT_CONTEXT_FILE}...")
        context, truncated = extract_project_context(artifacts)
        warnings.extend(detect_truncation(truncated))
        atomic_write(ralph_dir / PROJECT_CONTEXT_FILE, generate_project_context_md(context, project_name))

    logger.info(f"Generating {PROMPT_FILE}...")
    _write_prompt(ralph_dir, project_name, context)
    _customize_agent(ralph_dir, artifacts, warnings)

    logger.info(f"Transition complete: {len(stories)} stories, {len(warnings)} warnings")
    return TransitionResult(
        stories_count=len(stories),
        warnings=warnings,
        fix_plan_preserved=fix_plan_preserved,
    )
