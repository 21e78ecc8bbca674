"""
@fix_plan.md codec and merger.

The fix plan is the checklist the Ralph loop works through, one line per
story:

    - [ ] Story 1.1: Login
      > As a user, I want to log in.
      > AC: Given a user, When they submit credentials, Then they are logged in

The loop ticks boxes as it finishes stories. Regenerating the plan must keep
those ticks, so completion state is read back from the previous document and
carried onto the fresh one by story id.
"""

import re

from bmalph.transition.models import FixPlanItem, Story

ITEM_RE = re.compile(r'^\s*-\s*\[([ xX])\]\s*Story\s+([\d.]+):\s*(.+)$')
_UNCHECKED_ITEM_RE = re.compile(r'^(\s*-\s*)\[ \](\s*Story\s+([\d.]+):.*)$')

# Sentence boundaries, plus the "So that"/"I want" clauses of a user story
_DESCRIPTION_SPLIT_RE = re.compile(r',\s*(?=So that|I want)|(?<=\.)\s+')
MAX_DESCRIPTION_FRAGMENTS = 3

TRAILER = [
    "",
    "## Completed",
    "",
    "## Notes",
    "- Follow TDD methodology (red-green-refactor)",
    "- One story per Ralph loop iteration",
    "- Update this file after completing each story",
    "",
]


def _group_by_epic(stories: list[Story]) -> list[tuple[str, list[Story]]]:
    groups: dict[str, list[Story]] = {}
    for story in stories:
        groups.setdefault(story.epic, []).append(story)
    return list(groups.items())


def _story_lines(story: Story, stories_file: str | None) -> list[str]:
    lines = [f"- [ ] Story {story.id}: {story.title}"]

    if story.description:
        parts = _DESCRIPTION_SPLIT_RE.split(story.description)
        for part in parts[:MAX_DESCRIPTION_FRAGMENTS]:
            if part.strip():
                lines.append(f"  > {part.strip()}")

    for criterion in story.acceptance_criteria:
        lines.append(f"  > AC: {criterion}")

    if stories_file:
        anchor = story.id.replace(".", "-")
        lines.append(f"  > Spec: specs/{stories_file}#story-{anchor}")

    return lines


def generate_fix_plan(stories: list[Story], stories_file: str | None = None) -> str:
    """Render stories as the fix plan checklist, grouped by epic.

    Args:
        stories: Parsed stories, in document order
        stories_file: Stories document path relative to specs/, used for
            per-story links. Links are omitted when None.
    """
    lines = ["# Ralph Fix Plan", "", "## Stories to Implement", ""]

    for epic, epic_stories in _group_by_epic(stories):
        if epic:
            lines.append(f"### {epic}")
            if epic_stories[0].epic_description:
                lines.append(f"> Goal: {epic_stories[0].epic_description}")
            lines.append("")
        for story in epic_stories:
            lines.extend(_story_lines(story, stories_file))
        lines.append("")

    # Drop the blank left by the last group; the trailer starts with one
    if lines[-1] == "":
        lines.pop()
    lines.extend(TRAILER)

    return "\n".join(lines)


def parse_fix_plan(content: str) -> list[FixPlanItem]:
    """Read checklist items back from a fix plan. Other lines are ignored."""
    items = []
    for line in content.splitlines():
        match = ITEM_RE.match(line)
        if match:
            items.append(FixPlanItem(
                id=match.group(2),
                completed=match.group(1).lower() == "x",
                title=match.group(3).strip(),
            ))
    return items


def has_fix_plan_progress(items: list[FixPlanItem]) -> bool:
    return any(item.completed for item in items)


def merge_fix_plan_items(
    fresh_items: list[FixPlanItem],
    previous_items: list[FixPlanItem],
) -> list[FixPlanItem]:
    """Carry completion state from previous_items onto fresh_items by id.

    Fresh order and ids are kept as-is. Ids that only exist in
    previous_items are dropped.
    """
    completed_ids = {item.id for item in previous_items if item.completed}
    return [
        FixPlanItem(
            id=item.id,
            completed=item.completed or item.id in completed_ids,
            title=item.title,
        )
        for item in fresh_items
    ]


def merge_fix_plan(fresh_plan: str, previous_plan: str) -> str:
    """Return fresh_plan with every story completed in previous_plan ticked.

    Only checkbox state changes; no line is added, removed or reordered, so
    merging the result with the same fresh plan again is a no-op.
    """
    merged = merge_fix_plan_items(parse_fix_plan(fresh_plan), parse_fix_plan(previous_plan))
    completed_ids = {item.id for item in merged if item.completed}

    lines = fresh_plan.split("\n")
    for i, line in enumerate(lines):
        match = _UNCHECKED_ITEM_RE.match(line)
        if match and match.group(3) in completed_ids:
            lines[i] = f"{match.group(1)}[x]{match.group(2)}"
    return "\n".join(lines)


def detect_orphaned_completed_stories(
    previous_items: list[FixPlanItem],
    fresh_ids: set[str],
) -> list[str]:
    """Warn about completed stories that no longer exist upstream."""
    warnings = []
    for item in previous_items:
        if item.completed and item.id not in fresh_ids:
            label = f' "{item.title}"' if item.title else ""
            warnings.append(
                f"Completed story {item.id}{label} was removed from the planning "
                f"artifacts; its completion status was dropped"
            )
    return warnings


def detect_renumbered_stories(
    previous_items: list[FixPlanItem],
    stories: list[Story],
) -> list[str]:
    """Warn when a completed story's title now sits under a different id.

    The merge goes by id, so a renumbered story loses its checkmark.
    """
    ids_by_title = {story.title.strip().lower(): story.id for story in stories}
    warnings = []
    for item in previous_items:
        if not item.completed or not item.title:
            continue
        new_id = ids_by_title.get(item.title.strip().lower())
        if new_id and new_id != item.id:
            warnings.append(
                f'Story "{item.title}" was renumbered from {item.id} to {new_id}; '
                f"its completion status was not carried over"
            )
    return warnings
