"""
Epics/stories parser.

Turns the BMAD epics-and-stories markdown document into Story records:

    ## Epic 1: Auth
    Users can sign in.

    ### Story 1.1: Login
    As a user, I want to log in.

    **Acceptance Criteria:**
    **Given** a registered user
    **When** they submit valid credentials
    **Then** they are logged in
"""

import re

from bmalph.lib.constants import STORY_ID_PATTERN
from bmalph.transition.models import Story

EPIC_HEADER_RE = re.compile(r'^##\s+Epic\s+\d+:\s+(.+)')
STORY_HEADER_RE = re.compile(r'^###\s+Story\s+([\d.]+):\s+(.+)')
HEADING_RE = re.compile(r'^#{2,3}\s')
AC_HEADING_RE = re.compile(r'^\*?\*?Acceptance Criteria\*?\*?:?', re.IGNORECASE)
GIVEN_LINE_RE = re.compile(r'^\*?\*?Given\*?\*?\s')
GWT_LINE_RE = re.compile(r'^\*?\*?(Given|When|Then)\*?\*?\s')

MAX_DESCRIPTION_LINES = 3


def strip_bold(text: str) -> str:
    return text.replace("**", "")


def parse_acceptance_criteria(lines: list[str]) -> list[str]:
    """Group Given/When/Then lines into one string per criterion.

    A Given line opens a criterion; When/Then lines extend the open one.
    When/Then lines seen before any Given are dropped.
    """
    criteria = []
    current: list[str] = []

    for line in lines:
        trimmed = line.strip()
        if not trimmed:
            continue

        if GIVEN_LINE_RE.match(trimmed):
            if current:
                criteria.append(", ".join(strip_bold(part) for part in current))
            current = [trimmed]
        elif GWT_LINE_RE.match(trimmed) and current:
            current.append(trimmed)

    if current:
        criteria.append(", ".join(strip_bold(part) for part in current))

    return criteria


def _find_ac_start(body: list[str]) -> int | None:
    """Index of the first acceptance-criteria line in a story body, if any."""
    for i, line in enumerate(body):
        if AC_HEADING_RE.match(line.strip()):
            return i
    for i, line in enumerate(body):
        if GIVEN_LINE_RE.match(line.strip()):
            return i
    return None


def _collect_until_heading(lines: list[str], start: int) -> list[str]:
    body = []
    for line in lines[start:]:
        if HEADING_RE.match(line):
            break
        body.append(line)
    return body


def _parse_story(match: re.Match, body: list[str], epic: str, epic_description: str) -> Story:
    ac_start = _find_ac_start(body)
    desc_source = body if ac_start is None else body[:ac_start]
    ac_lines = [] if ac_start is None else body[ac_start:]

    desc_lines = [l.strip() for l in desc_source if l.strip()][:MAX_DESCRIPTION_LINES]

    return Story(
        epic=epic,
        epic_description=epic_description,
        id=match.group(1),
        title=match.group(2).strip(),
        description=strip_bold(" ".join(desc_lines)),
        acceptance_criteria=tuple(parse_acceptance_criteria(ac_lines)),
    )


def parse_stories_with_warnings(content: str) -> tuple[list[Story], list[str]]:
    """Parse stories and collect recoverable anomalies.

    Returns:
        (stories in document order, warnings)
    """
    stories = []
    warnings = []
    current_epic = ""
    current_epic_description = ""

    lines = content.splitlines()

    for i, line in enumerate(lines):
        epic_match = EPIC_HEADER_RE.match(line)
        if epic_match:
            current_epic = epic_match.group(1).strip()
            current_epic_description = " ".join(
                l.strip() for l in _collect_until_heading(lines, i + 1) if l.strip()
            )
            continue

        story_match = STORY_HEADER_RE.match(line)
        if not story_match:
            continue

        story = _parse_story(
            story_match,
            _collect_until_heading(lines, i + 1),
            current_epic,
            current_epic_description,
        )

        if not STORY_ID_PATTERN.match(story.id):
            warnings.append(f'Story "{story.title}" has malformed ID "{story.id}" (expected format: N.M)')
        if not story.acceptance_criteria:
            warnings.append(f'Story {story.id}: "{story.title}" has no acceptance criteria')
        if not story.description:
            warnings.append(f'Story {story.id}: "{story.title}" has no description')
        if not story.epic:
            warnings.append(f'Story {story.id}: "{story.title}" is not under an epic')

        stories.append(story)

    return stories, warnings


def parse_stories(content: str) -> list[Story]:
    """Parse an epics/stories document. Returns [] if it has no stories."""
    stories, _ = parse_stories_with_warnings(content)
    return stories
