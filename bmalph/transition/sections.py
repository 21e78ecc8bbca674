"""
Markdown section extraction.

Sections are located by regular-expression scanning rather than a markdown
parser: a section starts at a `## <heading>` line and runs up to the next
`## ` line. Deeper headings (`###`) stay inside the section.
"""

import re

from bmalph.lib.constants import SECTION_EXTRACT_MAX_LENGTH
from bmalph.transition.models import SectionExtract

_NEXT_SECTION_RE = re.compile(r'^##\s', re.MULTILINE)


def extract_section_with_info(
    content: str,
    heading_pattern: str,
    max_length: int = SECTION_EXTRACT_MAX_LENGTH,
    include_heading: bool = True,
) -> SectionExtract | None:
    """Extract the first `## <heading_pattern>` section.

    Args:
        content: Full markdown document
        heading_pattern: Regex for the heading text, matched case-insensitively
        max_length: Cap on the returned text; the rest is dropped
        include_heading: Return the heading line too, or only the trimmed body

    Returns:
        SectionExtract, or None if no heading matches
    """
    match = re.search(rf'^##\s+(?:{heading_pattern})', content, re.IGNORECASE | re.MULTILINE)
    if not match:
        return None

    start = match.start()
    # Search past the heading's own "## " so it isn't taken as the next section
    next_match = _NEXT_SECTION_RE.search(content, match.end())
    end = next_match.start() if next_match else len(content)
    section = content[start:end]

    if not include_heading:
        _, _, body = section.partition("\n")
        section = body.strip()

    if len(section) <= max_length:
        return SectionExtract(content=section, was_truncated=False, original_length=len(section))
    return SectionExtract(
        content=section[:max_length],
        was_truncated=True,
        original_length=len(section),
    )


def extract_section(
    content: str,
    heading_pattern: str,
    max_length: int = SECTION_EXTRACT_MAX_LENGTH,
) -> str | None:
    """Return the text of the first matching section (heading included), or None."""
    result = extract_section_with_info(content, heading_pattern, max_length)
    return result.content if result else None
