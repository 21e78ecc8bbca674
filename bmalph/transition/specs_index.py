"""
SPECS_INDEX.md generation.

Catalogs the markdown files copied into .ralph/specs/ with a type, reading
priority and one-line description, so the loop knows what to read first.
The index is rebuilt from scratch on every transition.
"""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

import yaml

from bmalph.lib.fsutil import list_files
from bmalph.transition.models import Priority, SpecFileMetadata, SpecFileType, SpecsIndex

logger = logging.getLogger(__name__)

LARGE_FILE_THRESHOLD = 50000  # bytes
DESCRIPTION_MAX_LENGTH = 60

_FRONT_MATTER_RE = re.compile(r'\A---[ \t]*\n(.*?)\n---[ \t]*(?:\n|\Z)', re.DOTALL)
_DESCRIPTION_HEADING_RE = re.compile(r'^#{1,2}\s+(.+)$', re.MULTILINE)

PRIORITY_ORDER: dict[str, int] = {"critical": 0, "high": 1, "medium": 2, "low": 3}

PRIORITY_HEADINGS = [
    ("critical", "Critical (Always Read First)"),
    ("high", "High Priority (Read for Implementation)"),
    ("medium", "Medium Priority (Reference as Needed)"),
    ("low", "Low Priority (Optional)"),
]


def detect_spec_file_type(filename: str) -> SpecFileType:
    """Classify a spec file by name."""
    lower = filename.lower()

    if "prd" in lower:
        return "prd"
    if "arch" in lower:
        return "architecture"
    # brainstorm before stories: "brainstorm" contains "stor"
    if "brainstorm" in lower:
        return "brainstorm"
    if "stor" in lower or "epic" in lower:
        return "stories"
    if "ux" in lower:
        return "ux"
    if "test" in lower:
        return "test-design"
    if "readiness" in lower:
        return "readiness"
    if "sprint" in lower:
        return "sprint"
    return "other"


def determine_priority(file_type: SpecFileType) -> Priority:
    if file_type in ("prd", "architecture", "stories"):
        return "critical"
    if file_type in ("test-design", "readiness"):
        return "high"
    if file_type in ("ux", "sprint"):
        return "medium"
    return "low"


def split_front_matter(content: str) -> tuple[dict, str]:
    """Split YAML front matter off a markdown document.

    Returns ({} , content) when there is no front matter or it isn't a
    YAML mapping.
    """
    match = _FRONT_MATTER_RE.match(content)
    if not match:
        return {}, content

    body = content[match.end():]
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        logger.debug(f"Ignoring unparsable front matter: {e}")
        return {}, body
    return (data if isinstance(data, dict) else {}), body


def _shorten(text: str, max_length: int) -> str:
    if len(text) > max_length:
        return text[:max_length - 3] + "..."
    return text


def _strip_inline_markdown(text: str) -> str:
    text = re.sub(r'\*\*([^*]+)\*\*', r'\1', text)
    text = re.sub(r'\*([^*]+)\*', r'\1', text)
    text = re.sub(r'`([^`]+)`', r'\1', text)
    return text.strip()


def extract_description(content: str, max_length: int = DESCRIPTION_MAX_LENGTH) -> str:
    """One-line description: front matter title/description, else first heading, else first line."""
    front_matter, body = split_front_matter(content)
    for key in ("title", "description"):
        value = front_matter.get(key)
        if isinstance(value, str) and value.strip():
            return _shorten(value.strip(), max_length)

    trimmed = body.strip()
    if not trimmed:
        return ""

    heading = _DESCRIPTION_HEADING_RE.search(trimmed)
    if heading:
        return _shorten(_strip_inline_markdown(heading.group(1)), max_length)

    return _shorten(trimmed.split("\n")[0].strip(), max_length)


def generate_specs_index(specs_dir: Path) -> SpecsIndex:
    """Build the index for every .md file under specs_dir."""
    files = []
    total_size = 0

    for rel_path in list_files(specs_dir):
        if not rel_path.lower().endswith(".md"):
            continue
        full_path = specs_dir / rel_path
        size = full_path.stat().st_size
        content = full_path.read_text(encoding="utf-8", errors="replace")
        file_type = detect_spec_file_type(rel_path)
        files.append(SpecFileMetadata(
            path=rel_path,
            size=size,
            type=file_type,
            priority=determine_priority(file_type),
            description=extract_description(content),
        ))
        total_size += size

    # list_files is path-sorted and sort() is stable, so ties stay in path order
    files.sort(key=lambda f: PRIORITY_ORDER[f.priority])

    return SpecsIndex(
        generated_at=datetime.now(timezone.utc).isoformat(),
        total_files=len(files),
        total_size_kb=round(total_size / 1024),
        files=files,
    )


def format_specs_index_md(index: SpecsIndex) -> str:
    lines = [
        "# Specs Index",
        "",
        f"Generated: {index.generated_at}",
        f"Total: {index.total_files} files ({index.total_size_kb} KB)",
        "",
        "## Reading Order",
        "",
    ]

    file_number = 1
    for priority, heading in PRIORITY_HEADINGS:
        in_priority = [f for f in index.files if f.priority == priority]
        if not in_priority:
            continue

        lines.append(f"### {heading}")
        for spec in in_priority:
            is_large = spec.size >= LARGE_FILE_THRESHOLD
            line = f"{file_number}. **{spec.path}** ({round(spec.size / 1024)} KB)"
            if is_large:
                line += " [LARGE]"
            lines.append(line)

            if spec.description:
                suffix = " - scan headers, read relevant sections" if is_large else ""
                lines.append(f"   {spec.description}{suffix}")

            lines.append("")
            file_number += 1

    return "\n".join(lines)
