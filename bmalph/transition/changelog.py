"""
Specs changelog: what changed in .ralph/specs/ between two transitions.
"""

import logging
from pathlib import Path

from bmalph.lib.fsutil import read_snapshot
from bmalph.transition.models import SpecsChange

logger = logging.getLogger(__name__)

SUMMARY_MAX_LENGTH = 50
LINE_CHANGED = "(line changed)"


def snapshot_specs(directory: Path) -> dict[str, bytes]:
    """Read a specs directory into {relative_path: raw bytes}. Missing dir -> {}.

    Files are compared as bytes; text is only decoded to build a summary.
    """
    snapshot = read_snapshot(directory)
    logger.debug(f"Snapshot of {directory}: {len(snapshot)} files")
    return snapshot


def _as_text(content: str | bytes) -> str:
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    return content


def first_diff_line(old_content: str, new_content: str) -> str:
    """Return the first changed line of new_content, trimmed for display."""
    old_lines = old_content.split("\n")
    new_lines = new_content.split("\n")

    for i in range(max(len(old_lines), len(new_lines))):
        old_line = old_lines[i] if i < len(old_lines) else ""
        new_line = new_lines[i] if i < len(new_lines) else ""
        if old_line != new_line:
            return new_line.strip()[:SUMMARY_MAX_LENGTH] or LINE_CHANGED
    return ""


def diff_specs(
    previous: dict[str, str | bytes],
    current: dict[str, str | bytes],
) -> list[SpecsChange]:
    """Classify every path in either snapshot as added, modified or removed.

    Unchanged files get no entry. Results are sorted by path.
    """
    changes = []
    for path in sorted(previous.keys() | current.keys()):
        if path not in previous:
            changes.append(SpecsChange(file=path, status="added"))
        elif path not in current:
            changes.append(SpecsChange(file=path, status="removed"))
        elif previous[path] != current[path]:
            # Distinct binary content can decode to the same replacement text
            summary = first_diff_line(_as_text(previous[path]), _as_text(current[path]))
            changes.append(SpecsChange(file=path, status="modified", summary=summary or LINE_CHANGED))
    return changes


def format_changelog(changes: list[SpecsChange], timestamp: str) -> str:
    if not changes:
        return "# Specs Changelog\n\nNo changes detected.\n"

    md = f"# Specs Changelog\n\nLast updated: {timestamp}\n\n"

    added = [c for c in changes if c.status == "added"]
    modified = [c for c in changes if c.status == "modified"]
    removed = [c for c in changes if c.status == "removed"]

    if added:
        md += "## Added\n" + "\n".join(f"- {c.file}" for c in added) + "\n\n"
    if modified:
        md += "## Modified\n" + "\n".join(
            f"- {c.file}" + (f" ({c.summary})" if c.summary else "") for c in modified
        ) + "\n\n"
    if removed:
        md += "## Removed\n" + "\n".join(f"- {c.file}" for c in removed) + "\n\n"

    return md
