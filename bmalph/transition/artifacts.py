"""
Planning artifact discovery and sanity checks.
"""

import logging
import re
from pathlib import Path

from bmalph.lib.constants import ARTIFACT_DIR_CANDIDATES

logger = logging.getLogger(__name__)

STORIES_NAME_MARKERS = ("epic", "stories", "story")
_NO_GO_RE = re.compile(r'NO[-\s]?GO', re.IGNORECASE)


def find_artifacts_dir(project_dir: Path) -> Path | None:
    """Return the first existing planning-artifacts directory, or None."""
    for candidate in ARTIFACT_DIR_CANDIDATES:
        path = project_dir / candidate
        logger.debug(f"Checking artifacts dir: {path}")
        if path.is_dir():
            logger.debug(f"Found artifacts at: {path}")
            return path
    logger.debug(f"No artifacts found. Checked: {', '.join(ARTIFACT_DIR_CANDIDATES)}")
    return None


def list_artifact_files(artifacts_dir: Path) -> list[str]:
    """Top-level file names in the artifacts directory, sorted."""
    return sorted(p.name for p in artifacts_dir.iterdir() if p.is_file())


def find_stories_file(files: list[str]) -> str | None:
    """Pick the epics/stories document from a file listing."""
    for name in files:
        lower = name.lower()
        if any(marker in lower for marker in STORIES_NAME_MARKERS):
            return name
    return None


def validate_artifacts(files: list[str], artifacts_dir: Path) -> list[str]:
    """Warn about missing or blocking planning documents."""
    warnings = []

    if not any("prd" in f.lower() for f in files):
        warnings.append("No PRD document found in planning artifacts")

    if not any("architect" in f.lower() for f in files):
        warnings.append("No architecture document found in planning artifacts")

    readiness_file = next((f for f in files if "readiness" in f.lower()), None)
    if readiness_file:
        try:
            content = (artifacts_dir / readiness_file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Could not read readiness report {readiness_file}: {e}")
        else:
            if _NO_GO_RE.search(content):
                warnings.append("Readiness report indicates NO-GO status")

    return warnings
