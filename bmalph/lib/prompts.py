"""
Markdown templates shipped in bmalph/prompts/.

A template is rendered with str.format(), so the only braces it may contain
are its {placeholders}. Authoring notes go in <!-- ... --> comments, which
are removed on load and never reach the generated document.
"""

import logging
import re
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).resolve().parent.parent / "prompts"

_COMMENT_RE = re.compile(r'<!--.*?-->\s*', re.DOTALL)


class PromptError(Exception):
    """A template is missing or could not be rendered."""
    pass


@lru_cache(maxsize=None)
def load_prompt(name: str) -> str:
    """Return bmalph/prompts/<name>.md with authoring comments removed."""
    path = PROMPTS_DIR / f"{name}.md"
    if not path.is_file():
        raise PromptError(f"Prompt template '{name}' not found at {path}")

    logger.debug(f"Loading prompt template {path.name}")
    return _COMMENT_RE.sub("", path.read_text(encoding="utf-8")).lstrip()


def render_prompt(name: str, **values: str) -> str:
    """Fill a template's placeholders. Every placeholder must be supplied."""
    template = load_prompt(name)
    try:
        return template.format(**values)
    except KeyError as e:
        raise PromptError(
            f"Prompt '{name}' needs {e} (got: {', '.join(sorted(values)) or 'nothing'})"
        ) from e
