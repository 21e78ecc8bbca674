"""
Tech stack detection for @AGENT.md customization.

Classification is keyword based and ordered: node, then python, then rust,
then go. The first ecosystem with a marker wins, so a stack that mentions
both node and python tooling is treated as node.
"""

import re

from bmalph.transition.models import TechStack
from bmalph.transition.sections import extract_section

TECH_STACK_HEADING = r'Tech(?:nology)?\s+Stack|Stack'

_NODE_RE = re.compile(r'\bnode(?:\.js)?\b|\btypescript\b|\bnpm\b', re.IGNORECASE)
_PYTHON_RE = re.compile(r'\bpython\b|\bpip\b', re.IGNORECASE)
_RUST_RE = re.compile(r'\brust\b|\bcargo\b', re.IGNORECASE)
_GO_RE = re.compile(r'\bgo\b|\bgolang\b', re.IGNORECASE)

# (token regex, command) pairs, first match wins
_NODE_TEST_RUNNERS = [
    (re.compile(r'\bvitest\b', re.IGNORECASE), "npx vitest run"),
    (re.compile(r'\bjest\b', re.IGNORECASE), "npx jest"),
    (re.compile(r'\bmocha\b', re.IGNORECASE), "npx mocha"),
]
_NODE_BUILD_TOOLS = [
    (re.compile(r'\btsc\b', re.IGNORECASE), "npx tsc"),
]
_PYTHON_TEST_RUNNERS = [
    (re.compile(r'\bpytest\b', re.IGNORECASE), "pytest"),
    (re.compile(r'\bunittest\b', re.IGNORECASE), "python -m unittest discover"),
]

# Heading in @AGENT.md -> TechStack attribute
AGENT_MD_SECTIONS = [
    ("Project Setup", "setup"),
    ("Running Tests", "test"),
    ("Build Commands", "build"),
    ("Development Server", "dev"),
]


def _pick(text: str, candidates: list, default: str) -> str:
    for pattern, command in candidates:
        if pattern.search(text):
            return command
    return default


def detect_tech_stack(section_text: str) -> TechStack | None:
    """Classify a tech stack description into a set of commands.

    Returns None when no ecosystem marker is present.
    """
    if _NODE_RE.search(section_text):
        return TechStack(
            setup="npm install",
            test=_pick(section_text, _NODE_TEST_RUNNERS, "npm test"),
            build=_pick(section_text, _NODE_BUILD_TOOLS, "npm run build"),
            dev="npm run dev",
        )

    if _PYTHON_RE.search(section_text):
        return TechStack(
            setup="pip install -r requirements.txt",
            test=_pick(section_text, _PYTHON_TEST_RUNNERS, "python -m pytest"),
            build="python -m build",
            dev="python -m uvicorn main:app --reload",
        )

    if _RUST_RE.search(section_text):
        return TechStack(
            setup="cargo build",
            test="cargo test",
            build="cargo build --release",
            dev="cargo run",
        )

    if _GO_RE.search(section_text):
        return TechStack(
            setup="go mod download",
            test="go test ./...",
            build="go build ./...",
            dev="go run .",
        )

    return None


def detect_tech_stack_in_document(content: str) -> TechStack | None:
    """Find the Tech Stack section of an architecture document and classify it."""
    section = extract_section(content, TECH_STACK_HEADING)
    if section is None:
        return None
    return detect_tech_stack(section)


def customize_agent_md(template: str, stack: TechStack) -> str:
    """Replace the code block under each build/run heading with the stack's command.

    Only a fenced block directly after the heading is replaced. Headings
    without one are left as they are.
    """
    result = template
    for heading, attr in AGENT_MD_SECTIONS:
        pattern = re.compile(
            rf'(^##\s+{re.escape(heading)}[ \t]*\n\s*)```(\w*)\n.*?```',
            re.MULTILINE | re.DOTALL,
        )
        command = getattr(stack, attr)
        result = pattern.sub(
            lambda m: f"{m.group(1)}```{m.group(2)}\n{command}\n```",
            result,
            count=1,
        )
    return result
