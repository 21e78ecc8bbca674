"""
Project context extraction and PROMPT.md generation.
"""

from bmalph.lib.prompts import render_prompt
from bmalph.transition.models import ProjectContext, TruncationInfo
from bmalph.transition.sections import extract_section_with_info

# Field -> (source document role, heading synonyms in lookup order)
CONTEXT_FIELDS: dict[str, tuple[str, list[str]]] = {
    "project_goals": ("prd", [r"Executive Summary", r"Vision", r"Goals", r"Project Goals"]),
    "success_metrics": ("prd", [r"Success (?:Criteria|Metrics)", r"KPIs?", r"Metrics", r"Key Performance"]),
    "architecture_constraints": ("arch", [r"Constraints", r"ADR", r"Architecture Decision"]),
    "technical_risks": ("arch", [r"Risks", r"Technical Risks", r"Mitigations", r"Risk"]),
    "scope_boundaries": ("prd", [r"Scope", r"In Scope", r"Out of Scope", r"Boundaries"]),
    "target_users": ("prd", [r"Target Users", r"Users", r"Personas", r"User Profiles"]),
    "non_functional_requirements": ("prd", [r"Non-Functional", r"NFR", r"Quality", r"Quality Attributes"]),
}

# PROJECT_CONTEXT.md heading per field
CONTEXT_HEADINGS = {
    "project_goals": "Project Goals",
    "success_metrics": "Success Metrics",
    "architecture_constraints": "Architecture Constraints",
    "technical_risks": "Technical Risks",
    "scope_boundaries": "Scope Boundaries",
    "target_users": "Target Users",
    "non_functional_requirements": "Non-Functional Requirements",
}

# PROMPT.md renders scope ahead of risks
PROMPT_SECTIONS = [
    ("project_goals", "Project Goals"),
    ("success_metrics", "Success Metrics"),
    ("architecture_constraints", "Architecture Constraints"),
    ("scope_boundaries", "Scope"),
    ("technical_risks", "Technical Risks"),
    ("target_users", "Target Users"),
    ("non_functional_requirements", "Non-Functional Requirements"),
]


def extract_project_context(artifacts: dict[str, str]) -> tuple[ProjectContext, list[TruncationInfo]]:
    """Pull the ProjectContext fields out of planning documents.

    Args:
        artifacts: {filename: markdown content}. Files with "prd" in the name
            feed product fields; "architect"/"readiness" files feed
            constraints and risks. Either falls back to all content.

    Returns:
        (context, truncation records for fields cut at the section cap)
    """
    prd_content = ""
    arch_content = ""
    for filename, content in artifacts.items():
        lower = filename.lower()
        if "prd" in lower:
            prd_content += "\n" + content
        if "architect" in lower or "readiness" in lower:
            arch_content += "\n" + content

    all_content = prd_content + "\n" + arch_content
    sources = {"prd": prd_content or all_content, "arch": arch_content or all_content}

    context = ProjectContext()
    truncated = []
    for field_name, (role, patterns) in CONTEXT_FIELDS.items():
        for pattern in patterns:
            result = extract_section_with_info(sources[role], pattern, include_heading=False)
            if result and result.content:
                setattr(context, field_name, result.content)
                if result.was_truncated:
                    truncated.append(TruncationInfo(
                        field=field_name,
                        original_length=result.original_length,
                        truncated_to=len(result.content),
                    ))
                break

    return context, truncated


def detect_truncation(truncated: list[TruncationInfo]) -> list[str]:
    """Turn truncation records into user-facing warnings."""
    return [
        f"{t.field} was truncated from {t.original_length} to {t.truncated_to} characters. "
        f"Some content may be missing."
        for t in truncated
    ]


def generate_project_context_md(context: ProjectContext, project_name: str) -> str:
    lines = [f"# {project_name} - Project Context", ""]
    for field_name, heading in CONTEXT_HEADINGS.items():
        content = getattr(context, field_name)
        if content:
            lines.extend([f"## {heading}", "", content, ""])
    return "\n".join(lines)


def generate_prompt(project_name: str, context: ProjectContext | None = None) -> str:
    """Render .ralph/PROMPT.md, the loop's operational instructions."""
    context_block = ""
    if context is not None:
        body = "\n\n".join(
            f"### {heading}\n{getattr(context, field_name)}"
            for field_name, heading in PROMPT_SECTIONS
            if getattr(context, field_name)
        )
        if body:
            context_block = f"\n## Project Specifications (CRITICAL - READ THIS)\n\n{body}\n"

    return render_prompt(
        "ralph_prompt",
        project_name=project_name,
        project_context_block=context_block,
    )
