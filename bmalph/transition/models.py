"""
Data models for the transition pipeline.
"""

from dataclasses import dataclass, field
from typing import Literal, Optional


@dataclass(frozen=True)
class Story:
    """A story parsed from the epics/stories planning document.

    Stories are the unit of work for the Ralph loop: each one becomes
    exactly one checklist entry in @fix_plan.md.
    """
    epic: str                                  # "Auth" from "## Epic 1: Auth"
    epic_description: str
    id: str                                    # dotted, e.g. "2.3"
    title: str
    description: str
    acceptance_criteria: tuple[str, ...] = ()


@dataclass
class FixPlanItem:
    """A checklist line from @fix_plan.md."""
    id: str
    completed: bool
    title: Optional[str] = None


@dataclass
class TechStack:
    """Shell commands for a detected ecosystem."""
    setup: str
    test: str
    build: str
    dev: str


@dataclass
class ProjectContext:
    """High-level project context pulled from the PRD and architecture docs."""
    project_goals: str = ""
    success_metrics: str = ""
    architecture_constraints: str = ""
    technical_risks: str = ""
    scope_boundaries: str = ""
    target_users: str = ""
    non_functional_requirements: str = ""


@dataclass
class SectionExtract:
    """Result of extracting a markdown section, with truncation details."""
    content: str
    was_truncated: bool
    original_length: int


@dataclass
class TruncationInfo:
    field: str
    original_length: int
    truncated_to: int


ChangeStatus = Literal["added", "modified", "removed"]


@dataclass
class SpecsChange:
    file: str
    status: ChangeStatus
    summary: Optional[str] = None


SpecFileType = Literal[
    "prd", "architecture", "stories", "ux", "test-design",
    "readiness", "sprint", "brainstorm", "other",
]
Priority = Literal["critical", "high", "medium", "low"]


@dataclass
class SpecFileMetadata:
    path: str
    size: int
    type: SpecFileType
    priority: Priority
    description: str


@dataclass
class SpecsIndex:
    generated_at: str
    total_files: int
    total_size_kb: int
    files: list[SpecFileMetadata] = field(default_factory=list)


@dataclass
class TransitionResult:
    """Summary returned to the command that ran the transition."""
    stories_count: int
    warnings: list[str] = field(default_factory=list)
    fix_plan_preserved: bool = False
