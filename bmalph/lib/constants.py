"""Shared constants for bmalph."""

import re

# Ralph working directory and the files the transition writes into it
RALPH_DIR = ".ralph"
FIX_PLAN_FILE = "@fix_plan.md"
AGENT_FILE = "@AGENT.md"
PROMPT_FILE = "PROMPT.md"
PROJECT_CONTEXT_FILE = "PROJECT_CONTEXT.md"
SPECS_CHANGELOG_FILE = "SPECS_CHANGELOG.md"
SPECS_INDEX_FILE = "SPECS_INDEX.md"
SPECS_DIR_NAME = "specs"

# bmalph state directory (config)
BMALPH_DIR = "bmalph"
CONFIG_FILE = "config.json"

# Planning artifact locations, checked in order
ARTIFACT_DIR_CANDIDATES = (
    "_bmad-output/planning-artifacts",
    "_bmad-output/planning_artifacts",
    "docs/planning",
)

# Upper bound on any extracted markdown section
SECTION_EXTRACT_MAX_LENGTH = 5000

DEFAULT_PROJECT_NAME = "project"
PROJECT_NAME_PLACEHOLDER = "[YOUR PROJECT NAME]"

STORY_ID_PATTERN = re.compile(r'^\d+\.\d+$')
