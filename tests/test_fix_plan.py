"""Tests for bmalph.transition.fix_plan module."""

from bmalph.transition.fix_plan import (
    generate_fix_plan,
    parse_fix_plan,
    has_fix_plan_progress,
    merge_fix_plan,
    merge_fix_plan_items,
    detect_orphaned_completed_stories,
    detect_renumbered_stories,
)
from bmalph.transition.models import FixPlanItem, Story
from bmalph.transition.stories import parse_stories


def make_story(story_id, title, epic="Core", description="", criteria=None, epic_description=""):
    return Story(
        epic=epic,
        epic_description=epic_description,
        id=story_id,
        title=title,
        description=description,
        acceptance_criteria=tuple(criteria or ()),
    )


STORIES_DOC = """## Epic 1: Accounts
Account management.

### Story 1.1: Sign up
As a visitor, I want to sign up, So that I can use the app.

**Acceptance Criteria:**
Given a visitor
When they sign up
Then an account exists

### Story 1.2: Log in
Users log in. Sessions last a day.

## Epic 2: Billing

### Story 2.1: Invoices: download and print
Users can download invoices.
"""


class TestGenerateFixPlan:
    """Test generate_fix_plan function."""

    def test_renders_unchecked_items(self):
        plan = generate_fix_plan([make_story("1.1", "Login"), make_story("1.2", "Logout")])
        assert "- [ ] Story 1.1: Login" in plan
        assert "- [ ] Story 1.2: Logout" in plan
        assert "[x]" not in plan

    def test_one_heading_per_epic_in_first_seen_order(self):
        stories = [
            make_story("2.1", "B1", epic="Beta"),
            make_story("1.1", "A1", epic="Alpha"),
            make_story("2.2", "B2", epic="Beta"),
        ]
        plan = generate_fix_plan(stories)

        assert plan.count("### Beta") == 1
        assert plan.count("### Alpha") == 1
        assert plan.index("### Beta") < plan.index("### Alpha")
        # B2 is grouped under Beta, ahead of Alpha
        assert plan.index("Story 2.2: B2") < plan.index("### Alpha")

    def test_epic_goal_line(self):
        plan = generate_fix_plan([make_story("1.1", "A", epic_description="Make it work")])
        assert "> Goal: Make it work" in plan

    def test_description_fragments_and_criteria(self):
        story = make_story(
            "1.1",
            "Sign up",
            description="As a visitor, I want to sign up, So that I can use the app.",
            criteria=["Given a, When b, Then c"],
        )
        plan = generate_fix_plan([story])

        assert "  > As a visitor" in plan
        assert "  > I want to sign up" in plan
        assert "  > So that I can use the app." in plan
        assert "  > AC: Given a, When b, Then c" in plan

    def test_at_most_three_description_fragments(self):
        story = make_story("1.1", "Many", description="One. Two. Three. Four. Five.")
        plan = generate_fix_plan([story])
        assert "  > Three." in plan
        assert "Four." not in plan

    def test_spec_link_when_stories_file_given(self):
        plan = generate_fix_plan([make_story("2.3", "A")], stories_file="epics.md")
        assert "  > Spec: specs/epics.md#story-2-3" in plan

    def test_no_spec_link_by_default(self):
        assert "> Spec:" not in generate_fix_plan([make_story("1.1", "A")])

    def test_trailer_appended_once(self):
        plan = generate_fix_plan([make_story("1.1", "A"), make_story("2.1", "B", epic="Other")])
        assert plan.count("## Completed") == 1
        assert plan.count("## Notes") == 1
        assert "- Follow TDD methodology (red-green-refactor)" in plan
        assert plan.startswith("# Ralph Fix Plan\n")
        assert plan.endswith("\n")


class TestParseFixPlan:
    """Test parse_fix_plan function."""

    def test_parses_checked_and_unchecked(self):
        content = (
            "# Ralph Fix Plan\n"
            "### Core\n"
            "- [x] Story 1.1: Login\n"
            "  > AC: Given a, Then b\n"
            "- [ ] Story 1.2: Logout\n"
            "- [X] Story 2.1: Upper case mark\n"
        )
        items = parse_fix_plan(content)

        assert items == [
            FixPlanItem(id="1.1", completed=True, title="Login"),
            FixPlanItem(id="1.2", completed=False, title="Logout"),
            FixPlanItem(id="2.1", completed=True, title="Upper case mark"),
        ]

    def test_ignores_non_story_lines(self):
        content = "- [x] Refactor something\n- [ ] Story: no id\nStory 1.1: not a checkbox\n"
        assert parse_fix_plan(content) == []

    def test_round_trips_ids_and_titles(self):
        stories = parse_stories(STORIES_DOC)
        items = parse_fix_plan(generate_fix_plan(stories, "epics.md"))

        assert [(i.id, i.title) for i in items] == [(s.id, s.title) for s in stories]
        assert ("2.1", "Invoices: download and print") in [(i.id, i.title) for i in items]


class TestHasFixPlanProgress:
    """Test has_fix_plan_progress function."""

    def test_true_when_any_completed(self):
        items = [FixPlanItem("1.1", False), FixPlanItem("1.2", True)]
        assert has_fix_plan_progress(items) is True

    def test_false_when_none_completed(self):
        assert has_fix_plan_progress([FixPlanItem("1.1", False)]) is False
        assert has_fix_plan_progress([]) is False


class TestMergeFixPlan:
    """Test merge_fix_plan and merge_fix_plan_items."""

    def setup_method(self):
        self.fresh = generate_fix_plan([
            make_story("1.1", "Login"),
            make_story("1.2", "Logout"),
            make_story("1.3", "Profile"),
        ])

    def test_preserves_completion_by_id(self):
        previous = "- [ ] Story 1.1: Login\n- [x] Story 1.2: Logout (old title)\n"
        merged = merge_fix_plan(self.fresh, previous)

        assert "- [x] Story 1.2: Logout" in merged
        assert "- [ ] Story 1.1: Login" in merged
        assert "- [ ] Story 1.3: Profile" in merged

    def test_drops_removed_ids(self):
        previous = "- [x] Story 9.9: Gone\n- [x] Story 1.1: Login\n"
        merged = merge_fix_plan(self.fresh, previous)

        assert "9.9" not in merged
        assert "- [x] Story 1.1: Login" in merged

    def test_idempotent(self):
        previous = "- [x] Story 1.3: Profile\n- [x] Story 4.4: Removed\n"
        once = merge_fix_plan(self.fresh, previous)
        twice = merge_fix_plan(self.fresh, once)
        assert twice == once

    def test_merge_with_self_is_identity(self):
        assert merge_fix_plan(self.fresh, self.fresh) == self.fresh

    def test_only_checkbox_state_changes(self):
        merged = merge_fix_plan(self.fresh, "- [x] Story 1.1: Login\n")
        assert merged.replace("[x]", "[ ]") == self.fresh

    def test_empty_previous_changes_nothing(self):
        assert merge_fix_plan(self.fresh, "") == self.fresh

    def test_merge_items_keeps_fresh_order(self):
        fresh = [FixPlanItem("2.1", False, "B"), FixPlanItem("1.1", False, "A")]
        previous = [FixPlanItem("1.1", True, "A"), FixPlanItem("3.3", True, "C")]

        merged = merge_fix_plan_items(fresh, previous)

        assert merged == [FixPlanItem("2.1", False, "B"), FixPlanItem("1.1", True, "A")]


class TestDetectOrphanedCompletedStories:
    """Test detect_orphaned_completed_stories function."""

    def test_warns_for_completed_story_removed_upstream(self):
        previous = [FixPlanItem("1.1", True, "Login"), FixPlanItem("9.9", True, "Gone")]
        warnings = detect_orphaned_completed_stories(previous, {"1.1"})

        assert len(warnings) == 1
        assert "9.9" in warnings[0]
        assert '"Gone"' in warnings[0]

    def test_ignores_incomplete_removed_story(self):
        previous = [FixPlanItem("9.9", False, "Gone")]
        assert detect_orphaned_completed_stories(previous, {"1.1"}) == []


class TestDetectRenumberedStories:
    """Test detect_renumbered_stories function."""

    def test_warns_when_completed_title_moves_to_new_id(self):
        previous = [FixPlanItem("1.2", True, "Logout")]
        stories = [make_story("1.1", "Login"), make_story("1.3", "Logout")]

        warnings = detect_renumbered_stories(previous, stories)

        assert len(warnings) == 1
        assert "from 1.2 to 1.3" in warnings[0]

    def test_same_id_is_not_renumbered(self):
        previous = [FixPlanItem("1.2", True, "Logout")]
        assert detect_renumbered_stories(previous, [make_story("1.2", "Logout")]) == []
