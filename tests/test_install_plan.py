"""
Tests for install planning and confirmation (ai_tools_updater/install_plan.py).
"""

import io
from unittest.mock import patch

import pytest

from ai_tools_updater.install_plan import (
    InstallPlan,
    is_affirmative,
    partition,
    plan_installs,
    prompt_confirm,
)
from ai_tools_updater.status import ToolReport, ToolStatus
from ai_tools_updater.tools import ManagedTool
from ai_tools_updater.versions import VersionInfo
from conftest import TOOL_A, TOOL_B, TOOL_C, ScriptedConfirm

TOOL_D = ManagedTool("delta", "@example/delta", "delta")


def report(tool, status):
    return ToolReport(tool=tool, info=VersionInfo(), status=status)


@pytest.fixture
def reports():
    return [
        report(TOOL_A, ToolStatus.UP_TO_DATE),
        report(TOOL_B, ToolStatus.UPDATE_AVAILABLE),
        report(TOOL_C, ToolStatus.NOT_INSTALLED),
        report(TOOL_D, ToolStatus.UNKNOWN_VERSION),
    ]


class TestIsAffirmative:
    @pytest.mark.parametrize("answer", ["y", "Y", "yes", "YES", " Yes \n"])
    def test_yes(self, answer):
        """Test explicit yes answers are accepted."""
        assert is_affirmative(answer) is True

    @pytest.mark.parametrize("answer", ["", "n", "no", "yep", "sure", None])
    def test_no(self, answer):
        """Test anything but y or yes declines."""
        assert is_affirmative(answer) is False


class TestPromptConfirm:
    """Tests for the stdin-backed confirmation capability."""

    def test_reads_input(self):
        """Test the prompt is passed to input()."""
        with patch("builtins.input", return_value="y") as mock_input:
            assert prompt_confirm("Install? ") is True
        mock_input.assert_called_once_with("Install? ")

    def test_empty_input_declines(self):
        """Test pressing enter declines."""
        with patch("builtins.input", return_value=""):
            assert prompt_confirm("Install? ") is False

    def test_eof_declines(self):
        """Test closed stdin declines."""
        with patch("builtins.input", side_effect=EOFError):
            assert prompt_confirm("Install? ") is False


class TestPartition:
    def test_partition_keeps_order(self, reports):
        """Test partition keeps registry order within each group."""
        updates, missing, current = partition(reports)
        assert updates == [TOOL_B, TOOL_D]
        assert missing == [TOOL_C]
        assert current == [TOOL_A]


class TestPlanInstalls:
    """Tests for plan_installs."""

    def test_confirmed_plan(self, reports):
        """Test confirming adds new installs after the updates."""
        confirm = ScriptedConfirm(True)
        plan = plan_installs(reports, confirm=confirm, out=io.StringIO())
        assert plan.updates == (TOOL_B, TOOL_D)
        assert plan.new_installs == (TOOL_C,)
        assert plan.declined == ()
        assert plan.to_install == (TOOL_B, TOOL_D, TOOL_C)
        assert len(confirm.prompts) == 1

    def test_up_to_date_never_planned(self, reports):
        """Test up-to-date tools never appear in the plan."""
        plan = plan_installs(reports, confirm=ScriptedConfirm(True), out=io.StringIO())
        assert TOOL_A not in plan.to_install
        assert plan.up_to_date == (TOOL_A,)

    def test_decline_drops_only_new_installs(self, reports):
        """Declining keeps the update partition untouched."""
        plan = plan_installs(reports, confirm=ScriptedConfirm(False), out=io.StringIO())
        assert plan.updates == (TOOL_B, TOOL_D)
        assert plan.new_installs == ()
        assert plan.declined == (TOOL_C,)
        assert plan.to_install == (TOOL_B, TOOL_D)

    @pytest.mark.parametrize("answer", ["n", ""])
    def test_n_and_empty_input_identical(self, reports, answer):
        """Test "n" and empty input produce the same plan."""
        with patch("builtins.input", return_value=answer):
            plan = plan_installs(reports, out=io.StringIO())
        assert plan.to_install == (TOOL_B, TOOL_D)
        assert plan.declined == (TOOL_C,)

    def test_no_prompt_without_new_installs(self):
        """Test the operator is not asked when nothing is missing."""
        confirm = ScriptedConfirm(True)
        plan = plan_installs(
            [report(TOOL_B, ToolStatus.UPDATE_AVAILABLE)],
            confirm=confirm,
            out=io.StringIO(),
        )
        assert confirm.prompts == []
        assert plan.to_install == (TOOL_B,)

    def test_confirmation_hook_called_before_prompt(self, reports):
        """Test the confirmation hook runs before the prompt."""
        events = []

        def confirm(prompt):
            events.append("prompt")
            return True

        plan_installs(reports, confirm=confirm, out=io.StringIO(), on_confirmation=lambda: events.append("hook"))
        assert events == ["hook", "prompt"]

    def test_individual_flag(self):
        """Test individual mode is carried on the plan."""
        plan = plan_installs(
            [report(TOOL_C, ToolStatus.NOT_INSTALLED)],
            confirm=ScriptedConfirm(True),
            individual=True,
            out=io.StringIO(),
        )
        assert plan.individual is True
        assert plan.to_install == (TOOL_C,)

    def test_sections_printed(self, reports):
        """Test every non-empty plan section is printed."""
        out = io.StringIO()
        plan_installs(reports, confirm=ScriptedConfirm(False), out=out)
        text = out.getvalue()
        assert "Already up to date (1 packages)" in text
        assert "Packages with updates available (2 packages)" in text
        assert "New packages to install (1 packages)" in text
        assert "gamma (@example/gamma)" in text
        assert "cancelled by user" in text

    def test_empty_plan(self):
        """Test no reports give an empty plan."""
        plan = plan_installs([], confirm=ScriptedConfirm(), out=io.StringIO())
        assert plan.is_empty


class TestInstallPlan:
    def test_to_dict(self):
        """Test plan serialization lists tool names."""
        plan = InstallPlan(updates=(TOOL_B,), new_installs=(TOOL_C,), declined=(), up_to_date=(TOOL_A,))
        assert plan.to_dict() == {
            "updates": ["beta"],
            "new_installs": ["gamma"],
            "declined": [],
            "up_to_date": ["alpha"],
            "individual": False,
        }
