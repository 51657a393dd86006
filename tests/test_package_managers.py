"""
Tests for the package manager definition (ai_tools_updater/package_managers.py).
"""

import pytest

from ai_tools_updater.package_managers import NPM
from conftest import npm_list_json


class TestCommands:
    """Tests for command templates."""

    def test_list_command(self):
        """Test the global list command."""
        assert NPM.list_command("@google/gemini-cli") == (
            "npm", "list", "-g", "@google/gemini-cli", "--depth=0", "--json",
        )

    def test_view_command(self):
        """Test the registry view command."""
        assert NPM.view_command("@openai/codex") == ("npm", "view", "@openai/codex", "version")

    def test_install_single(self):
        """Test installing one package."""
        assert NPM.install_command(["@kilocode/cli"]) == ("npm", "install", "-g", "@kilocode/cli")

    def test_install_many_keeps_order(self):
        """Test a bulk install keeps package order."""
        cmd = NPM.install_command(["@b/b", "@a/a"])
        assert cmd == ("npm", "install", "-g", "@b/b", "@a/a")

    def test_install_empty_rejected(self):
        """Test an install with no packages raises ValueError."""
        with pytest.raises(ValueError):
            NPM.install_command([])

    def test_cache_clean(self):
        """Test the cache clean command."""
        assert NPM.cache_clean_command == ("npm", "cache", "clean", "--force")

    def test_manual_install_hint(self):
        """Test the manual install command text."""
        assert NPM.manual_install_hint("@github/copilot") == "npm install -g @github/copilot"


class TestParseListOutput:
    """Tests for reading the global listing."""

    def test_installed(self):
        """Test the installed version is read from list JSON."""
        output = npm_list_json("@openai/codex", "0.46.0")
        assert NPM.parse_list_output(output, "@openai/codex") == "0.46.0"

    def test_other_package_only(self):
        """Test a listing without the package gives None."""
        output = npm_list_json("@openai/codex", "0.46.0")
        assert NPM.parse_list_output(output, "@google/gemini-cli") is None

    @pytest.mark.parametrize("output", [
        "",
        "not json",
        "[]",
        '{"dependencies": []}',
        '{"dependencies": {"@x/y": "1.0.0"}}',
        '{"dependencies": {"@x/y": {"version": ""}}}',
        '{"dependencies": {"@x/y": {"version": 3}}}',
        '{}',
    ])
    def test_malformed(self, output):
        """Test malformed list output gives None."""
        assert NPM.parse_list_output(output, "@x/y") is None


class TestParseViewOutput:
    def test_plain(self):
        """Test a plain version line."""
        assert NPM.parse_view_output("2.0.14\n") == "2.0.14"

    def test_empty(self):
        """Test empty view output gives None."""
        assert NPM.parse_view_output("") is None
        assert NPM.parse_view_output("  \n") is None
        assert NPM.parse_view_output(None) is None

    def test_warning_lines_ignored(self):
        """Test npm warnings before the version are skipped."""
        output = "npm warn config production Use `--omit=dev` instead.\n1.2.3\n"
        assert NPM.parse_view_output(output) == "1.2.3"
