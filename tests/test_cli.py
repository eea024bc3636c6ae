"""Tests for taskfoundry.cli module."""

import json
import os
import shlex
from datetime import date

from typer.testing import CliRunner

from taskfoundry import __version__
from taskfoundry.cli import app
from taskfoundry.formatters import format_commit_message
from taskfoundry.git import GitError, NoStagedChangesError
from taskfoundry.global_config import get_credential, load_global_config, save_global_config
from taskfoundry.llm import CommitResult, QuotaExceededError, TaskResult
from taskfoundry.llm.exceptions import ExhaustedFallbackError, ProviderError
from taskfoundry.usage import JsonFileUsageStore


runner = CliRunner()

TASK = TaskResult(title="Add login", summary="Adds a login form.", technical="Uses sessions.")
COMMIT = CommitResult(type="feat", scope="auth", description="add login form")
GROQ_KEY = "gsk_" + "a1b2" * 12


def _patch_task_deps(mocker, temp_dir, result=TASK):
    mocker.patch("taskfoundry.cli.task.get_repo_root", return_value=temp_dir)
    mocker.patch("taskfoundry.cli.task.get_diff", return_value="diff --git a/x b/x")
    return mocker.patch("taskfoundry.cli.task.generate", return_value=result)


def _patch_commit_deps(mocker, temp_dir, result=COMMIT):
    mocker.patch("taskfoundry.cli.commit.get_repo_root", return_value=temp_dir)
    mocker.patch("taskfoundry.cli.commit.get_staged_diff", return_value="diff --git a/x b/x")
    return mocker.patch("taskfoundry.cli.commit.generate", return_value=result)


class TestVersion:
    """Tests for the --version flag."""

    def test_prints_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestTaskCommand:
    """Tests for taskfoundry task."""

    def test_prints_markdown(self, mocker, temp_dir, isolated_config):
        _patch_task_deps(mocker, temp_dir)

        result = runner.invoke(app, ["task"])

        assert result.exit_code == 0
        assert "**Title**: Add login" in result.output
        assert "**Technical considerations**: Uses sessions." in result.output

    def test_prints_json(self, mocker, temp_dir, isolated_config):
        _patch_task_deps(mocker, temp_dir)

        result = runner.invoke(app, ["task", "--output", "json"])

        assert result.exit_code == 0
        start = result.output.index("{")
        end = result.output.rindex("}") + 1
        assert json.loads(result.output[start:end])["title"] == "Add login"

    def test_options_reach_generate(self, mocker, temp_dir, isolated_config):
        mock_generate = _patch_task_deps(mocker, temp_dir)

        result = runner.invoke(
            app,
            ["task", "--engine", "openai", "--model", "gpt-4o", "--temperature", "0.5",
             "--max-tokens", "500", "--detailed", "--retry"],
        )

        assert result.exit_code == 0
        kwargs = mock_generate.call_args.kwargs
        assert kwargs["engine"] == "openai"
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["temperature"] == 0.5
        assert kwargs["max_tokens"] == 500
        assert kwargs["detailed"] is True
        assert kwargs["fallback"] is True
        assert kwargs["repo_root"] == temp_dir

    def test_config_file_defaults_apply(self, mocker, temp_dir, isolated_config):
        save_global_config({"engine": "groq", "output": "json"})
        mock_generate = _patch_task_deps(mocker, temp_dir)

        result = runner.invoke(app, ["task"])

        assert result.exit_code == 0
        assert mock_generate.call_args.kwargs["engine"] == "groq"
        assert '"title": "Add login"' in result.output

    def test_staged_and_commit_flags(self, mocker, temp_dir, isolated_config):
        _patch_task_deps(mocker, temp_dir)
        mock_diff = mocker.patch("taskfoundry.cli.task.get_diff", return_value="diff")

        runner.invoke(app, ["task", "--staged", "--commit", "abc123"])

        assert mock_diff.call_args.kwargs["staged"] is True
        assert mock_diff.call_args.kwargs["base"] == "abc123"
        assert mock_diff.call_args.kwargs["repo_root"] == temp_dir

    def test_writes_file(self, mocker, temp_dir, isolated_config):
        _patch_task_deps(mocker, temp_dir)
        out = temp_dir / "task.md"

        result = runner.invoke(app, ["task", "--file", str(out)])

        assert result.exit_code == 0
        assert "Saved to" in result.output
        assert out.read_text().startswith("**Title**: Add login")

    def test_git_error(self, mocker, isolated_config):
        mocker.patch(
            "taskfoundry.cli.task.get_repo_root",
            side_effect=GitError("Not in a git repository."),
        )

        result = runner.invoke(app, ["task"])

        assert result.exit_code == 1
        assert "Not in a git repository" in result.output

    def test_invalid_engine(self, mocker, temp_dir, isolated_config):
        _patch_task_deps(mocker, temp_dir)

        result = runner.invoke(app, ["task", "--engine", "gemini"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_quota_error_shows_hint(self, mocker, temp_dir, isolated_config):
        mock_generate = _patch_task_deps(mocker, temp_dir)
        mock_generate.side_effect = QuotaExceededError("Free tier limit reached!")

        result = runner.invoke(app, ["task"])

        assert result.exit_code == 1
        assert "Free tier limit reached" in result.output
        assert "taskfoundry config set-key groq" in result.output

    def test_exhausted_rate_limit_hint(self, mocker, temp_dir, isolated_config):
        mock_generate = _patch_task_deps(mocker, temp_dir)
        mock_generate.side_effect = ExhaustedFallbackError(
            [("groq", ProviderError("Groq API error (429): slow down"))], has_credentials=True
        )

        result = runner.invoke(app, ["task"])

        assert result.exit_code == 1
        assert "Rate limit hit" in result.output

    def test_auth_hint(self, mocker, temp_dir, isolated_config):
        mock_generate = _patch_task_deps(mocker, temp_dir)
        mock_generate.side_effect = ProviderError("OpenAI API error (401): bad key")

        result = runner.invoke(app, ["task"])

        assert result.exit_code == 1
        assert "Authentication failed" in result.output


class TestCommitCommand:
    """Tests for taskfoundry commit."""

    def test_prints_message_and_usage(self, mocker, temp_dir, isolated_config):
        _patch_commit_deps(mocker, temp_dir)

        result = runner.invoke(app, ["commit"])

        assert result.exit_code == 0
        assert "feat(auth): add login form" in result.output
        assert "git commit -m 'feat(auth): add login form'" in result.output

    def test_usage_command_is_shell_safe(self, mocker, temp_dir, isolated_config):
        commit = CommitResult(
            type="fix",
            description='quote "paths" in $HOME',
            body="Runs `git add` first.\nSecond line.",
        )
        _patch_commit_deps(mocker, temp_dir, result=commit)

        result = runner.invoke(app, ["commit"])

        assert result.exit_code == 0
        command = result.output.split("   git commit -m ", 1)[1].rstrip("\n")
        assert shlex.split(command) == [format_commit_message(commit)]

    def test_hints_reach_generate(self, mocker, temp_dir, isolated_config):
        mock_generate = _patch_commit_deps(mocker, temp_dir)

        result = runner.invoke(
            app, ["commit", "--type", "FIX", "--scope", "api", "--breaking", "--engine", "groq"]
        )

        assert result.exit_code == 0
        kwargs = mock_generate.call_args.kwargs
        assert kwargs["commit_mode"] is True
        assert kwargs["type"] == "fix"
        assert kwargs["scope"] == "api"
        assert kwargs["breaking"] is True
        assert kwargs["engine"] == "groq"

    def test_invalid_type(self, mocker, temp_dir, isolated_config):
        mock_generate = _patch_commit_deps(mocker, temp_dir)

        result = runner.invoke(app, ["commit", "--type", "feature"])

        assert result.exit_code == 2
        mock_generate.assert_not_called()

    def test_writes_file(self, mocker, temp_dir, isolated_config):
        _patch_commit_deps(mocker, temp_dir)
        out = temp_dir / "COMMIT_MSG"

        result = runner.invoke(app, ["commit", "--file", str(out)])

        assert result.exit_code == 0
        assert out.read_text() == "feat(auth): add login form\n"
        assert f"git commit -F {out}" in result.output

    def test_no_staged_changes(self, mocker, temp_dir, isolated_config):
        mocker.patch("taskfoundry.cli.commit.get_repo_root", return_value=temp_dir)
        mocker.patch(
            "taskfoundry.cli.commit.get_staged_diff",
            side_effect=NoStagedChangesError("No staged changes found."),
        )

        result = runner.invoke(app, ["commit"])

        assert result.exit_code == 1
        assert "No staged changes" in result.output


class TestConfigCommands:
    """Tests for taskfoundry config subcommands."""

    def test_show_masks_keys(self, mocker, isolated_config):
        mocker.patch("taskfoundry.cli.config.get_repo_root_safe", return_value=None)
        mocker.patch.dict(os.environ, {"GROQ_API_KEY": "gsk_1234567890abcdef"}, clear=True)

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "Engine: auto" in result.output
        assert "gsk_1234...cdef [environment]" in result.output
        assert "gsk_1234567890abcdef" not in result.output
        assert "openai (OPENAI_API_KEY): not set" in result.output

    def test_set_key(self, isolated_config):
        result = runner.invoke(app, ["config", "set-key", "groq"], input=GROQ_KEY + "\n")

        assert result.exit_code == 0
        assert get_credential("GROQ_API_KEY") == GROQ_KEY
        assert "does not look like" not in result.output

    def test_set_key_malformed_declined(self, isolated_config):
        result = runner.invoke(app, ["config", "set-key", "groq"], input="gsk-typo\nn\n")

        assert result.exit_code == 1
        assert "does not look like a valid groq API key" in result.output
        assert get_credential("GROQ_API_KEY") is None

    def test_set_key_malformed_confirmed(self, isolated_config):
        result = runner.invoke(app, ["config", "set-key", "openai"], input="custom-gateway-key\ny\n")

        assert result.exit_code == 0
        assert "does not look like a valid openai API key" in result.output
        assert get_credential("OPENAI_API_KEY") == "custom-gateway-key"

    def test_set_key_invalid_provider(self, isolated_config):
        result = runner.invoke(app, ["config", "set-key", "gemini"])

        assert result.exit_code == 1
        assert "Invalid provider" in result.output

    def test_set_value(self, isolated_config):
        result = runner.invoke(app, ["config", "set", "temperature", "0.4"])

        assert result.exit_code == 0
        assert load_global_config()["temperature"] == 0.4

    def test_set_invalid_value(self, isolated_config):
        result = runner.invoke(app, ["config", "set", "engine", "gemini"])

        assert result.exit_code == 1
        assert load_global_config() == {}

    def test_set_unknown_key(self, isolated_config):
        result = runner.invoke(app, ["config", "set", "colour", "blue"])

        assert result.exit_code == 1
        assert "Unknown config key" in result.output

    def test_reset(self, isolated_config):
        save_global_config({"engine": "openai"})

        result = runner.invoke(app, ["config", "reset", "--yes"])

        assert result.exit_code == 0
        assert load_global_config()["engine"] == "auto"


class TestUsageCommand:
    """Tests for taskfoundry usage."""

    def test_shows_counters(self, isolated_config):
        result = runner.invoke(app, ["usage"])

        assert result.exit_code == 0
        assert "0/50 requests" in result.output
        assert "0/1000 requests" in result.output
        assert "Remaining: 50" in result.output

    def test_reads_usage_file(self, isolated_config):
        today = date.today()
        JsonFileUsageStore().save(
            {
                "day_count": 3,
                "month_count": 9,
                "last_day_key": today.isoformat(),
                "last_month_key": today.strftime("%Y-%m"),
            }
        )

        result = runner.invoke(app, ["usage"])

        assert "3/50 requests" in result.output
        assert "9/1000 requests" in result.output
