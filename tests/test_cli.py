"""
Tests for the synctivity CLI commands.
"""

import json
import pytest
import yaml
from click.testing import CliRunner

from synctivity.cli import cli
from synctivity.config import get_base_dir
from synctivity.exit_codes import (
    DATA_ERROR, NO_REPOS_FOUND, PRECONDITION_FAILED, USAGE_ERROR
)

from conftest import EMPTY_TREE_ID, git


ME = "me@example.com"


def json_lines(output):
    """Parse the JSON objects in CLI output, skipping stderr noise."""
    return [json.loads(line) for line in output.splitlines() if line.startswith('{')]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def workspace(tmp_path, make_repo):
    """Two source repositories under src/ and an empty out/ directory."""
    alpha = make_repo(tmp_path / "src" / "alpha")
    alpha.commit(ME, "alpha one")
    alpha.commit("someone@example.com", "not mine")
    alpha.commit(ME, "alpha two")
    beta = make_repo(tmp_path / "src" / "beta")
    beta.commit(ME, "beta one")
    (tmp_path / "out").mkdir()
    return tmp_path


def sync_args(workspace, *extra):
    return ['sync', '-i', str(workspace / "src"), '-o', str(workspace / "out"),
            '-n', 'Me Myself', '-e', ME, *extra]


class TestSyncCommand:
    """Tests for `synctivity sync`."""

    def test_sync_end_to_end(self, runner, workspace, log_target):
        result = runner.invoke(cli, sync_args(workspace))

        assert result.exit_code == 0, result.output
        assert "Synced 2 commit(s) from alpha." in result.output
        assert "Synced 1 commit(s) from beta." in result.output

        log = log_target(workspace / "out" / "synctivity")
        assert [entry['message'] for entry in log] == ["alpha one", "beta one", "alpha two"]
        assert all(entry['tree'] == EMPTY_TREE_ID for entry in log)
        assert all(entry['author'] == "Me Myself" for entry in log)

    def test_sync_original_signing(self, runner, workspace, log_target):
        result = runner.invoke(cli, sync_args(workspace, '--signing', 'original'))

        assert result.exit_code == 0, result.output
        log = log_target(workspace / "out" / "synctivity")
        assert all(entry['author'] == "Dev" for entry in log)

    def test_sync_json_output(self, runner, workspace):
        result = runner.invoke(cli, sync_args(workspace, '--json'))

        assert result.exit_code == 0, result.output
        lines = json_lines(result.output)
        assert {'progress': "Synced 1 commit(s) from beta."} in lines
        summary = lines[-1]
        assert summary['type'] == 'summary'
        assert summary['total'] == 3
        assert summary['signing'] == 'identity'
        assert summary['identity'] == {'name': 'Me Myself', 'emails': [ME]}
        assert [s['name'] for s in summary['sources']] == ['alpha', 'beta']

    def test_sync_pretty_table(self, runner, workspace):
        result = runner.invoke(cli, sync_args(workspace, '--pretty'))

        assert result.exit_code == 0, result.output
        assert "Total" in result.output
        assert "beta" in result.output

    def test_sync_quiet(self, runner, workspace):
        result = runner.invoke(cli, sync_args(workspace, '--quiet'))

        assert result.exit_code == 0
        assert "Synced" not in result.output

    def test_comma_delimited_emails(self, runner, workspace, log_target):
        result = runner.invoke(cli, [
            'sync', '-i', str(workspace / "src"), '-o', str(workspace / "out"),
            '-n', 'Me Myself', '-e', f"primary@example.com, {ME}",
        ])

        assert result.exit_code == 0, result.output
        log = log_target(workspace / "out" / "synctivity")
        assert len(log) == 3
        assert all(entry['email'] == "primary@example.com" for entry in log)

    def test_author_from_config(self, runner, workspace):
        base = get_base_dir()
        base.mkdir(parents=True)
        (base / "config.yaml").write_text(yaml.safe_dump({
            'author': {'name': 'Configured', 'emails': [ME]},
        }))

        result = runner.invoke(cli, [
            'sync', '-i', str(workspace / "src"), '-o', str(workspace / "out"),
        ])

        assert result.exit_code == 0, result.output
        assert git(workspace / "out" / "synctivity", "log", "-1", "--format=%an") == "Configured"

    def test_author_from_global_git_config(self, runner, workspace):
        git(workspace, "config", "--global", "user.name", "Global Me")
        git(workspace, "config", "--global", "user.email", ME)

        result = runner.invoke(cli, [
            'sync', '-i', str(workspace / "src"), '-o', str(workspace / "out"),
        ])

        assert result.exit_code == 0, result.output
        assert git(workspace / "out" / "synctivity", "log", "-1", "--format=%an") == "Global Me"

    def test_default_target_in_base_dir(self, runner, workspace):
        result = runner.invoke(cli, [
            'sync', '-i', str(workspace / "src"), '-n', 'Me', '-e', ME,
        ])

        assert result.exit_code == 0, result.output
        assert git(get_base_dir() / "repo", "rev-list", "--count", "HEAD") == "3"

    def test_invalid_email(self, runner, workspace):
        result = runner.invoke(cli, sync_args(workspace, '-e', 'not-an-email'))

        assert result.exit_code == DATA_ERROR
        assert "not a valid email address" in result.output
        assert not (workspace / "out" / "synctivity").exists()

    def test_missing_name(self, runner, workspace):
        result = runner.invoke(cli, [
            'sync', '-i', str(workspace / "src"), '-o', str(workspace / "out"), '-e', ME,
        ])
        assert result.exit_code == DATA_ERROR
        assert "author name is required" in result.output

    def test_blank_name(self, runner, workspace):
        result = runner.invoke(cli, [
            'sync', '-i', str(workspace / "src"), '-o', str(workspace / "out"),
            '-n', '   ', '-e', ME,
        ])
        assert result.exit_code == DATA_ERROR
        assert not (workspace / "out" / "synctivity").exists()

    def test_single_email_from_env(self, runner, workspace, monkeypatch):
        monkeypatch.setenv('SYNCTIVITY_AUTHOR_EMAILS', ME)

        result = runner.invoke(cli, [
            'sync', '-i', str(workspace / "src"), '-o', str(workspace / "out"), '-n', 'Me',
        ])

        assert result.exit_code == 0, result.output
        assert git(workspace / "out" / "synctivity", "rev-list", "--count", "HEAD") == "3"

    def test_missing_email(self, runner, workspace):
        result = runner.invoke(cli, [
            'sync', '-i', str(workspace / "src"), '-o', str(workspace / "out"), '-n', 'Me',
        ])
        assert result.exit_code == DATA_ERROR
        assert "at least one email" in result.output

    def test_missing_input_dir(self, runner, workspace):
        result = runner.invoke(cli, [
            'sync', '-i', str(workspace / "nope"), '-o', str(workspace / "out"),
            '-n', 'Me', '-e', ME,
        ])
        assert result.exit_code == USAGE_ERROR

    def test_missing_output_dir(self, runner, workspace):
        result = runner.invoke(cli, [
            'sync', '-i', str(workspace / "src"), '-o', str(workspace / "nope"),
            '-n', 'Me', '-e', ME,
        ])
        assert result.exit_code == USAGE_ERROR

    def test_no_repositories(self, runner, tmp_path):
        (tmp_path / "empty").mkdir()
        result = runner.invoke(cli, [
            'sync', '-i', str(tmp_path / "empty"), '-o', str(tmp_path),
            '-n', 'Me', '-e', ME,
        ])

        assert result.exit_code == NO_REPOS_FOUND
        assert not (tmp_path / "synctivity").exists()

    def test_existing_history(self, runner, workspace, make_repo):
        existing = make_repo(workspace / "out" / "synctivity")
        head = existing.commit(ME, "already here")

        result = runner.invoke(cli, sync_args(workspace))

        assert result.exit_code == PRECONDITION_FAILED
        assert "existing repository history" in result.output
        assert existing.head() == head

    def test_error_as_json(self, runner, tmp_path):
        (tmp_path / "empty").mkdir()
        result = runner.invoke(cli, [
            'sync', '-i', str(tmp_path / "empty"), '-o', str(tmp_path),
            '-n', 'Me', '-e', ME, '--json',
        ])

        error = json_lines(result.output)[-1]
        assert error['type'] == 'NoReposFoundError'
        assert error['exit_code'] == NO_REPOS_FOUND

    def test_duplicate_notice(self, runner, tmp_path, make_repo):
        first = make_repo(tmp_path / "src" / "a", remote="https://example.com/shared.git")
        first.commit(ME, "one")
        second = make_repo(tmp_path / "src" / "b", remote="https://example.com/shared.git")
        second.commit(ME, "two")

        result = runner.invoke(cli, [
            'sync', '-i', str(tmp_path / "src"), '-o', str(tmp_path),
            '-n', 'Me', '-e', ME,
        ])

        assert result.exit_code == 0, result.output
        assert "Ignoring duplicate repository at https://example.com/shared.git." in result.output
        assert git(tmp_path / "synctivity", "rev-list", "--count", "HEAD") == "1"


class TestSetupCommand:
    """Tests for `synctivity setup`."""

    def test_setup_creates_target(self, runner):
        result = runner.invoke(cli, ['setup'])

        assert result.exit_code == 0, result.output
        target = get_base_dir() / "repo"
        assert "Created target repository" in result.output
        assert (target / ".git").is_dir()
        assert git(target, "symbolic-ref", "HEAD") == "refs/heads/main"

    def test_setup_twice(self, runner):
        runner.invoke(cli, ['setup'])
        result = runner.invoke(cli, ['setup'])

        assert result.exit_code == 0
        assert "Already set up" in result.output

    def test_setup_saves_author(self, runner):
        result = runner.invoke(cli, ['setup', '-n', 'Jane Doe', '-e', 'jane@example.com,jd@example.com'])

        assert result.exit_code == 0, result.output
        saved = yaml.safe_load((get_base_dir() / "config.yaml").read_text())
        assert saved['author'] == {'name': 'Jane Doe', 'emails': ['jane@example.com', 'jd@example.com']}

    def test_setup_rejects_bad_email(self, runner):
        result = runner.invoke(cli, ['setup', '-n', 'Jane', '-e', 'jane'])

        assert result.exit_code == DATA_ERROR
        assert not (get_base_dir() / "config.yaml").exists()

    def test_setup_requires_author_name(self, runner):
        result = runner.invoke(cli, ['setup', '-n', '  ', '-e', 'jane@example.com'])

        assert result.exit_code == DATA_ERROR
        assert "author name is required" in result.output
        assert not (get_base_dir() / "config.yaml").exists()

    def test_setup_with_single_email_from_env(self, runner, monkeypatch):
        monkeypatch.setenv('SYNCTIVITY_AUTHOR_EMAILS', 'jane@example.com')

        result = runner.invoke(cli, ['setup', '-n', 'Jane'])

        assert result.exit_code == 0, result.output
        saved = yaml.safe_load((get_base_dir() / "config.yaml").read_text())
        assert saved['author'] == {'name': 'Jane', 'emails': ['jane@example.com']}


class TestCliGroup:
    """Tests for the top-level command group."""

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert "sync" in result.output
        assert "setup" in result.output

    def test_sync_help(self, runner):
        result = runner.invoke(cli, ['sync', '--help'])
        assert result.exit_code == 0
        assert "--input-dir" in result.output
        assert "--signing" in result.output
