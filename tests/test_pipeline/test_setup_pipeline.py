"""Tests for the setup pipeline: git and compose are mocked."""

from pathlib import Path
from unittest.mock import MagicMock, call, patch

import pytest

from lila_docker.config.models import Configuration
from lila_docker.ops.base import StepError
from lila_docker.ops.compose import ComposeClient
from lila_docker.ops.git import GitClient
from lila_docker.pipeline.result import PipelineState
from lila_docker.pipeline.setup import (
    STEP_ASSETS,
    STEP_BUILD,
    STEP_CLONE,
    STEP_SEED,
    STEP_START,
    STEP_SUBMODULES,
    build_setup_pipeline,
    seed_command,
)

STEP_ORDER = [
    STEP_CLONE,
    STEP_SUBMODULES,
    STEP_BUILD,
    STEP_ASSETS,
    STEP_START,
    STEP_SEED,
]


def _make_git(existing=()):
    git = MagicMock(spec=GitClient)
    git.is_repository.side_effect = lambda path: path.name in existing
    return git


def _run(config, git=None, compose=None):
    git = git or _make_git()
    compose = compose or MagicMock(spec=ComposeClient)
    result = build_setup_pipeline(config, git=git, compose=compose).run()
    return result, git, compose


@pytest.fixture
def full_config(tmp_path: Path) -> Configuration:
    return Configuration(
        repos_dir=str(tmp_path / "repos"),
        repos=["lila", "lila-search"],
        profiles=["search"],
        setup_database=True,
        su_password="password",
        password="password",
    )


@pytest.fixture
def empty_config(tmp_path: Path) -> Configuration:
    return Configuration(repos_dir=str(tmp_path / "repos"))


class TestFullSelection:
    def test_steps_run_in_order(self, full_config):
        result, _, _ = _run(full_config)
        assert [o.name for o in result.outcomes] == STEP_ORDER
        assert result.state is PipelineState.COMPLETED
        assert result.all_succeeded

    def test_clones_each_repository(self, full_config, tmp_path):
        result, git, _ = _run(full_config)
        repos_dir = tmp_path / "repos"
        assert git.clone.call_args_list == [
            call("https://github.com/lichess-org/lila.git", repos_dir / "lila"),
            call("https://github.com/lichess-org/lila-search.git", repos_dir / "lila-search"),
        ]
        assert repos_dir.is_dir()
        assert result.outcome(STEP_CLONE).detail == "2 cloned, 0 already present"

    def test_submodules_for_primary_repository(self, full_config, tmp_path):
        _, git, _ = _run(full_config)
        git.init_submodules.assert_called_once_with(tmp_path / "repos" / "lila")

    def test_profiles_passed_to_build_and_up(self, full_config):
        _, _, compose = _run(full_config)
        compose.build.assert_called_once_with(["search"])
        compose.up.assert_called_once_with(["search"])

    def test_exactly_one_profile_flag_issued(self, full_config):
        with patch("lila_docker.ops.base.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            build_setup_pipeline(
                full_config, git=_make_git(), compose=ComposeClient(Path("/p"))
            ).run()
        commands = [c[0][0] for c in mock_run.call_args_list]
        build = next(cmd for cmd in commands if cmd[-1] == "build")
        up = next(cmd for cmd in commands if cmd[-2:] == ["up", "-d"])
        for cmd in (build, up):
            assert cmd.count("--profile") == 1
            assert cmd[cmd.index("--profile") + 1] == "search"

    def test_assets_compiled_in_ui_container(self, full_config):
        _, _, compose = _run(full_config)
        assert call("ui", "/lila/ui/build") in compose.run.call_args_list

    def test_database_seeded(self, full_config):
        _, _, compose = _run(full_config)
        service, command, profiles = compose.run.call_args_list[-1][0]
        assert service == "python"
        assert "spamdb.py" in command
        assert profiles == ["search"]


class TestChessgroundAssets:
    @pytest.fixture
    def chessground_config(self, tmp_path: Path) -> Configuration:
        return Configuration(
            repos_dir=str(tmp_path / "repos"),
            repos=["lila", "chessground"],
            profiles=["chessground"],
        )

    def test_compiled_after_lila_ui(self, chessground_config):
        result, _, compose = _run(chessground_config)
        assert compose.run.call_args_list == [
            call("ui", "/lila/ui/build"),
            call("ui", "cd /chessground && pnpm install && pnpm run compile"),
        ]
        assert result.outcome(STEP_ASSETS).detail == "compiled lila ui, chessground"

    def test_not_compiled_without_repository(self, full_config):
        _, _, compose = _run(full_config)
        commands = [c[0][1] for c in compose.run.call_args_list]
        assert not any("chessground" in command for command in commands)

    def test_lila_ui_failure_still_compiles_chessground(self, chessground_config):
        compose = MagicMock(spec=ComposeClient)
        compose.run.side_effect = [StepError("ui build failed"), None]
        result, _, _ = _run(chessground_config, compose=compose)

        assets = result.outcome(STEP_ASSETS)
        assert assets.status == "failed"
        assert assets.detail == "Failed to compile: lila ui"
        assert compose.run.call_count == 2
        assert result.outcome(STEP_START).status == "success"


class TestNoSelection:
    def test_completes_with_no_clones(self, empty_config):
        result, git, _ = _run(empty_config)
        assert result.state is PipelineState.COMPLETED
        assert result.total == 6
        git.clone.assert_not_called()
        assert result.outcome(STEP_CLONE).status == "success"

    def test_submodules_and_seed_skipped(self, empty_config):
        result, git, _ = _run(empty_config)
        git.init_submodules.assert_not_called()
        assert result.outcome(STEP_SUBMODULES).status == "skipped"
        assert result.outcome(STEP_SEED).status == "skipped"

    def test_compose_runs_without_profiles(self, empty_config):
        result, _, compose = _run(empty_config)
        compose.build.assert_called_once_with([])
        compose.up.assert_called_once_with([])
        compose.run.assert_called_once_with("ui", "/lila/ui/build")
        assert result.failed == 0


class TestFailureIsolation:
    def test_failed_clone_continues(self, full_config):
        git = _make_git()
        git.clone.side_effect = [None, StepError("network down")]
        result, _, compose = _run(full_config, git=git)

        clone = result.outcome(STEP_CLONE)
        assert clone.status == "failed"
        assert "lila-search" in clone.detail
        # lila itself was cloned, so its submodules are still initialized
        assert result.outcome(STEP_SUBMODULES).status == "success"
        compose.build.assert_called_once()
        compose.up.assert_called_once()
        assert result.state is PipelineState.COMPLETED

    def test_primary_clone_failure_skips_submodules(self, full_config):
        git = _make_git()
        git.clone.side_effect = [StepError("auth failed"), None]
        result, _, _ = _run(full_config, git=git)
        git.init_submodules.assert_not_called()
        assert result.outcome(STEP_SUBMODULES).status == "skipped"

    def test_existing_checkout_is_not_recloned(self, full_config):
        git = _make_git(existing={"lila"})
        result, _, _ = _run(full_config, git=git)
        assert git.clone.call_count == 1
        assert result.outcome(STEP_CLONE).detail == "1 cloned, 1 already present"
        git.init_submodules.assert_called_once()

    @patch("lila_docker.ops.git.time.sleep")
    def test_failed_clone_keeps_user_files(self, mock_sleep, full_config, tmp_path):
        notes = tmp_path / "repos" / "lila" / "my-notes.txt"
        notes.parent.mkdir(parents=True)
        notes.write_text("keep me")

        with patch("lila_docker.ops.base.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=128)
            result = build_setup_pipeline(
                full_config, git=GitClient(), compose=MagicMock(spec=ComposeClient)
            ).run()

        assert notes.read_text() == "keep me"
        assert result.outcome(STEP_CLONE).status == "failed"
        assert result.state is PipelineState.COMPLETED

    def test_every_compose_step_failing(self, full_config):
        compose = MagicMock(spec=ComposeClient)
        compose.build.side_effect = StepError("build failed")
        compose.run.side_effect = StepError("run failed")
        compose.up.side_effect = StepError("up failed")
        result, _, _ = _run(full_config, compose=compose)

        assert result.state is PipelineState.COMPLETED
        assert [o.status for o in result.outcomes] == [
            "success", "success", "failed", "failed", "failed", "failed",
        ]
        assert result.outcome(STEP_START).detail == "up failed"

    def test_uncreatable_repos_dir(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        config = Configuration(repos_dir=str(blocker / "repos"), repos=["lila"])
        result, git, _ = _run(config)
        assert result.outcome(STEP_CLONE).status == "failed"
        git.clone.assert_not_called()
        assert result.state is PipelineState.COMPLETED


class TestSeedCommand:
    def test_passwords_included(self, full_config):
        command = seed_command(full_config)
        assert "--password=password" in command
        assert "--su-password=password" in command
        assert "requirements.txt" in command

    def test_elasticsearch_only_with_search(self, tmp_path):
        config = Configuration(
            repos_dir=str(tmp_path),
            setup_database=True,
            su_password="a",
            password="b",
        )
        assert "--es" not in seed_command(config)

    def test_passwords_are_shell_quoted(self, tmp_path):
        config = Configuration(
            repos_dir=str(tmp_path),
            setup_database=True,
            su_password="it's",
            password="b c",
        )
        command = seed_command(config)
        assert "'--password=b c'" in command
