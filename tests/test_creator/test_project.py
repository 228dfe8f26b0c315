"""Unit tests for project creation (devtool.creator.project).

Tests cover:
- Repository source classification (full URL, shorthand, preset, errors)
- Cache directory naming
- validate(): project path, info(), error messages
- create(): clone + copy, cache reuse, refresh, existing project
- Short-circuit: no commands once an error is recorded
- install() and the exec notification callback
- delete_dir guard
"""

from __future__ import annotations

import shlex
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from devtool.creator.project import (
    ProjectCreator,
    RepositorySource,
    SourceKind,
    repo_cache_name,
    resolve_source,
)
from devtool.errors import (
    InvalidRepoAddress,
    InvalidTypeName,
    MissingRequiredInput,
    MissingSource,
    ShellCommandFailed,
    TargetExists,
    WriteError,
)

HTTP_PRESET_URL = "https://github.com/swoft-cloud/swoft-http-project.git"


def _creator(work_dir: Path, cache_dir: Path, **kwargs) -> ProjectCreator:
    kwargs.setdefault("name", "demo")
    kwargs.setdefault("type", "http")
    return ProjectCreator(work_dir=work_dir, cache_dir=cache_dir, **kwargs)


# ---------------------------------------------------------------------------
# resolve_source
# ---------------------------------------------------------------------------


class TestResolveSource:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/a/b.git",
            "http://git.example.com/a/b.git",
            "git@github.com:a/b.git",
        ],
    )
    def test_full_url_kept(self, url: str):
        assert resolve_source(repo=url) == RepositorySource(SourceKind.EXPLICIT_URL, url, url)

    @pytest.mark.unit
    def test_shorthand_expanded(self):
        source = resolve_source(repo="user/repo")
        assert source.kind is SourceKind.SHORTHAND
        assert source.resolved_url == "https://github.com/user/repo.git"

    @pytest.mark.unit
    @pytest.mark.parametrize("repo", ["not a repo", "/leading-slash"])
    def test_invalid_repo(self, repo: str):
        with pytest.raises(InvalidRepoAddress, match="invalid 'repo' address"):
            resolve_source(repo=repo)

    @pytest.mark.unit
    @pytest.mark.parametrize("type_name", ["http", "tcp", "rpc", "ws"])
    def test_presets(self, type_name: str):
        source = resolve_source(type_name=type_name)
        assert source.kind is SourceKind.NAMED_PRESET
        assert source.resolved_url == f"https://github.com/swoft-cloud/swoft-{type_name}-project.git"

    @pytest.mark.unit
    def test_invalid_type(self):
        with pytest.raises(InvalidTypeName) as exc_info:
            resolve_source(type_name="bogus")
        assert str(exc_info.value) == "invalid 'type' name: bogus, allow: http, ws, tcp, rpc"

    @pytest.mark.unit
    def test_repo_wins_over_type(self):
        assert resolve_source(repo="user/repo", type_name="http").kind is SourceKind.SHORTHAND

    @pytest.mark.unit
    def test_missing_both(self):
        with pytest.raises(MissingSource, match="missing 'repo' or 'type' setting"):
            resolve_source()


class TestRepoCacheName:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            (HTTP_PRESET_URL, "swoft-http-project"),
            ("git@github.com:user/thing.git", "thing"),
            ("git@host:thing.git", "thing"),
            ("https://example.com/user/plain/", "plain"),
        ],
    )
    def test_names(self, url: str, expected: str):
        assert repo_cache_name(url) == expected


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


class TestValidate:
    @pytest.mark.unit
    def test_project_path_joined(self):
        pcr = ProjectCreator(name="demo", type="http", work_dir="/tmp/x")
        assert pcr.validate() is True
        assert pcr.project_path == "/tmp/x/demo"
        assert pcr.repo_url == HTTP_PRESET_URL

    @pytest.mark.unit
    def test_project_path_without_work_dir(self):
        pcr = ProjectCreator(name="demo", type="http")
        assert pcr.validate() is True
        assert pcr.project_path == "demo"

    @pytest.mark.unit
    def test_name_is_trimmed(self):
        pcr = ProjectCreator(name=" demo/ ", type="http", work_dir="/tmp/x")
        pcr.validate()
        assert pcr.project_path == "/tmp/x/demo"

    @pytest.mark.unit
    def test_missing_name(self):
        pcr = ProjectCreator(type="http")
        assert pcr.validate() is False
        assert isinstance(pcr.failure, MissingRequiredInput)
        assert pcr.error == "please set the new project name"
        assert pcr.project_path == ""

    @pytest.mark.unit
    def test_invalid_type_recorded(self):
        pcr = ProjectCreator(name="demo", type="bogus")
        assert pcr.validate() is False
        assert isinstance(pcr.failure, InvalidTypeName)

    @pytest.mark.unit
    def test_info_drops_empty_fields(self, tmp_path: Path):
        pcr = ProjectCreator(name="demo", type="http", work_dir="/tmp/x", cache_dir=tmp_path)
        pcr.validate()
        info = pcr.info()
        assert info["repoUrl"] == HTTP_PRESET_URL
        assert info["projectPath"] == "/tmp/x/demo"
        assert "repo" not in info


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


class TestCreate:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_clone_then_copy(self, work_dir: Path, cache_dir: Path, command_recorder):
        pcr = _creator(work_dir, cache_dir)
        assert pcr.validate()

        await pcr.create()

        cached = cache_dir / "swoft-http-project"
        target = shlex.quote(str(work_dir / "demo"))
        assert pcr.error == ""
        assert command_recorder.commands == [
            f"cd {shlex.quote(str(cache_dir))} && git clone --no-tags --depth 1 {HTTP_PRESET_URL}",
            f"cp -R {shlex.quote(str(cached))} {target} && rm -rf {target}/.git",
        ]
        assert cache_dir.is_dir()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cached_repo_reused(self, work_dir: Path, cache_dir: Path, command_recorder):
        (cache_dir / "swoft-http-project").mkdir(parents=True)
        pcr = _creator(work_dir, cache_dir)

        await pcr.create()

        assert len(command_recorder.commands) == 1
        assert command_recorder.commands[0].startswith("cp -R ")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_refresh_deletes_and_reclones(self, work_dir: Path, cache_dir: Path, command_recorder):
        cached = cache_dir / "swoft-http-project"
        cached.mkdir(parents=True)
        pcr = _creator(work_dir, cache_dir, refresh=True)

        await pcr.create()

        assert [cmd.split(" ")[0] for cmd in command_recorder.commands] == ["rm", "cd", "cp"]
        assert command_recorder.commands[0] == f"rm -rf {shlex.quote(str(cached))}"
        assert "git clone" in command_recorder.commands[1]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_existing_project_dir(self, work_dir: Path, cache_dir: Path, command_recorder):
        (work_dir / "demo").mkdir()
        pcr = _creator(work_dir, cache_dir)

        await pcr.create()

        assert isinstance(pcr.failure, TargetExists)
        assert pcr.error == "the project dir has been exist!"
        assert command_recorder.commands == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unusable_cache_dir_recorded(self, work_dir: Path, tmp_path: Path, command_recorder):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a dir", encoding="utf-8")
        pcr = _creator(work_dir, blocker / "cache")

        await pcr.create()
        await pcr.install()

        assert isinstance(pcr.failure, WriteError)
        assert pcr.failure.path == str(blocker / "cache")
        assert command_recorder.commands == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_clone_failure_stops_workflow(self, work_dir: Path, cache_dir: Path, command_recorder):
        command_recorder.results["git clone"] = (128, "", "fatal: repository not found")
        pcr = _creator(work_dir, cache_dir, no_install=False)

        await pcr.create()
        await pcr.install()

        assert isinstance(pcr.failure, ShellCommandFailed)
        assert pcr.error == "exec command fail: fatal: repository not found"
        assert len(command_recorder.commands) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_refresh_delete_failure(self, work_dir: Path, cache_dir: Path, command_recorder):
        (cache_dir / "swoft-http-project").mkdir(parents=True)
        command_recorder.results["rm -rf"] = (1, "", "permission denied")
        pcr = _creator(work_dir, cache_dir, refresh=True)

        await pcr.create()

        assert pcr.failure.returncode == 1
        assert len(command_recorder.commands) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_commands_after_validation_error(self, work_dir: Path, cache_dir: Path, command_recorder):
        pcr = _creator(work_dir, cache_dir, type="bogus")
        assert pcr.validate() is False

        await pcr.create()
        await pcr.install()

        assert command_recorder.commands == []
        assert isinstance(pcr.failure, InvalidTypeName)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_create_validates_when_needed(self, work_dir: Path, cache_dir: Path, command_recorder):
        pcr = _creator(work_dir, cache_dir, repo="user/my-app")
        await pcr.create()
        assert "https://github.com/user/my-app.git" in command_recorder.commands[0]
        assert "my-app" in command_recorder.commands[1]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_notifier_sees_every_command(self, work_dir: Path, cache_dir: Path, command_recorder):
        notify = MagicMock()
        pcr = _creator(work_dir, cache_dir, on_exec_cmd=notify)

        await pcr.create()

        assert [c.args[0] for c in notify.call_args_list] == command_recorder.commands


# ---------------------------------------------------------------------------
# install / delete_dir
# ---------------------------------------------------------------------------


class TestInstall:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_install_runs_in_project(self, work_dir: Path, cache_dir: Path, command_recorder):
        pcr = _creator(work_dir, cache_dir, install_command="composer install --no-dev")
        await pcr.create()
        await pcr.install()
        assert command_recorder.commands[-1] == (
            f"cd {shlex.quote(str(work_dir / 'demo'))} && composer install --no-dev"
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_install(self, work_dir: Path, cache_dir: Path, command_recorder):
        pcr = _creator(work_dir, cache_dir, no_install=True)
        await pcr.create()
        await pcr.install()
        assert not any("composer" in cmd for cmd in command_recorder.commands)


class TestDeleteDir:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_short_path_refused(self, command_recorder):
        pcr = ProjectCreator(name="demo", type="http")
        with pytest.raises(ValueError, match="too short"):
            await pcr.delete_dir("/tmp")
        assert command_recorder.commands == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_real_subprocess(self, mock_subprocess):
        pcr = ProjectCreator(name="demo", type="http")
        proc = mock_subprocess(returncode=0)
        with patch("asyncio.create_subprocess_shell", return_value=proc) as mock_shell:
            assert await pcr.delete_dir("/tmp/some/dir") is True
        assert mock_shell.call_args.args[0] == "rm -rf /tmp/some/dir"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_subprocess_failure_output_joined(self, mock_subprocess):
        pcr = ProjectCreator(name="demo", type="http")
        proc = mock_subprocess(stdout="out", stderr="err", returncode=2)
        with patch("asyncio.create_subprocess_shell", return_value=proc):
            assert await pcr.delete_dir("/tmp/some/dir") is False
        assert pcr.error == "exec command fail: out\nerr"
