"""Tests for the git repository adapter."""

from __future__ import annotations

import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from headerfix.errors import GitError
from headerfix.git.repository import GitRepository, parse_line_porcelain
from headerfix.models import Commit
from tests._fixtures.repo_builder import RepoBuilder, requires_git

SHA_A = "a" * 40
SHA_B = "b" * 40

PORCELAIN = f"""\
{SHA_A} 1 1 2
author Alice
author-mail <alice@example.com>
author-time 1456824600
author-tz -0500
committer Alice
committer-mail <alice@example.com>
committer-time 1456824600
committer-tz -0500
summary initial
boundary
filename main.go
\tpackage main
{SHA_A} 2 2
author Alice
author-mail <alice@example.com>
author-time 1456824600
author-tz -0500
committer Alice
committer-mail <alice@example.com>
committer-time 1456824600
committer-tz -0500
summary initial
boundary
filename main.go
\t
{SHA_B} 3 3 1
author Bob
author-mail <bob@example.com>
author-time 1514764800
author-tz +0000
committer Bob
committer-mail <bob@example.com>
committer-time 1514764800
committer-tz +0000
summary add main
previous {SHA_A} main.go
filename main.go
\tfunc main() {{}}
"""


def test_parse_line_porcelain_extracts_lines_and_author_times() -> None:
    lines = parse_line_porcelain(PORCELAIN)

    assert [line.line for line in lines] == ["package main", "", "func main() {}"]
    assert [line.revision for line in lines] == [SHA_A, SHA_A, SHA_B]
    first = lines[0].when
    assert first.utcoffset() == timedelta(hours=-5)
    assert first == datetime(2016, 3, 1, 9, 30, tzinfo=timezone.utc)
    assert lines[2].when == datetime(2018, 1, 1, tzinfo=timezone.utc)


def test_parse_line_porcelain_keeps_year_in_author_timezone() -> None:
    output = f"{SHA_A} 1 1 1\nauthor-time 1451631600\nauthor-tz -0800\n\tx\n"

    (line,) = parse_line_porcelain(output)

    assert line.when.year == 2015
    assert line.when.astimezone(timezone.utc).year == 2016


def test_parse_line_porcelain_keeps_other_line_breaks_inside_content() -> None:
    output = (
        f"{SHA_A} 1 1 1\nauthor-time 1456824600\nauthor-tz +0000\n\tx = 1\x0c\ty = 2\n"
        f"{SHA_A} 2 2\nauthor-time 1456824600\nauthor-tz +0000\n\tpackage a\r\r\tfunc A() {{}}\r\n"
    )

    lines = parse_line_porcelain(output)

    assert [line.line for line in lines] == ["x = 1\x0c\ty = 2", "package a\r\r\tfunc A() {}\r"]
    assert all(line.when.year == 2016 for line in lines)


def test_parse_line_porcelain_of_empty_output() -> None:
    assert parse_line_porcelain("") == []


def test_parse_line_porcelain_rejects_content_without_header() -> None:
    with pytest.raises(GitError):
        parse_line_porcelain("\torphan line\n")


def test_blame_runs_git_at_the_given_commit(tmp_path: Path) -> None:
    calls: list[tuple[list[str], Path]] = []

    def runner(args, cwd, capture_output=False):  # type: ignore[no-untyped-def]
        calls.append((list(args), Path(cwd)))
        return PORCELAIN

    repository = GitRepository(tmp_path, runner=runner)
    commit = Commit(sha=SHA_B, when=datetime(2018, 1, 1, tzinfo=timezone.utc))

    lines = repository.blame(commit, "main.go")

    assert len(lines) == 3
    assert calls == [(["git", "blame", "--line-porcelain", SHA_B, "--", "main.go"], tmp_path)]


def test_runner_failures_become_git_errors(tmp_path: Path) -> None:
    def runner(args, cwd, capture_output=False):  # type: ignore[no-untyped-def]
        raise subprocess.CalledProcessError(
            128, list(args), output="", stderr="fatal: no such path 'x.go' in HEAD\n"
        )

    repository = GitRepository(tmp_path, runner=runner)

    with pytest.raises(GitError, match="no such path"):
        repository.blame(Commit(sha=SHA_A, when=datetime.now(timezone.utc)), "x.go")


def test_missing_git_binary_becomes_git_error(tmp_path: Path) -> None:
    def runner(args, cwd, capture_output=False):  # type: ignore[no-untyped-def]
        raise FileNotFoundError(2, "No such file or directory", "git")

    with pytest.raises(GitError):
        GitRepository.open(tmp_path, runner=runner)


def test_commit_parses_hash_and_date(tmp_path: Path) -> None:
    def runner(args, cwd, capture_output=False):  # type: ignore[no-untyped-def]
        assert args[:3] == ["git", "show", "-s"]
        return f"{SHA_B}\n1514764800\n2018-01-01 01:00:00 +0100\n"

    commit = GitRepository(tmp_path, runner=runner).commit("HEAD")

    assert commit.sha == SHA_B
    assert commit.when == datetime(2018, 1, 1, tzinfo=timezone.utc)
    assert commit.when.utcoffset() == timedelta(hours=1)


@requires_git
def test_open_resolves_top_level_from_subdirectory(repo_builder: RepoBuilder) -> None:
    repo_builder.init()
    repo_builder.write({"pkg/a.go": "package pkg\n"})
    repo_builder.commit("initial", date="2016-03-01 12:00:00 +0000")

    repository = GitRepository.open(repo_builder.path() / "pkg")

    assert repository.root == repo_builder.path().resolve()


@requires_git
def test_open_rejects_plain_directory(tmp_path: Path) -> None:
    plain = tmp_path / "plain"
    plain.mkdir()

    with pytest.raises(GitError):
        GitRepository.open(plain)


@requires_git
def test_head_fails_in_repository_without_commits(repo_builder: RepoBuilder) -> None:
    repo_builder.init()

    repository = GitRepository.open(repo_builder.path())

    with pytest.raises(GitError):
        repository.head()


@requires_git
def test_blame_reads_history_not_working_tree(repo_builder: RepoBuilder) -> None:
    repo_builder.init()
    repo_builder.write({"main.go": "package main\n"})
    repo_builder.commit("initial", date="2016-03-01 12:00:00 +0000")
    repo_builder.write({"main.go": "package main\n\nfunc main() {}\n"})
    head_sha = repo_builder.commit("add main", date="2018-06-01 12:00:00 +0000")
    repo_builder.write({"main.go": "package main\n\nfunc main() {}\n// uncommitted\n"})

    repository = GitRepository.open(repo_builder.path())
    head = repository.commit(repository.head())
    lines = repository.blame(head, "main.go")

    assert head.sha == head_sha
    assert [line.line for line in lines] == ["package main", "", "func main() {}"]
    assert min(line.when for line in lines).year == 2016
    assert max(line.when for line in lines).year == 2018


@requires_git
def test_blame_of_untracked_path_fails(repo_builder: RepoBuilder) -> None:
    repo_builder.init()
    repo_builder.write({"main.go": "package main\n"})
    repo_builder.commit("initial", date="2016-03-01 12:00:00 +0000")
    repo_builder.write({"new.go": "package main\n"})

    repository = GitRepository.open(repo_builder.path())
    head = repository.commit(repository.head())

    with pytest.raises(GitError):
        repository.blame(head, "new.go")


@requires_git
def test_blame_of_carriage_return_only_file(repo_builder: RepoBuilder) -> None:
    repo_builder.init()
    repo_builder.write({"a.go": b"package a\r\r\tfunc A() {}\r"})
    repo_builder.commit("initial", date="2016-03-01 12:00:00 +0000")

    repository = GitRepository.open(repo_builder.path())
    lines = repository.blame(repository.commit(repository.head()), "a.go")

    assert [line.line for line in lines] == ["package a\r\r\tfunc A() {}\r"]
    assert lines[0].when.year == 2016
