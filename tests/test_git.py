from __future__ import annotations

import os
import subprocess
from pathlib import Path

from git_did.git import (
    get_current_user_email,
    get_last_commit_times,
    get_user_commits,
    has_recent_activity,
    is_git_repository,
    parse_log_line,
    parse_log_output,
    run_git,
)
from git_did.dates import resolve_window


def _run(cmd: list[str], *, cwd: Path, env: dict[str, str] | None = None) -> str:
    proc = subprocess.run(cmd, cwd=str(cwd), env=env, check=True, capture_output=True, text=True)
    return proc.stdout


def _init_repo(repo: Path, *, email: str = "test@example.com") -> None:
    repo.mkdir(parents=True, exist_ok=True)
    _run(["git", "init"], cwd=repo)
    _run(["git", "config", "user.name", "Test User"], cwd=repo)
    _run(["git", "config", "user.email", email], cwd=repo)


def _commit(repo: Path, message: str, *, authored: str, committed: str, email: str = "test@example.com") -> None:
    f = repo / "log.txt"
    with f.open("a", encoding="utf-8") as fh:
        fh.write(message + "\n")
    _run(["git", "add", "log.txt"], cwd=repo)
    env = os.environ.copy()
    env["GIT_AUTHOR_DATE"] = authored
    env["GIT_COMMITTER_DATE"] = committed
    env["GIT_AUTHOR_EMAIL"] = email
    _run(["git", "commit", "-m", message], cwd=repo, env=env)


def _fake_git(tmp_path: Path, *, exit_code: int, stderr: str = "") -> Path:
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    fake = bin_dir / "git"
    fake.write_text(
        "\n".join(
            [
                "#!/bin/sh",
                f"echo '{stderr}' >&2",
                f"exit {exit_code}",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    fake.chmod(0o755)
    return bin_dir


def test_parse_log_line_keeps_pipes_in_subject() -> None:
    line = (
        "abc1234|fix: a | b|c|2025-01-05|1736078400|2025-01-05T13:00:00+01:00"
        "|2025-01-06|1736164800|2025-01-06T13:30:00+01:00"
    )
    rec = parse_log_line(line)
    assert rec is not None
    assert rec.hash == "abc1234"
    assert rec.message == "fix: a | b|c"
    assert rec.author_date == "2025-01-05"
    assert rec.author_timestamp == 1736078400
    assert rec.author_time == "13:00"
    assert rec.commit_date == "2025-01-06"
    assert rec.commit_timestamp == 1736164800
    assert rec.commit_time == "13:30"


def test_parse_log_line_empty_subject() -> None:
    rec = parse_log_line("abc1234||2025-01-05|1|2025-01-05T00:00:00Z|2025-01-05|2|2025-01-05T00:00:00Z")
    assert rec is not None
    assert rec.message == ""


def test_parse_log_line_rejects_malformed() -> None:
    assert parse_log_line("abc1234|subject|2025-01-05|1736078400") is None
    assert parse_log_line("abc|s|2025-01-05|notanint|2025-01-05T00:00:00Z|2025-01-05|1|2025-01-05T00:00:00Z") is None


def test_parse_log_output_skips_blank_and_bad_lines() -> None:
    text = "\n".join(
        [
            "a111111|one|2025-01-05|1736078400|2025-01-05T12:00:00Z|2025-01-05|1736078400|2025-01-05T12:00:00Z",
            "",
            "garbage",
            "b222222|two|2025-01-06|1736164800|2025-01-06T12:00:00Z|2025-01-06|1736164800|2025-01-06T12:00:00Z",
        ]
    )
    assert [r.hash for r in parse_log_output(text)] == ["a111111", "b222222"]
    assert parse_log_output("") == []


def test_run_git_without_git_on_path(tmp_path: Path, monkeypatch) -> None:
    empty = tmp_path / "empty-bin"
    empty.mkdir()
    monkeypatch.setenv("PATH", str(empty))
    code, out, _ = run_git(["status"], cwd=tmp_path)
    assert code != 0
    assert out == ""


def test_is_git_repository(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    _init_repo(repo)
    assert is_git_repository(repo) is True
    assert is_git_repository(tmp_path) is False
    worktree_like = tmp_path / "wt"
    worktree_like.mkdir()
    (worktree_like / ".git").write_text("gitdir: /elsewhere\n", encoding="utf-8")
    assert is_git_repository(worktree_like) is False


def test_last_commit_times_reports_both_timestamps(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    _init_repo(repo)
    _commit(repo, "init", authored="2025-01-05T12:00:00Z", committed="2025-01-15T12:00:00Z")
    assert get_last_commit_times(repo) == (1736078400, 1736942400)


def test_last_commit_times_empty_repo(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    _init_repo(repo)
    assert get_last_commit_times(repo) == (None, None)


def test_has_recent_activity_by_either_timestamp(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    _init_repo(repo)
    _commit(repo, "old work, rebased", authored="2024-12-01T12:00:00", committed="2025-01-15T12:00:00")
    assert has_recent_activity(repo, resolve_window(None, "2025-01-10", "2025-01-20")) is True
    assert has_recent_activity(repo, resolve_window(None, "2024-11-25", "2024-12-05")) is True
    assert has_recent_activity(repo, resolve_window(None, "2025-02-01", "2025-02-10")) is False


def test_get_user_commits_filters_by_author(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    _init_repo(repo)
    _commit(repo, "mine | with pipe", authored="2025-01-05T09:15:00", committed="2025-01-05T09:15:00")
    _commit(repo, "theirs", authored="2025-01-06T10:00:00", committed="2025-01-06T10:00:00", email="other@example.com")
    res = get_user_commits(repo, "test@example.com")
    assert res.error == ""
    assert [c.message for c in res.commits] == ["mine | with pipe"]
    c = res.commits[0]
    assert len(c.hash) >= 7
    assert c.author_date == "2025-01-05"
    assert c.author_time == "09:15"


def test_get_user_commits_tolerates_non_utf8_subject(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    _init_repo(repo)
    (repo / "log.txt").write_text("x\n", encoding="utf-8")
    _run(["git", "add", "log.txt"], cwd=repo)
    msg = tmp_path / "msg.txt"
    msg.write_bytes(b"caf\xe9 fix\n")
    env = os.environ.copy()
    env["GIT_AUTHOR_DATE"] = "2025-01-05T09:15:00"
    env["GIT_COMMITTER_DATE"] = "2025-01-05T09:15:00"
    # commit output echoes the raw subject, so keep it as bytes
    subprocess.run(["git", "commit", "-F", str(msg)], cwd=str(repo), env=env, check=True, capture_output=True)

    res = get_user_commits(repo, "test@example.com")
    assert res.error == ""
    assert len(res.commits) == 1
    assert res.commits[0].message.startswith("caf")
    assert res.commits[0].message.endswith(" fix")
    assert res.commits[0].author_date == "2025-01-05"


def test_get_user_commits_reports_git_failure(tmp_path: Path, monkeypatch) -> None:
    bin_dir = _fake_git(tmp_path, exit_code=128, stderr="fatal: broken")
    monkeypatch.setenv("PATH", str(bin_dir) + os.pathsep + os.environ.get("PATH", ""))
    res = get_user_commits(tmp_path, "me@example.com")
    assert res.commits == ()
    assert "128" in res.error
    assert "fatal: broken" in res.error


def test_get_current_user_email(tmp_path: Path, monkeypatch) -> None:
    global_cfg = tmp_path / "global.gitconfig"
    global_cfg.write_text("[user]\n\temail = you@example.com\n", encoding="utf-8")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_cfg))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    assert get_current_user_email(tmp_path) == "you@example.com"

    global_cfg.write_text("", encoding="utf-8")
    assert get_current_user_email(tmp_path) is None
