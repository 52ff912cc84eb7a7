import subprocess
from pathlib import Path

import pytest

import gpxedit.util.fzf as fzf
from gpxedit.errors import FzfNotFoundError, GPXEditError


@pytest.fixture
def fake_fzf(monkeypatch):
    calls = {}
    result = {"returncode": 0, "stdout": b"", "stderr": b""}

    def fake_run(cmd, *, input, stdout, stderr):
        calls["cmd"] = cmd
        calls["input"] = input.decode()
        return subprocess.CompletedProcess(cmd, result["returncode"], result["stdout"], result["stderr"])

    monkeypatch.setattr(fzf, "which", lambda name: "/usr/bin/fzf")
    monkeypatch.setattr(fzf.subprocess, "run", fake_run)
    return calls, result


def test_lists_paths_relative_to_root_and_returns_choice(fake_fzf, tmp_path):
    calls, result = fake_fzf
    a = tmp_path / "2024" / "a.gpx"
    b = tmp_path / "b.gpx"
    result["stdout"] = f"2024/a.gpx\t{a}\n".encode()

    chosen = fzf.fzf_select_gpx([a, b], header="pick", root=tmp_path)

    assert chosen == a.resolve()
    assert calls["input"] == f"2024/a.gpx\t{a}\nb.gpx\t{b}\n"
    assert "--multi" not in calls["cmd"]


def test_preview_shows_head_of_file():
    cmd = fzf.build_fzf_command("pick", preview_lines=12)
    assert cmd[cmd.index("--preview") + 1] == "head -n 12 {2}"

    assert "--preview" not in fzf.build_fzf_command("pick", preview_lines=0)


@pytest.mark.parametrize("code", [1, 130])
def test_abort_or_no_match_returns_none(fake_fzf, code):
    _, result = fake_fzf
    result["returncode"] = code
    assert fzf.fzf_select_gpx([Path("/x/a.gpx")], header="pick") is None


def test_other_failures_raise(fake_fzf):
    _, result = fake_fzf
    result["returncode"] = 2
    result["stderr"] = b"unknown option"
    with pytest.raises(GPXEditError, match="unknown option"):
        fzf.fzf_select_gpx([Path("/x/a.gpx")], header="pick")


def test_missing_fzf(monkeypatch):
    monkeypatch.setattr(fzf, "which", lambda name: None)
    with pytest.raises(FzfNotFoundError):
        fzf.fzf_select_gpx([Path("/x/a.gpx")], header="pick")
