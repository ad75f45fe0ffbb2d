"""Tests for joining clips with ffmpeg."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from nba_highlights.exceptions import ResourceUnavailable, ValidationError
from nba_highlights.video import (
    build_concat_command,
    check_ffmpeg,
    concatenate_clips,
    write_concat_list,
)


def test_write_concat_list(tmp_path):
    path = write_concat_list(
        ["https://stats.example/clip/1.mp4", "/clips/o'neal.mp4"], tmp_path / "list.txt"
    )
    assert path.read_text(encoding="utf-8") == (
        "file 'https://stats.example/clip/1.mp4'\nfile '/clips/o'\\''neal.mp4'\n"
    )


def test_build_concat_command():
    command = build_concat_command(Path("list.txt"), Path("out.mp4"), "/opt/ffmpeg")
    assert command[0] == "/opt/ffmpeg"
    assert command[command.index("-f") + 1] == "concat"
    assert command[command.index("-i") + 1] == "list.txt"
    assert command[command.index("-c") + 1] == "copy"
    assert "https" in command[command.index("-protocol_whitelist") + 1]
    assert command[-1] == "out.mp4"


def test_check_ffmpeg():
    with patch("nba_highlights.video.subprocess.run") as run:
        assert check_ffmpeg("ffmpeg") is True
        run.assert_called_once()

    with patch("nba_highlights.video.subprocess.run", side_effect=FileNotFoundError):
        assert check_ffmpeg("missing-ffmpeg") is False

    error = subprocess.CalledProcessError(1, ["ffmpeg", "-version"])
    with patch("nba_highlights.video.subprocess.run", side_effect=error):
        assert check_ffmpeg() is False


def test_write_concat_list_makes_local_paths_absolute(tmp_path, monkeypatch):
    (tmp_path / "clips").mkdir()
    (tmp_path / "clips" / "a.mp4").write_bytes(b"")
    (tmp_path / "lists").mkdir()
    monkeypatch.chdir(tmp_path)

    path = write_concat_list(["clips/a.mp4", "file:///clips/b.mp4"], tmp_path / "lists" / "list.txt")
    entries = [line[len("file '") : -1] for line in path.read_text(encoding="utf-8").splitlines()]

    assert entries == [str((tmp_path / "clips" / "a.mp4").resolve()), "file:///clips/b.mp4"]
    assert Path(entries[0]).is_file()


def test_concatenate_clips(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    output = tmp_path / "out" / "reel.mp4"
    seen = {}

    def fake_run(command, **kwargs):
        list_file = Path(command[command.index("-i") + 1])
        seen["list"] = list_file.read_text(encoding="utf-8")
        seen["command"] = command
        return MagicMock(returncode=0, stderr="")

    with patch("nba_highlights.video.subprocess.run", side_effect=fake_run):
        assert concatenate_clips(["a.mp4", "b.mp4"], output, "ffmpeg") == output

    assert seen["list"] == (
        f"file '{(tmp_path / 'a.mp4').resolve()}'\nfile '{(tmp_path / 'b.mp4').resolve()}'\n"
    )
    assert seen["command"][-1] == str(output)
    assert output.parent.is_dir()


def test_concatenate_clips_uses_configured_ffmpeg(tmp_path, monkeypatch):
    from nba_highlights.utils.config import get_settings

    monkeypatch.setenv("FFMPEG_PATH", "/opt/bin/ffmpeg")
    get_settings.cache_clear()

    with patch("nba_highlights.video.subprocess.run") as run:
        run.return_value = MagicMock(returncode=0, stderr="")
        concatenate_clips(["a.mp4"], tmp_path / "reel.mp4")
    assert run.call_args[0][0][0] == "/opt/bin/ffmpeg"


def test_concatenate_clips_errors(tmp_path):
    with pytest.raises(ValidationError):
        concatenate_clips([], tmp_path / "reel.mp4")

    with (
        patch("nba_highlights.video.subprocess.run", side_effect=FileNotFoundError),
        pytest.raises(ResourceUnavailable),
    ):
        concatenate_clips(["a.mp4"], tmp_path / "reel.mp4", "missing-ffmpeg")

    failed = MagicMock(returncode=1, stderr="line 1\nInvalid data found when processing input\n")
    with (
        patch("nba_highlights.video.subprocess.run", return_value=failed),
        pytest.raises(ResourceUnavailable),
    ):
        concatenate_clips(["a.mp4"], tmp_path / "reel.mp4", "ffmpeg")
