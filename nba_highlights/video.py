"""Joining clips into one video with ffmpeg's concat demuxer."""

from __future__ import annotations

import re
import subprocess
import tempfile
from collections.abc import Sequence
from pathlib import Path

import structlog

from nba_highlights.exceptions import ResourceUnavailable, ValidationError
from nba_highlights.utils.config import get_settings

logger = structlog.get_logger(__name__)

# Clips may be local files or URLs.
_PROTOCOLS = "file,http,https,tcp,tls,crypto"
_URL_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def _clip_locator(clip: str) -> str:
    # ffmpeg resolves relative entries against the list file's directory.
    if _URL_RE.match(clip):
        return clip
    return str(Path(clip).resolve())


def write_concat_list(clips: Sequence[str], path: Path) -> Path:
    """Write an ffmpeg concat list, one ``file '<clip>'`` line per clip.

    Local paths are written as absolute paths; URLs are kept as given.
    """
    lines = []
    for clip in clips:
        escaped = _clip_locator(clip).replace("'", "'\\''")
        lines.append(f"file '{escaped}'\n")
    path.write_text("".join(lines), encoding="utf-8")
    return path


def build_concat_command(list_file: Path, output: Path, ffmpeg_path: str = "ffmpeg") -> list[str]:
    """The ffmpeg invocation joining the clips in *list_file* without re-encoding."""
    return [
        ffmpeg_path,
        "-y",
        "-f",
        "concat",
        "-safe",
        "0",
        "-protocol_whitelist",
        _PROTOCOLS,
        "-i",
        str(list_file),
        "-c",
        "copy",
        str(output),
    ]


def check_ffmpeg(ffmpeg_path: str | None = None) -> bool:
    """Return True if ffmpeg can be run."""
    try:
        subprocess.run(
            [ffmpeg_path or get_settings().ffmpeg_path, "-version"],
            capture_output=True,
            check=True,
        )
        return True
    except (FileNotFoundError, subprocess.CalledProcessError):
        return False


def concatenate_clips(clips: Sequence[str], output: Path | str, ffmpeg_path: str | None = None) -> Path:
    """
    Join clips, in order, into one video file.

    Args:
        clips: Clip locators (paths or URLs), already de-duplicated.
        output: Destination file.
        ffmpeg_path: ffmpeg executable. If None, uses the ``ffmpeg_path`` setting.

    Returns:
        The output path.

    Raises:
        ValidationError: If there are no clips.
        ResourceUnavailable: If ffmpeg is missing or fails.
    """
    if not clips:
        raise ValidationError("No clips to concatenate")
    ffmpeg_path = ffmpeg_path or get_settings().ffmpeg_path
    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.TemporaryDirectory() as tmpdir:
        list_file = write_concat_list(clips, Path(tmpdir) / "clips.txt")
        command = build_concat_command(list_file, output, ffmpeg_path)
        logger.info("Joining clips", clips=len(clips), output=str(output))
        try:
            result = subprocess.run(command, capture_output=True, text=True, check=False)
        except FileNotFoundError as e:
            raise ResourceUnavailable(f"ffmpeg not found: {ffmpeg_path}") from e

    if result.returncode != 0:
        tail = result.stderr.strip().splitlines()[-5:]
        logger.error("ffmpeg failed", returncode=result.returncode, stderr="\n".join(tail))
        raise ResourceUnavailable(f"ffmpeg exited with status {result.returncode}")

    logger.info("Saved video", output=str(output))
    return output
