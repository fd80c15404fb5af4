"""
Raw copy export - MP4 путь без оверлеев и ускорения.

Тот же контейнер -> побайтовая копия; другой контейнер -> ffmpeg remux
(-c copy) при наличии ffmpeg, иначе копия как есть.
"""
from __future__ import annotations

import shutil
import subprocess
from functools import lru_cache
from pathlib import Path

from core.errors import FinalizeFailedError


@lru_cache(maxsize=1)
def ffmpeg_available() -> bool:
    """Проверяет доступность ffmpeg."""
    try:
        subprocess.run(["ffmpeg", "-version"], capture_output=True, check=True)
        return True
    except (FileNotFoundError, subprocess.CalledProcessError):
        return False


def _remux(source: Path, target: Path) -> None:
    cmd = [
        "ffmpeg",
        "-y",
        "-i", str(source),
        "-map", "0:v",
        "-c", "copy",
        str(target),
    ]
    try:
        subprocess.run(cmd, capture_output=True, text=True, check=True)
    except subprocess.CalledProcessError as e:
        raise FinalizeFailedError(f"FFmpeg remux failed: {e.stderr}") from e


def export_raw_copy(source_path: str, target_path: str, prefer_ffmpeg: bool = True) -> Path:
    source = Path(source_path)
    target = Path(target_path)
    target.parent.mkdir(parents=True, exist_ok=True)

    same_container = source.suffix.lower() == target.suffix.lower()
    if not same_container and prefer_ffmpeg and ffmpeg_available():
        _remux(source, target)
        return target

    try:
        shutil.copyfile(source, target)
    except OSError as e:
        raise FinalizeFailedError(f"Failed to copy raw video: {e}") from e
    return target
