"""ffmpeg filter graph builders and volume parsing for the avtool operations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from core.exceptions import ValidationError


def _number(value: float) -> str:
    """Format a float without a trailing ``.0`` so filter strings stay readable."""

    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


@dataclass(frozen=True, slots=True)
class VolumeValue:
    """Volume change as a plain multiplier (``0.5``) or decibels (``-3dB``)."""

    value: float
    decibels: bool = False

    @classmethod
    def parse(cls, raw: str) -> "VolumeValue":
        text = (raw or "").strip()
        if not text:
            raise ValidationError("Volume cannot be empty", field="volume")

        if text.lower().endswith("db"):
            number = text[:-2].strip()
            try:
                return cls(float(number), decibels=True)
            except ValueError as exc:
                raise ValidationError(
                    f"Invalid dB value '{text}'. Expected a form like '-3dB' or '+6dB'",
                    field="volume",
                ) from exc

        try:
            multiplier = float(text)
        except ValueError as exc:
            raise ValidationError(
                f"Invalid volume '{text}'. Use a multiplier such as '0.5' or decibels such as '-3dB'",
                field="volume",
            ) from exc
        if multiplier < 0:
            raise ValidationError(
                f"Volume multiplier cannot be negative ({text}); use decibels such as '-3dB' to attenuate",
                field="volume",
            )
        return cls(multiplier)

    def to_ffmpeg(self) -> str:
        return f"{_number(self.value)}dB" if self.decibels else _number(self.value)


def gif_filter(fps: int, width: Optional[int] = None) -> str:
    filters = [f"fps={fps}"]
    if width:
        filters.append(f"scale={width}:-1:flags=lanczos")
    return ",".join(filters)


def overlay_filter(
    *,
    x: int = 0,
    y: int = 0,
    scale: Optional[float] = None,
    start_time: Optional[float] = None,
    duration: Optional[float] = None,
) -> str:
    """Overlay input 1 (image) on input 0 (video), optionally scaled and time-boxed."""

    parts: List[str] = []
    image_ref = "[1:v]"
    if scale is not None:
        parts.append(f"[1:v]scale=iw*{_number(scale)}:ih*{_number(scale)}[img]")
        image_ref = "[img]"

    overlay = f"[0:v]{image_ref}overlay={x}:{y}"
    if start_time is not None or duration is not None:
        start = start_time or 0.0
        if duration is not None:
            overlay += f":enable='between(t,{_number(start)},{_number(start + duration)})'"
        else:
            overlay += f":enable='gte(t,{_number(start)})'"
    parts.append(overlay)
    return ";".join(parts)


def layer_filter(layers: Sequence[Tuple[float, float]]) -> str:
    """Mix ``(offset_seconds, volume)`` layers, one per ffmpeg input, into one track."""

    parts: List[str] = []
    labels: List[str] = []
    for index, (offset, volume) in enumerate(layers):
        steps: List[str] = []
        if offset > 0:
            delay_ms = int(offset * 1000)
            steps.append(f"adelay={delay_ms}|{delay_ms}")
        if volume != 1.0:
            steps.append(f"volume={_number(volume)}")
        label = f"a{index}"
        parts.append(f"[{index}:a]{','.join(steps) or 'anull'}[{label}]")
        labels.append(f"[{label}]")
    parts.append(f"{''.join(labels)}amix=inputs={len(layers)}:duration=longest")
    return ";".join(parts)


def concat_list(paths: Sequence[Path]) -> str:
    """Body of an ffmpeg concat demuxer list file."""

    lines = []
    for path in paths:
        escaped = str(path).replace("'", "'\\''")
        lines.append(f"file '{escaped}'\n")
    return "".join(lines)


__all__ = ["VolumeValue", "concat_list", "gif_filter", "layer_filter", "overlay_filter"]
