"""Tests for ffmpeg filter graph builders."""

from pathlib import Path

import pytest

from core.exceptions import ValidationError
from features.avtool.filters import VolumeValue, concat_list, gif_filter, layer_filter, overlay_filter


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0.5", "0.5"),
        ("2", "2"),
        ("1.0", "1"),
        ("-3dB", "-3dB"),
        ("+6db", "6dB"),
        (" -1.5 DB ", "-1.5dB"),
    ],
)
def test_volume_values(raw, expected):
    assert VolumeValue.parse(raw).to_ffmpeg() == expected


@pytest.mark.parametrize("raw", ["", "   ", "loud", "xdB", "-0.5"])
def test_invalid_volume_values(raw):
    with pytest.raises(ValidationError) as excinfo:
        VolumeValue.parse(raw)
    assert excinfo.value.field == "volume"


def test_gif_filter():
    assert gif_filter(10) == "fps=10"
    assert gif_filter(15, 480) == "fps=15,scale=480:-1:flags=lanczos"


def test_overlay_filter_variants():
    assert overlay_filter() == "[0:v][1:v]overlay=0:0"
    assert overlay_filter(x=10, y=20, scale=0.5) == "[1:v]scale=iw*0.5:ih*0.5[img];[0:v][img]overlay=10:20"
    assert overlay_filter(start_time=2, duration=3) == "[0:v][1:v]overlay=0:0:enable='between(t,2,5)'"
    assert overlay_filter(start_time=1.5) == "[0:v][1:v]overlay=0:0:enable='gte(t,1.5)'"


def test_layer_filter_delays_and_mixes():
    graph = layer_filter([(0.0, 1.0), (1.5, 0.3)])

    assert graph == (
        "[0:a]anull[a0];"
        "[1:a]adelay=1500|1500,volume=0.3[a1];"
        "[a0][a1]amix=inputs=2:duration=longest"
    )


def test_concat_list_escapes_quotes():
    body = concat_list([Path("/tmp/a.mp4"), Path("/tmp/it's.mp4")])

    assert body == "file '/tmp/a.mp4'\nfile '/tmp/it'\\''s.mp4'\n"
