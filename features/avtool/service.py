"""Business logic for ffmpeg-backed audio and video processing."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.exceptions import MediaToolError, ValidationError
from features.avtool.filters import VolumeValue, concat_list, gif_filter, layer_filter, overlay_filter
from features.avtool.schemas import (
    AdjustVolumeRequest,
    CombineAudioVideoRequest,
    ConcatenateRequest,
    ConvertAudioRequest,
    LayerAudioRequest,
    MediaInfoRequest,
    OverlayImageRequest,
    VideoToGifRequest,
)
from infrastructure.media_tools import MediaToolRunner
from infrastructure.storage.resolver import MediaLocationResolver, MediaWorkspace

logger = logging.getLogger(__name__)


def _require(value: str, field: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field} cannot be empty", field=field)
    return value.strip()


def _optional_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def parse_media_info(probe: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce ffprobe JSON to duration, container format and per-stream details."""

    container = probe.get("format")
    if not isinstance(container, dict):
        raise MediaToolError("ffprobe output is missing the 'format' section", tool="ffprobe")
    try:
        duration = float(container.get("duration") or 0.0)
    except (TypeError, ValueError):
        duration = 0.0

    streams: List[Dict[str, Any]] = []
    for stream in probe.get("streams") or []:
        info: Dict[str, Any] = {
            "index": _optional_int(stream.get("index")) or 0,
            "codec_type": stream.get("codec_type") or "unknown",
            "codec_name": stream.get("codec_name") or "unknown",
        }
        for key in ("width", "height", "sample_rate", "channels"):
            number = _optional_int(stream.get(key))
            if number is not None:
                info[key] = number
        streams.append(info)

    return {
        "duration": duration,
        "format": container.get("format_name") or "unknown",
        "streams": streams,
    }


class AVToolService:
    """Run avtool operations; every input and output may be local or remote."""

    def __init__(self, runner: MediaToolRunner, resolver: MediaLocationResolver) -> None:
        self._runner = runner
        self._resolver = resolver

    def _destination(self, value: str) -> str:
        output = _require(value, "output")
        self._resolver.check_destination(output)
        return output

    async def _finish(self, workspace: MediaWorkspace, produced: Path, destination: str, operation: str) -> Dict[str, Any]:
        result = await workspace.handle_output(produced, destination)
        logger.info("%s wrote %s", operation, result)
        return {"output": result}

    async def get_media_info(self, request: MediaInfoRequest) -> Dict[str, Any]:
        source_location = _require(request.input, "input")
        async with self._resolver.scope() as workspace:
            source = await workspace.resolve_input(source_location)
            probe = await self._runner.run_ffprobe(str(source))
        info = parse_media_info(probe)
        logger.info(
            "Media info for %s: duration=%.3f format=%s streams=%d",
            source_location,
            info["duration"],
            info["format"],
            len(info["streams"]),
        )
        return info

    async def convert_wav_to_mp3(self, request: ConvertAudioRequest) -> Dict[str, Any]:
        output = self._destination(request.output)
        async with self._resolver.scope() as workspace:
            source = await workspace.resolve_input(_require(request.input, "input"))
            target = workspace.output_path(output, ".mp3")
            await self._runner.run_ffmpeg(
                ["-i", str(source), "-codec:a", "libmp3lame", "-b:a", request.bitrate, str(target)]
            )
            return await self._finish(workspace, target, output, "convert_wav_to_mp3")

    async def video_to_gif(self, request: VideoToGifRequest) -> Dict[str, Any]:
        output = self._destination(request.output)
        async with self._resolver.scope() as workspace:
            source = await workspace.resolve_input(_require(request.input, "input"))
            target = workspace.output_path(output, ".gif")
            args: List[str] = []
            if request.start_time is not None:
                args += ["-ss", str(request.start_time)]
            args += ["-i", str(source)]
            if request.duration is not None:
                args += ["-t", str(request.duration)]
            args += ["-vf", gif_filter(request.fps, request.width), str(target)]
            await self._runner.run_ffmpeg(args)
            return await self._finish(workspace, target, output, "video_to_gif")

    async def combine_audio_video(self, request: CombineAudioVideoRequest) -> Dict[str, Any]:
        output = self._destination(request.output)
        async with self._resolver.scope() as workspace:
            video = await workspace.resolve_input(_require(request.video_input, "video_input"))
            audio = await workspace.resolve_input(_require(request.audio_input, "audio_input"))
            target = workspace.output_path(output, ".mp4")
            await self._runner.run_ffmpeg(
                [
                    "-i", str(video),
                    "-i", str(audio),
                    "-c:v", "copy",
                    "-c:a", "aac",
                    "-map", "0:v:0",
                    "-map", "1:a:0",
                    "-shortest",
                    str(target),
                ]
            )
            return await self._finish(workspace, target, output, "combine_audio_video")

    async def overlay_image(self, request: OverlayImageRequest) -> Dict[str, Any]:
        output = self._destination(request.output)
        async with self._resolver.scope() as workspace:
            video = await workspace.resolve_input(_require(request.video_input, "video_input"))
            image = await workspace.resolve_input(_require(request.image_input, "image_input"))
            target = workspace.output_path(output, ".mp4")
            graph = overlay_filter(
                x=request.x,
                y=request.y,
                scale=request.scale,
                start_time=request.start_time,
                duration=request.duration,
            )
            await self._runner.run_ffmpeg(
                ["-i", str(video), "-i", str(image), "-filter_complex", graph, "-c:a", "copy", str(target)]
            )
            return await self._finish(workspace, target, output, "overlay_image")

    async def concatenate(self, request: ConcatenateRequest) -> Dict[str, Any]:
        if not request.inputs:
            raise ValidationError("At least one input file is required", field="inputs")
        output = self._destination(request.output)
        async with self._resolver.scope() as workspace:
            sources = [await workspace.resolve_input(_require(item, "inputs")) for item in request.inputs]
            list_file = workspace.scratch_path(".txt")
            await asyncio.to_thread(list_file.write_text, concat_list(sources), "utf-8")
            target = workspace.output_path(output, ".mp4")
            await self._runner.run_ffmpeg(
                ["-f", "concat", "-safe", "0", "-i", str(list_file), "-c", "copy", str(target)]
            )
            return await self._finish(workspace, target, output, "concatenate")

    async def adjust_volume(self, request: AdjustVolumeRequest) -> Dict[str, Any]:
        source_location = _require(request.input, "input")
        output = self._destination(request.output)
        volume = VolumeValue.parse(request.volume)
        async with self._resolver.scope() as workspace:
            source = await workspace.resolve_input(source_location)
            target = workspace.output_path(output, ".wav")
            await self._runner.run_ffmpeg(["-i", str(source), "-af", f"volume={volume.to_ffmpeg()}", str(target)])
            return await self._finish(workspace, target, output, "adjust_volume")

    async def layer_audio(self, request: LayerAudioRequest) -> Dict[str, Any]:
        if not request.inputs:
            raise ValidationError("At least one audio layer is required", field="inputs")
        output = self._destination(request.output)
        async with self._resolver.scope() as workspace:
            args: List[str] = []
            for layer in request.inputs:
                source = await workspace.resolve_input(_require(layer.path, "inputs.path"))
                args += ["-i", str(source)]
            target = workspace.output_path(output, ".wav")
            graph = layer_filter([(layer.offset_seconds, layer.volume) for layer in request.inputs])
            await self._runner.run_ffmpeg([*args, "-filter_complex", graph, str(target)])
            return await self._finish(workspace, target, output, "layer_audio")


__all__ = ["AVToolService", "parse_media_info"]
