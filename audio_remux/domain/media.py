from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from pathlib import Path
from pprint import pformat
from typing import Any, Dict, List, Optional, Tuple

import ffmpeg
from loguru import logger

from .channel_layout import layout_bits_from_name
from .exceptions import DecoderException, ProbeException, StreamNotFoundException
from ..utils.module_updater import Modules


class Medium(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"
    DATA = "data"

    @classmethod
    def from_codec_type(cls, codec_type: Optional[str]) -> "Medium":
        # ffprobe also reports "attachment"; for our purposes it is opaque data.
        try:
            return cls(codec_type)
        except ValueError:
            return cls.DATA


@dataclass
class StreamInfo:
    """
    One stream of a probed container, reduced to what the pipeline needs.

    Attributes:
        index (int): Absolute position among all streams of the container.
        medium (Medium): Content kind of the stream.
        channel_layout_bits (Optional[int]): libavutil channel mask, if the
            stream reports a decodable layout.
        channels (int): Raw channel count (0 for non-audio streams).
        raw (dict): The untouched ffprobe stream entry.
    """

    index: int
    medium: Medium
    channel_layout_bits: Optional[int] = None
    channels: int = 0
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_probe(cls, stream: Dict[str, Any]) -> "StreamInfo":
        return cls(
            index=int(stream["index"]),
            medium=Medium.from_codec_type(stream.get("codec_type")),
            channel_layout_bits=layout_bits_from_name(stream.get("channel_layout")),
            channels=int(stream.get("channels") or 0),
            raw=stream,
        )

    @property
    def is_default(self) -> bool:
        return bool((self.raw.get("disposition") or {}).get("default"))

    @property
    def is_attached_pic(self) -> bool:
        return bool((self.raw.get("disposition") or {}).get("attached_pic"))

    @property
    def bit_rate(self) -> int:
        try:
            return int(self.raw.get("bit_rate") or 0)
        except ValueError:
            return 0

    @property
    def pixel_count(self) -> int:
        return int(self.raw.get("width") or 0) * int(self.raw.get("height") or 0)


def best_stream(streams: List[StreamInfo], medium: Medium) -> Optional[StreamInfo]:
    """
    Picks the primary stream of a medium, the way ffmpeg's own selection does.

    Cover art is never a video candidate. Among the rest, a stream flagged
    `default` wins, then the bigger picture (video) or more channels (audio),
    then the higher bitrate, then the lowest index.
    """
    candidates = [s for s in streams if s.medium == medium]
    if medium == Medium.VIDEO:
        candidates = [s for s in candidates if not s.is_attached_pic]
    if not candidates:
        return None

    def rank(stream: StreamInfo) -> Tuple[bool, int, int, int]:
        size = stream.pixel_count if medium == Medium.VIDEO else stream.channels
        return stream.is_default, size, stream.bit_rate, -stream.index

    return max(candidates, key=rank)


def parse_rational(rate: Optional[str]) -> float:
    """Turns ffprobe's "24000/1001" into a float. A zero denominator gives 0.0."""
    if not rate:
        return 0.0
    numerator, _, denominator = str(rate).partition("/")
    denominator = denominator or "1"
    if int(denominator) == 0:
        return 0.0
    return float(Fraction(int(numerator), int(denominator)))


class MediaFile:
    """
    Represents a single media file and provides its structural metadata.

    When instantiated with a file path, it runs `ffprobe` (via the ffmpeg-python
    library) to read the container and stream headers. Nothing is decoded: the
    packet-level questions (frame count, keyframes) run a second, narrower
    probe restricted to the one stream they are about.

    Attributes:
        path (Path): The absolute path to the media file.
        filename (str): The name of the file, including its extension.
        probe (dict): The raw `ffprobe` output as a nested dictionary.
        streams (List[StreamInfo]): All streams of the container, in index order.
    """

    def __init__(self, path: Path):
        """
        Probes the file at the given path.

        Raises:
            FileNotFoundError: If the file does not exist at the given path.
            ProbeException: If ffprobe cannot open or parse the container.
        """
        path = Path(path)
        if not path.exists():
            logger.error(f"MediaFile initialization error: File does not exist at {path}")
            raise FileNotFoundError(f"Media file not found: {path}")

        self.path: Path = path.resolve()
        self.filename: str = self.path.name
        self.probe: Dict[str, Any] = self._run_probe()
        self.streams: List[StreamInfo] = sorted(
            (StreamInfo.from_probe(s) for s in self.probe.get("streams", [])),
            key=lambda s: s.index,
        )
        logger.debug(f"Probe data for {self.filename}:\n{pformat(self.probe)}")

    def _run_probe(self, **kwargs) -> Dict[str, Any]:
        try:
            return ffmpeg.probe(str(self.path), cmd=Modules.tool_path("ffprobe"), **kwargs)
        except ffmpeg.Error as e:
            stderr = e.stderr.decode("utf-8", errors="replace") if e.stderr else ""
            logger.error(f"ffmpeg.probe failed for {self.path}: {stderr}")
            raise ProbeException(f"Failed to probe media file {self.path}: {stderr}") from e

    # --- Stream selection ---

    def streams_of(self, medium: Medium) -> List[StreamInfo]:
        return [s for s in self.streams if s.medium == medium]

    @property
    def audio_streams(self) -> List[StreamInfo]:
        return self.streams_of(Medium.AUDIO)

    @property
    def subtitle_streams(self) -> List[StreamInfo]:
        return self.streams_of(Medium.SUBTITLE)

    def best_stream(self, medium: Medium) -> StreamInfo:
        stream = best_stream(self.streams, medium)
        if stream is None:
            raise StreamNotFoundException(f"No {medium.value} stream found in {self.filename}")
        return stream

    def _video_decoder_params(self) -> Dict[str, Any]:
        stream = self.best_stream(Medium.VIDEO)
        if not stream.raw.get("codec_name"):
            raise DecoderException(
                f"Cannot build a decoder for stream {stream.index} of {self.filename}: unknown codec"
            )
        return stream.raw

    # --- Metadata ---

    def stream_count_by(self, medium: Medium) -> int:
        """
        Counts the packets of the best stream of `medium`.

        For video this is the frame count. Packets are counted by ffprobe
        without decoding them.
        """
        stream = self.best_stream(medium)
        counted = self._run_probe(
            select_streams=str(stream.index),
            count_packets=None,
            show_entries="stream=nb_read_packets",
        )
        for entry in counted.get("streams", []):
            if "nb_read_packets" in entry:
                return int(entry["nb_read_packets"])
        raise ProbeException(f"ffprobe did not report a packet count for stream {stream.index} of {self.filename}")

    def num_frames(self) -> int:
        return self.stream_count_by(Medium.VIDEO)

    def frame_rate(self) -> float:
        """Average frame rate of the best video stream (avg_frame_rate numerator / denominator)."""
        return parse_rational(self.best_stream(Medium.VIDEO).raw.get("avg_frame_rate"))

    def pixel_format(self) -> str:
        params = self._video_decoder_params()
        if not params.get("pix_fmt"):
            raise DecoderException(f"No pixel format reported for {self.filename}")
        return params["pix_fmt"]

    def resolution(self) -> Tuple[int, int]:
        params = self._video_decoder_params()
        if not params.get("width") or not params.get("height"):
            raise DecoderException(f"No resolution reported for {self.filename}")
        return int(params["width"]), int(params["height"])

    def transfer_characteristics(self) -> str:
        # ffprobe leaves the field out when it is unspecified.
        return self._video_decoder_params().get("color_transfer") or "unknown"

    def has_audio(self) -> bool:
        return best_stream(self.streams, Medium.AUDIO) is not None

    def keyframes(self) -> List[int]:
        """
        Returns the 0-based positions of the key packets of the best video stream.

        Packets are numbered in file order, regardless of decode or
        presentation order. The first frame is always a boundary, so a stream
        without any key-flagged packet yields [0].
        """
        stream = self.best_stream(Medium.VIDEO)
        packets = self._run_probe(
            select_streams=str(stream.index),
            show_entries="packet=flags",
        ).get("packets", [])

        keyframes = [i for i, packet in enumerate(packets) if "K" in (packet.get("flags") or "")]
        if not keyframes:
            return [0]
        return keyframes


def has_audio(path: Path) -> bool:
    """True if the file at `path` has an audio stream. Probe failures propagate."""
    return MediaFile(Path(path)).has_audio()
