"""
Channel-layout classification and the per-stream bitrate estimate.

The masks below use libavutil's channel bit values, and the layout names are the
ones libavutil (and therefore ffprobe's `channel_layout` field) prints. A layout
string is decoded into a mask first, so "5.1", "FL+FR+FC+LFE+BL+BR" and the raw
mask all classify the same way.
"""
import math
from enum import IntFlag
from typing import Dict, Optional

from ..config.audio import BASE_BITRATE_KBPS, BITRATE_EXPONENT


class Channel(IntFlag):
    FL = 0x1
    FR = 0x2
    FC = 0x4
    LFE = 0x8
    BL = 0x10
    BR = 0x20
    FLC = 0x40
    FRC = 0x80
    BC = 0x100
    SL = 0x200
    SR = 0x400
    TC = 0x800
    TFL = 0x1000
    TFC = 0x2000
    TFR = 0x4000
    TBL = 0x8000
    TBC = 0x10000
    TBR = 0x20000
    DL = 0x20000000
    DR = 0x40000000
    WL = 0x80000000
    WR = 0x100000000
    SDL = 0x200000000
    SDR = 0x400000000
    LFE2 = 0x800000000
    TSL = 0x1000000000
    TSR = 0x2000000000
    BFC = 0x4000000000
    BFL = 0x8000000000
    BFR = 0x10000000000
    SSL = 0x20000000000
    SSR = 0x40000000000
    TTL = 0x80000000000
    TTR = 0x100000000000
    BIL = 0x2000000000000000
    BIR = 0x4000000000000000


ALL_CHANNEL_BITS = sum(channel.value for channel in Channel)


class ChannelLayout:
    """Named libavutil layouts, as plain integer masks."""

    MONO = Channel.FC
    STEREO = Channel.FL | Channel.FR
    _2POINT1 = STEREO | Channel.LFE
    _2_1 = STEREO | Channel.BC
    SURROUND = STEREO | Channel.FC
    _3POINT1 = SURROUND | Channel.LFE
    _4POINT0 = SURROUND | Channel.BC
    _4POINT1 = _4POINT0 | Channel.LFE
    _2_2 = STEREO | Channel.SL | Channel.SR
    QUAD = STEREO | Channel.BL | Channel.BR
    _5POINT0 = SURROUND | Channel.SL | Channel.SR
    _5POINT1 = _5POINT0 | Channel.LFE
    _5POINT0_BACK = SURROUND | Channel.BL | Channel.BR
    _5POINT1_BACK = _5POINT0_BACK | Channel.LFE
    _6POINT0 = _5POINT0 | Channel.BC
    _6POINT0_FRONT = _2_2 | Channel.FLC | Channel.FRC
    HEXAGONAL = _5POINT0_BACK | Channel.BC
    _3POINT1POINT2 = _3POINT1 | Channel.TFL | Channel.TFR
    _6POINT1 = _5POINT1 | Channel.BC
    _6POINT1_BACK = _5POINT1_BACK | Channel.BC
    _6POINT1_FRONT = _6POINT0_FRONT | Channel.LFE
    _7POINT0 = _5POINT0 | Channel.BL | Channel.BR
    _7POINT0_FRONT = _5POINT0 | Channel.FLC | Channel.FRC
    _7POINT1 = _5POINT1 | Channel.BL | Channel.BR
    _7POINT1_WIDE = _5POINT1 | Channel.FLC | Channel.FRC
    _7POINT1_WIDE_BACK = _5POINT1_BACK | Channel.FLC | Channel.FRC
    OCTAGONAL = _5POINT0 | Channel.BL | Channel.BC | Channel.BR
    STEREO_DOWNMIX = Channel.DL | Channel.DR
    _5POINT1POINT2 = _5POINT1 | Channel.TFL | Channel.TFR
    _5POINT1POINT2_BACK = _5POINT1_BACK | Channel.TFL | Channel.TFR
    CUBE = QUAD | Channel.TFL | Channel.TFR | Channel.TBL | Channel.TBR
    _5POINT1POINT4_BACK = _5POINT1POINT2 | Channel.TBL | Channel.TBR
    _7POINT1POINT2 = _7POINT1 | Channel.TFL | Channel.TFR
    _7POINT1POINT4_BACK = _7POINT1POINT2 | Channel.TBL | Channel.TBR
    _7POINT2POINT3 = _7POINT1POINT2 | Channel.TBC | Channel.LFE2
    _9POINT1POINT4_BACK = _7POINT1POINT4_BACK | Channel.FLC | Channel.FRC
    _9POINT1POINT6 = _9POINT1POINT4_BACK | Channel.TSL | Channel.TSR
    HEXADECAGONAL = (
        OCTAGONAL | Channel.WL | Channel.WR | Channel.TBL | Channel.TBR
        | Channel.TBC | Channel.TFC | Channel.TFL | Channel.TFR
    )
    BINAURAL = Channel.BIL | Channel.BIR
    _22POINT2 = (
        _7POINT1POINT4_BACK | Channel.FLC | Channel.FRC | Channel.BC | Channel.LFE2
        | Channel.TFC | Channel.TC | Channel.TSL | Channel.TSR | Channel.TBC
        | Channel.BFC | Channel.BFL | Channel.BFR
    )


# ffprobe's layout names -> mask
LAYOUT_NAMES: Dict[str, int] = {
    "mono": int(ChannelLayout.MONO),
    "stereo": int(ChannelLayout.STEREO),
    "2.1": int(ChannelLayout._2POINT1),
    "3.0": int(ChannelLayout.SURROUND),
    "3.0(back)": int(ChannelLayout._2_1),
    "4.0": int(ChannelLayout._4POINT0),
    "quad": int(ChannelLayout.QUAD),
    "quad(side)": int(ChannelLayout._2_2),
    "3.1": int(ChannelLayout._3POINT1),
    "5.0": int(ChannelLayout._5POINT0_BACK),
    "5.0(side)": int(ChannelLayout._5POINT0),
    "4.1": int(ChannelLayout._4POINT1),
    "5.1": int(ChannelLayout._5POINT1_BACK),
    "5.1(side)": int(ChannelLayout._5POINT1),
    "6.0": int(ChannelLayout._6POINT0),
    "6.0(front)": int(ChannelLayout._6POINT0_FRONT),
    "hexagonal": int(ChannelLayout.HEXAGONAL),
    "3.1.2": int(ChannelLayout._3POINT1POINT2),
    "6.1": int(ChannelLayout._6POINT1),
    "6.1(back)": int(ChannelLayout._6POINT1_BACK),
    "6.1(front)": int(ChannelLayout._6POINT1_FRONT),
    "7.0": int(ChannelLayout._7POINT0),
    "7.0(front)": int(ChannelLayout._7POINT0_FRONT),
    "7.1": int(ChannelLayout._7POINT1),
    "7.1(wide)": int(ChannelLayout._7POINT1_WIDE_BACK),
    "7.1(wide-side)": int(ChannelLayout._7POINT1_WIDE),
    "octagonal": int(ChannelLayout.OCTAGONAL),
    "downmix": int(ChannelLayout.STEREO_DOWNMIX),
    "5.1.2": int(ChannelLayout._5POINT1POINT2),
    "5.1.2(back)": int(ChannelLayout._5POINT1POINT2_BACK),
    # Older libavutil prints 5.1.2(back) as 7.1(top).
    "7.1(top)": int(ChannelLayout._5POINT1POINT2_BACK),
    "cube": int(ChannelLayout.CUBE),
    "5.1.4": int(ChannelLayout._5POINT1POINT4_BACK),
    "7.1.2": int(ChannelLayout._7POINT1POINT2),
    "7.1.4": int(ChannelLayout._7POINT1POINT4_BACK),
    "7.2.3": int(ChannelLayout._7POINT2POINT3),
    "9.1.4": int(ChannelLayout._9POINT1POINT4_BACK),
    "9.1.6": int(ChannelLayout._9POINT1POINT6),
    "hexadecagonal": int(ChannelLayout.HEXADECAGONAL),
    "binaural": int(ChannelLayout.BINAURAL),
    "22.2": int(ChannelLayout._22POINT2),
}

# Layouts that count as "X.1" surround for bitrate purposes.
_LAYOUT_EQUIVALENTS: Dict[int, float] = {
    int(ChannelLayout._2POINT1): 2.1,
    int(ChannelLayout._2_1): 2.1,
    int(ChannelLayout._2_2): 2.2,
    int(ChannelLayout._3POINT1): 3.1,
    int(ChannelLayout._4POINT1): 4.1,
    int(ChannelLayout._5POINT1): 5.1,
    int(ChannelLayout._5POINT1_BACK): 5.1,
    int(ChannelLayout._6POINT1): 6.1,
    int(ChannelLayout._6POINT1_FRONT): 6.1,
    int(ChannelLayout._6POINT1_BACK): 6.1,
    int(ChannelLayout._7POINT1): 7.1,
    int(ChannelLayout._7POINT1_WIDE): 7.1,
    int(ChannelLayout._7POINT1_WIDE_BACK): 7.1,
}

# Used when no layout can be decoded at all.
_COUNT_EQUIVALENTS: Dict[int, float] = {3: 2.1, 6: 5.1, 8: 7.1}


def layout_bits_from_name(name: Optional[str]) -> Optional[int]:
    """
    Decodes an ffprobe `channel_layout` string into a channel mask.

    Accepts the named layouts ("5.1(side)") and libavutil's custom notation
    ("FL+FR+LFE"). Anything else ("6 channels", "unknown", None) yields None.
    """
    if not name:
        return None
    name = name.strip()
    if name in LAYOUT_NAMES:
        return LAYOUT_NAMES[name]

    bits = 0
    for part in name.split("+"):
        channel = Channel.__members__.get(part.strip().upper())
        if channel is None:
            return None
        bits |= channel.value
    return bits or None


def channel_equivalent(layout_bits: Optional[int], channels: int) -> float:
    """
    Returns the "x.y" surround value a stream is billed as.

    Args:
        layout_bits: Channel mask, or None if the stream reports none.
        channels: Raw channel count; always present.
    """
    if layout_bits and not layout_bits & ~ALL_CHANNEL_BITS:
        return _LAYOUT_EQUIVALENTS.get(layout_bits, float(channels))
    return _COUNT_EQUIVALENTS.get(channels, float(channels))


def bitrate_for_equivalent(equivalent: float) -> int:
    """128 kbps for stereo, scaled by (equivalent / 2) ** 0.75; rounds half up."""
    value = BASE_BITRATE_KBPS * (equivalent / 2) ** BITRATE_EXPONENT
    return int(math.floor(value + 0.5))


def target_bitrate_kbps(layout_bits: Optional[int], channels: int) -> int:
    return bitrate_for_equivalent(channel_equivalent(layout_bits, channels))
