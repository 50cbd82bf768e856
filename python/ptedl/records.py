# Copyright (c) 2014 Shotgun Software Inc.
#
# CONFIDENTIAL AND PROPRIETARY
#
# This work is provided "AS IS" and subject to the Shotgun Pipeline Toolkit
# Source Code License included in this distribution package. See LICENSE.
# By accessing, using, copying or modifying this work you indicate your
# agreement to the Shotgun Pipeline Toolkit Source Code License. All rights
# not expressly granted therein are reserved by Shotgun Software Inc.
"""
Records built from the sections of a session export.

Each section produces its own record shape, there is no common base class:
records are plain immutable rows of strings, numbers and timecodes.
"""
import collections
import enum
from dataclasses import dataclass
from typing import Optional, Tuple

from .frame_rate import FrameRate
from .timecode import Timecode


class MarkerUnits(enum.Enum):
    """
    Time reference units a marker can be attached to.
    """
    BARS_BEATS = "Bars|Beats"
    FEET_FRAMES = "Feet+Frames"
    MIN_SEC = "Min:Sec"
    SAMPLES = "Samples"
    TICKS = "Ticks"
    TIMECODE = "Timecode"


@dataclass(frozen=True)
class SessionHeader:
    """
    Session wide values listed before the first section.
    """
    session_name: str = ""
    sample_rate: float = 0.0
    bit_depth: str = ""
    start_timecode: Timecode = Timecode()
    frame_rate: FrameRate = FrameRate.FPS_25
    drop_frame: bool = False
    time_format: str = ""
    audio_track_count: int = 0
    audio_clip_count: int = 0
    audio_file_count: int = 0
    video_track_count: Optional[int] = None
    video_clip_count: Optional[int] = None
    video_file_count: Optional[int] = None
    # Unrecognized (name, value) header fields, in file order.
    extra_fields: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True)
class MediaFile:
    """
    An online or offline audio file used by the session.
    """
    file_name: str
    # Kept as exported, e.g. "Macintosh HD:Users:me:Session:Audio Files:"
    location: str


@dataclass(frozen=True)
class ClipRecord:
    """
    A clip from the online clips list.
    """
    clip_name: str
    source_file: str


@dataclass(frozen=True)
class PluginRecord:
    """
    A plug-in used by the session.
    """
    manufacturer: str
    name: str
    version: str
    format: str
    stems: str
    instance_count: int


@dataclass(frozen=True)
class TrackEvent:
    """
    A clip placed on a track.

    For multi channel tracks, each channel of a clip is listed as a separate
    event sharing the same event number.
    """
    channel: int
    event: int
    clip_name: str
    start: Timecode
    end: Timecode
    duration: Timecode
    timestamp: Optional[Timecode]
    muted: bool


@dataclass(frozen=True)
class TrackRecord:
    """
    A track and its events.
    """
    name: str
    comments: str = ""
    user_delay: int = 0
    states: Tuple[str, ...] = ()
    plugins: Tuple[str, ...] = ()
    events: Tuple[TrackEvent, ...] = ()

    @property
    def channels(self):
        """
        Return the channel numbers used by this track events, sorted.

        :returns: A tuple of ints.
        """
        return tuple(sorted(set(event.channel for event in self.events)))

    def events_on_channel(self, channel):
        """
        Return the events for the given channel, in file order.

        :param channel: A channel number, as an int.
        :returns: A tuple of :class:`TrackEvent`.
        """
        return tuple(event for event in self.events if event.channel == channel)

    def group_events(self, key):
        """
        Group this track events with the given key function.

        Mono channels exported for a single multi channel clip are not merged
        automatically: callers decide how they should be grouped, e.g. by event
        number with ``track.group_events(lambda e: e.event)``.

        :param key: A callable accepting a :class:`TrackEvent` and returning a
                    hashable grouping key.
        :returns: An ordered dictionary of key to tuple of :class:`TrackEvent`,
                  keys and events being kept in file order.
        """
        groups = collections.OrderedDict()
        for event in self.events:
            groups.setdefault(key(event), []).append(event)
        return collections.OrderedDict(
            (group_key, tuple(events)) for group_key, events in groups.items()
        )


@dataclass(frozen=True)
class MarkerRecord:
    """
    A memory location.
    """
    number: int
    location: Timecode
    time_reference: int
    units: MarkerUnits
    name: str
    comments: str = ""
    track_name: Optional[str] = None
    track_type: Optional[str] = None


@dataclass(frozen=True)
class ParseWarning:
    """
    A problem found while reading an export which did not stop the parsing.
    """
    section: str
    line_number: Optional[int]
    message: str
