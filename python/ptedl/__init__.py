# Copyright (c) 2016 Shotgun Software Inc.
#
# CONFIDENTIAL AND PROPRIETARY
#
# This work is provided "AS IS" and subject to the Shotgun Pipeline Toolkit
# Source Code License included in this distribution package. See LICENSE.
# By accessing, using, copying or modifying this work you indicate your
# agreement to the Shotgun Pipeline Toolkit Source Code License. All rights
# not expressly granted therein are reserved by Shotgun Software Inc.
from .config import ParserConfig
from .errors import (
    BadDropFrameError,
    BadFrameRateError,
    DuplicateSection,
    EDLParseError,
    InvalidComponents,
    MalformedTimecode,
    RateMismatch,
    SectionParseError,
    TimecodeError,
    Underflow,
    UnknownSection,
)
from .frame_rate import FrameRate, parse_timecode_format
from .lines import LineReader, LogicalLine
from .parser import EDLParser, ParserState
from .records import (
    ClipRecord,
    MarkerRecord,
    MarkerUnits,
    MediaFile,
    ParseWarning,
    PluginRecord,
    SessionHeader,
    TrackEvent,
    TrackRecord,
)
from .sections import SectionKind
from .session import EDLSession
from .timecode import Timecode, frame_from_timecode, timecode_from_frame
