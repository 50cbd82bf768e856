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
Parsers for each section of a session export.

A section parser is called with the lines found between a section marker and
the next one, and returns the records for this section. Parsers don't try to
recover from errors: the first line which can't be interpreted raises a
:class:`SectionParseError`.
"""
import collections
import enum
import re

from .errors import BadFrameRateError, SectionParseError, TimecodeError
from .frame_rate import FrameRate, parse_timecode_format
from .logger import get_logger
from .records import (
    ClipRecord,
    MarkerRecord,
    MarkerUnits,
    MediaFile,
    PluginRecord,
    SessionHeader,
    TrackEvent,
    TrackRecord,
)
from .timecode import Timecode

logger = get_logger("sections")


class SectionKind(str, enum.Enum):
    """
    The different sections of a session export.
    """
    HEADER = "header"
    ONLINE_FILES = "online_files"
    OFFLINE_FILES = "offline_files"
    PLUGINS = "plugins"
    ONLINE_CLIPS = "online_clips"
    TRACKS = "tracks"
    MARKERS = "markers"

    def __str__(self):
        return self.value


# Lines starting each section, the header section has none and is always
# first.
SECTION_MARKERS = collections.OrderedDict([
    ("O N L I N E  F I L E S  I N  S E S S I O N", SectionKind.ONLINE_FILES),
    ("O F F L I N E  F I L E S  I N  S E S S I O N", SectionKind.OFFLINE_FILES),
    ("P L U G - I N S  L I S T I N G", SectionKind.PLUGINS),
    ("O N L I N E  C L I P S  I N  S E S S I O N", SectionKind.ONLINE_CLIPS),
    ("T R A C K  L I S T I N G", SectionKind.TRACKS),
    ("M A R K E R S  L I S T I N G", SectionKind.MARKERS),
])

# Markers are matched with runs of spaces collapsed, some tools re-saving
# exports don't keep the double spaces between words.
_COLLAPSED_MARKERS = dict(
    (" ".join(marker.split()), kind) for marker, kind in SECTION_MARKERS.items()
)

# Header fields are "NAME:<tab>value", the value can itself contain colons.
_FIELD_REGEXP = re.compile(r"^(?P<name>[^:]+):(?P<value>.*)$")


def section_for_marker(text):
    """
    Return the :class:`SectionKind` started by the given line, if any.

    :param text: A stripped line.
    :returns: A :class:`SectionKind` or None.
    """
    return _COLLAPSED_MARKERS.get(" ".join(text.split()))


def looks_like_marker(text):
    """
    Return True if the given line is laid out like a section marker, that is
    spaced out capital letters, e.g. "V I D E O  T R A C K S".

    :param text: A stripped line.
    """
    if "\t" in text:
        return False
    tokens = text.split()
    return len(tokens) >= 4 and all(len(token) == 1 for token in tokens)


# Cell converters, called with the stripped cell value and the session header.
def _text(value, header):
    return value


def _integer(value, header):
    try:
        return int(value)
    except ValueError:
        raise ValueError("Invalid integer value [%s]" % value)


def _timecode(value, header):
    return Timecode.parse(value, header.frame_rate, header.drop_frame)


def _optional_timecode(value, header):
    if not value:
        return None
    return _timecode(value, header)


def _muted(value, header):
    if value == "Muted":
        return True
    if value == "Unmuted":
        return False
    raise ValueError("Invalid state [%s], expected Muted or Unmuted" % value)


def _marker_units(value, header):
    try:
        return MarkerUnits(value)
    except ValueError:
        raise ValueError("Invalid marker units [%s]" % value)


Column = collections.namedtuple("Column", ["title", "name", "convert", "optional"])


def _column(title, name, convert=_text, optional=False):
    return Column(title, name, convert, optional)


class ColumnLayout(object):
    """
    A fixed table layout: column titles, record field names and converters.

    Optional columns are only allowed last, they can be missing from a row,
    typically when a trailing comment is empty.
    """
    def __init__(self, columns):
        self._columns = tuple(columns)
        self._titles = tuple(column.title for column in self._columns)
        self._required = len([column for column in self._columns if not column.optional])

    @property
    def titles(self):
        return self._titles

    def matches(self, cells):
        """
        Return True if the given title row cells match this layout.

        :param cells: A list of stripped cells.
        """
        return tuple(cell.upper() for cell in _trim_cells(cells)) == self._titles

    def read(self, cells, header):
        """
        Convert a row to a dictionary of field names and values.

        :param cells: A list of stripped cells.
        :param header: The :class:`SessionHeader` for the session.
        :returns: A dictionary.
        :raises: ValueError for rows with an unexpected number of cells or
                 invalid values.
        """
        if len(cells) > len(self._columns):
            # Trailing tabs only produce empty cells
            if any(cells[len(self._columns):]):
                raise ValueError(
                    "Unexpected token count %d, expected %d" % (len(cells), len(self._columns))
                )
            cells = cells[:len(self._columns)]
        if len(cells) < self._required:
            raise ValueError(
                "Missing columns, got %d, expected %d" % (len(cells), self._required)
            )
        values = {}
        for index, column in enumerate(self._columns):
            if index < len(cells):
                value = cells[index]
            else:
                value = ""
            values[column.name] = column.convert(value, header)
        return values


FILES_LAYOUT = ColumnLayout([
    _column("FILENAME", "file_name"),
    _column("LOCATION", "location"),
])

CLIPS_LAYOUT = ColumnLayout([
    _column("CLIP NAME", "clip_name"),
    _column("SOURCE FILE", "source_file"),
])

PLUGINS_LAYOUT = ColumnLayout([
    _column("MANUFACTURER", "manufacturer"),
    _column("PLUG-IN NAME", "name"),
    _column("VERSION", "version"),
    _column("FORMAT", "format"),
    _column("STEMS", "stems"),
    _column("NUMBER OF INSTANCES", "instance_count", _integer),
])

TRACK_EVENTS_LAYOUT = ColumnLayout([
    _column("CHANNEL", "channel", _integer),
    _column("EVENT", "event", _integer),
    _column("CLIP NAME", "clip_name"),
    _column("START TIME", "start", _timecode),
    _column("END TIME", "end", _timecode),
    _column("DURATION", "duration", _timecode),
    _column("STATE", "muted", _muted),
])

# Used when timestamps are included in the export.
TRACK_EVENTS_TIMESTAMP_LAYOUT = ColumnLayout([
    _column("CHANNEL", "channel", _integer),
    _column("EVENT", "event", _integer),
    _column("CLIP NAME", "clip_name"),
    _column("START TIME", "start", _timecode),
    _column("END TIME", "end", _timecode),
    _column("DURATION", "duration", _timecode),
    _column("TIMESTAMP", "timestamp", _optional_timecode),
    _column("STATE", "muted", _muted),
])

MARKERS_LAYOUT = ColumnLayout([
    _column("#", "number", _integer),
    _column("LOCATION", "location", _timecode),
    _column("TIME REFERENCE", "time_reference", _integer),
    _column("UNITS", "units", _marker_units),
    _column("NAME", "name"),
    _column("COMMENTS", "comments", optional=True),
])

# Newer versions list the track a marker belongs to.
MARKERS_TRACK_LAYOUT = ColumnLayout([
    _column("#", "number", _integer),
    _column("LOCATION", "location", _timecode),
    _column("TIME REFERENCE", "time_reference", _integer),
    _column("UNITS", "units", _marker_units),
    _column("NAME", "name"),
    _column("TRACK NAME", "track_name"),
    _column("TRACK TYPE", "track_type"),
    _column("COMMENTS", "comments", optional=True),
])


def _trim_cells(cells):
    """
    Return the given cells without trailing empty ones.
    """
    cells = list(cells)
    while cells and not cells[-1]:
        cells.pop()
    return cells


def _split_cells(line):
    return [cell.strip() for cell in line.raw.split("\t")]


def _content_lines(lines):
    return [line for line in lines if not line.is_blank]


def _select_layout(section, line, layouts):
    """
    Return the layout matching the given column title line.

    :raises: SectionParseError if no layout matches.
    """
    cells = _split_cells(line)
    for layout in layouts:
        if layout.matches(cells):
            return layout
    raise SectionParseError(
        section,
        line.number,
        "Unexpected column titles %s" % ", ".join(_trim_cells(cells)),
    )


def _read_row(section, line, layout, header):
    try:
        return layout.read(_split_cells(line), header)
    except (ValueError, TimecodeError) as e:
        raise SectionParseError(section, line.number, str(e))


def _parse_table(section, lines, layouts, header, record_class):
    """
    Parse a table section: a column title line followed by one line per record.

    :returns: A list of `record_class` instances, in file order.
    """
    rows = _content_lines(lines)
    if not rows:
        return []
    layout = _select_layout(section, rows[0], layouts)
    records = []
    for line in rows[1:]:
        logger.debug("Treating : [%s]" % line.text)
        records.append(record_class(**_read_row(section, line, layout, header)))
    return records


def _split_field(line):
    """
    Return a (name, raw value) tuple for a "NAME:<tab>value" line, or None.
    """
    match = _FIELD_REGEXP.match(line.raw.strip())
    if not match:
        return None
    return match.group("name").strip(), match.group("value")


# Header field name -> (SessionHeader attribute, converter)
_HEADER_FIELDS = {
    "SESSION NAME": ("session_name", str),
    "SAMPLE RATE": ("sample_rate", float),
    "BIT DEPTH": ("bit_depth", str),
    "SESSION START TIMECODE": ("start_timecode", str),
    "TIMECODE FORMAT": ("time_format", str),
    "# OF AUDIO TRACKS": ("audio_track_count", int),
    "# OF AUDIO CLIPS": ("audio_clip_count", int),
    "# OF AUDIO FILES": ("audio_file_count", int),
    "# OF VIDEO TRACKS": ("video_track_count", int),
    "# OF VIDEO CLIPS": ("video_clip_count", int),
    "# OF VIDEO FILES": ("video_file_count", int),
}


def parse_header(lines):
    """
    Parse the header lines, listed before the first section.

    :param lines: A list of :class:`LogicalLine`.
    :returns: A :class:`SessionHeader`.
    :raises: SectionParseError
    """
    section = SectionKind.HEADER
    values = {}
    line_numbers = {}
    extra_fields = []
    for line in _content_lines(lines):
        logger.debug("Treating : [%s]" % line.text)
        field = _split_field(line)
        if not field:
            raise SectionParseError(section, line.number, "Expected a NAME: value field")
        name, value = field
        value = value.strip()
        if name not in _HEADER_FIELDS:
            logger.debug("Keeping unknown header field %s" % name)
            extra_fields.append((name, value))
            continue
        attribute, convert = _HEADER_FIELDS[name]
        if attribute in line_numbers:
            raise SectionParseError(
                section,
                line.number,
                "%s already set at line %d" % (name, line_numbers[attribute]),
            )
        try:
            values[attribute] = convert(value)
        except ValueError:
            raise SectionParseError(
                section, line.number, "Invalid %s value [%s]" % (name, value)
            )
        line_numbers[attribute] = line.number

    # The start timecode is listed before the timecode format, so it can only
    # be built once all fields are known.
    if "time_format" in values:
        try:
            frame_rate, drop_frame = parse_timecode_format(values["time_format"])
        except BadFrameRateError as e:
            raise SectionParseError(section, line_numbers["time_format"], str(e))
    else:
        frame_rate, drop_frame = FrameRate.FPS_25, False
        if values:
            logger.warning(
                "No TIMECODE FORMAT in header, assuming %s non drop frame" % frame_rate
            )
    values["frame_rate"] = frame_rate
    values["drop_frame"] = drop_frame

    start_timecode = values.pop("start_timecode", None)
    if start_timecode is None:
        values["start_timecode"] = Timecode(0, frame_rate, drop_frame)
    else:
        try:
            values["start_timecode"] = Timecode.parse(start_timecode, frame_rate, drop_frame)
        except TimecodeError as e:
            raise SectionParseError(section, line_numbers["start_timecode"], str(e))

    return SessionHeader(extra_fields=tuple(extra_fields), **values)


def parse_online_files(lines, header):
    """
    Parse the online files section.

    :returns: A list of :class:`MediaFile`.
    """
    return _parse_table(SectionKind.ONLINE_FILES, lines, [FILES_LAYOUT], header, MediaFile)


def parse_offline_files(lines, header):
    """
    Parse the offline files section.

    :returns: A list of :class:`MediaFile`.
    """
    return _parse_table(SectionKind.OFFLINE_FILES, lines, [FILES_LAYOUT], header, MediaFile)


def parse_online_clips(lines, header):
    """
    Parse the online clips section.

    :returns: A list of :class:`ClipRecord`.
    """
    return _parse_table(SectionKind.ONLINE_CLIPS, lines, [CLIPS_LAYOUT], header, ClipRecord)


def parse_plugins(lines, header):
    """
    Parse the plug-ins listing.

    :returns: A list of :class:`PluginRecord`.
    """
    return _parse_table(SectionKind.PLUGINS, lines, [PLUGINS_LAYOUT], header, PluginRecord)


def parse_markers(lines, header):
    """
    Parse the markers listing.

    :returns: A list of :class:`MarkerRecord`.
    """
    return _parse_table(
        SectionKind.MARKERS,
        lines,
        [MARKERS_LAYOUT, MARKERS_TRACK_LAYOUT],
        header,
        MarkerRecord,
    )


class _TrackBuilder(object):
    """
    Collect a track fields and events until the next track starts.
    """
    def __init__(self, name):
        self.name = name
        self.comments = ""
        self.user_delay = 0
        self.states = ()
        self.plugins = ()
        self.layout = None
        self.events = []

    def set_field(self, name, value, line):
        if name == "COMMENTS":
            self.comments = value.strip()
        elif name == "USER DELAY":
            # e.g. "0 Samples"
            tokens = value.split()
            if not tokens:
                raise SectionParseError(SectionKind.TRACKS, line.number, "Missing user delay")
            try:
                self.user_delay = int(tokens[0])
            except ValueError:
                raise SectionParseError(
                    SectionKind.TRACKS, line.number, "Invalid user delay [%s]" % value.strip()
                )
        elif name == "STATE":
            self.states = tuple(value.split())
        elif name == "PLUG-INS":
            self.plugins = tuple(
                plugin.strip() for plugin in value.split("\t") if plugin.strip()
            )

    def build(self):
        return TrackRecord(
            name=self.name,
            comments=self.comments,
            user_delay=self.user_delay,
            states=self.states,
            plugins=self.plugins,
            events=tuple(self.events),
        )


_TRACK_FIELDS = ("TRACK NAME", "COMMENTS", "USER DELAY", "STATE", "PLUG-INS")


def parse_tracks(lines, header):
    """
    Parse the track listing.

    Each track is listed with a few fields, a column title line and then its
    events. Events for multi channel tracks are returned as they are listed,
    one per channel.

    :returns: A list of :class:`TrackRecord`.
    """
    section = SectionKind.TRACKS
    tracks = []
    current = None
    for line in _content_lines(lines):
        logger.debug("Treating : [%s]" % line.text)
        field = _split_field(line)
        if field and field[0] in _TRACK_FIELDS:
            name, value = field
            if name == "TRACK NAME":
                if current is not None:
                    tracks.append(current.build())
                current = _TrackBuilder(value.strip())
            elif current is None:
                raise SectionParseError(section, line.number, "%s before TRACK NAME" % name)
            elif current.layout:
                raise SectionParseError(
                    section, line.number, "Unexpected %s field after events" % name
                )
            else:
                current.set_field(name, value, line)
            continue
        if current is None:
            raise SectionParseError(section, line.number, "Expected a TRACK NAME field")
        if current.layout is None:
            current.layout = _select_layout(
                section, line, [TRACK_EVENTS_LAYOUT, TRACK_EVENTS_TIMESTAMP_LAYOUT]
            )
            continue
        values = _read_row(section, line, current.layout, header)
        values.setdefault("timestamp", None)
        current.events.append(TrackEvent(**values))
    if current is not None:
        tracks.append(current.build())
    return tracks


# Section kind -> parser, the header is handled separately since other
# sections depend on it.
SECTION_PARSERS = {
    SectionKind.ONLINE_FILES: parse_online_files,
    SectionKind.OFFLINE_FILES: parse_offline_files,
    SectionKind.PLUGINS: parse_plugins,
    SectionKind.ONLINE_CLIPS: parse_online_clips,
    SectionKind.TRACKS: parse_tracks,
    SectionKind.MARKERS: parse_markers,
}
