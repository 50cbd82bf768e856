# Copyright (c) 2014 Shotgun Software Inc.
#
# CONFIDENTIAL AND PROPRIETARY
#
# This work is provided "AS IS" and subject to the Shotgun Pipeline Toolkit
# Source Code License included in this distribution package. See LICENSE.
# By accessing, using, copying or modifying this work you indicate your
# agreement to the Shotgun Pipeline Toolkit Source Code License. All rights
# not expressly granted therein are reserved by Shotgun Software Inc.
import enum
import io

from . import logger
from .config import ABORT_SESSION, ERROR, WARN, ParserConfig
from .errors import DuplicateSection, SectionParseError, UnknownSection
from .lines import LineReader
from .records import ParseWarning, SessionHeader
from .sections import (
    SECTION_PARSERS,
    SectionKind,
    looks_like_marker,
    parse_header,
    section_for_marker,
)
from .session import EDLSession


class ParserState(enum.Enum):
    """
    States of the :class:`EDLParser` section scanner.
    """
    START = "start"
    IN_HEADER = "in_header"
    SCANNING_FOR_SECTION = "scanning_for_section"
    IN_SECTION = "in_section"
    DONE = "done"


class EDLParser(object):
    """
    Read a session export and build an :class:`EDLSession`.

    The export is scanned in a single pass: lines before the first section
    marker are the header, then each section marker starts a new section
    which lasts until the next marker or the end of the text. A section can
    only appear once.

    Typical use of EDLParser could look like that::

        parser = EDLParser(on_section_parse_error="skip_section")
        session = parser.parse_file("/tmp/my_session.txt", encoding="mac_roman")
        for warning in session.warnings:
            print(warning.message)

    Each call to :meth:`parse` starts from a clean state, so a parser can be
    reused, but it is not meant to be shared between threads.
    """

    __logger = logger.get_logger("parser")

    def __init__(self, config=None, **overrides):
        """
        Instantiate a new EDLParser.

        :param config: A :class:`ParserConfig`, default values are used if None.
        :param overrides: Config values overriding the ones from `config`, e.g.
                          ``on_unknown_section="warn"``.
        """
        if config is None:
            config = ParserConfig(**overrides)
        elif overrides:
            values = config.model_dump()
            values.update(overrides)
            config = ParserConfig(**values)
        self._config = config
        self._reset()

    @property
    def config(self):
        return self._config

    @property
    def state(self):
        """
        Return the current :class:`ParserState`.
        """
        return self._state

    @property
    def transitions(self):
        """
        Return the state transitions of the last parse, as a list of
        (:class:`ParserState`, :class:`ParserState`) tuples.
        """
        return list(self._transitions)

    def parse_file(self, path, encoding="utf-8"):
        """
        Read and parse the given session export file.

        :param path: Full path to a session export, typically a .txt file.
        :param encoding: The file text encoding, exports are not always utf-8.
        :returns: An :class:`EDLSession`.
        """
        self.__logger.info("Reading %s" % path)
        # Keep line endings untouched, they are normalized by the line reader.
        with io.open(path, "r", encoding=encoding, newline="") as handle:
            return self.parse(handle.read())

    def parse(self, text):
        """
        Parse the given session export.

        :param text: The full content of a session export, as a string.
        :returns: An :class:`EDLSession`.
        :raises: SectionParseError if a section can't be parsed and errors
                 are not skipped, DuplicateSection if a section appears twice,
                 UnknownSection for unknown sections when configured to do so.
        """
        self._reset()
        self.__logger.info("Parsing session export")
        self._set_state(ParserState.IN_HEADER)
        for line in LineReader(text):
            self._feed(line)
        self._close_section()
        self._set_state(ParserState.DONE)
        session = EDLSession(
            header=self._header,
            online_files=self._results.get(SectionKind.ONLINE_FILES, ()),
            offline_files=self._results.get(SectionKind.OFFLINE_FILES, ()),
            plugins=self._results.get(SectionKind.PLUGINS, ()),
            online_clips=self._results.get(SectionKind.ONLINE_CLIPS, ()),
            tracks=self._results.get(SectionKind.TRACKS, ()),
            markers=self._results.get(SectionKind.MARKERS, ()),
            sections=self._sections,
            warnings=self._warnings,
        )
        self.__logger.info("Parsed %r" % session)
        return session

    def _reset(self):
        self._state = ParserState.START
        self._transitions = []
        self._current_section = None
        self._current_lines = []
        self._header = None
        self._results = {}
        self._sections = []
        self._warnings = []

    def _set_state(self, state):
        self.__logger.debug("%s -> %s" % (self._state.value, state.value))
        self._transitions.append((self._state, state))
        self._state = state

    def _feed(self, line):
        """
        Treat a single line.

        :param line: A :class:`LogicalLine`.
        """
        if line.is_blank:
            if self._state in (ParserState.IN_HEADER, ParserState.IN_SECTION):
                self._current_lines.append(line)
            return

        self.__logger.debug("Treating : [%s]" % line.text)
        kind = section_for_marker(line.text)
        if kind is not None:
            self._close_section()
            if kind in self._sections:
                raise DuplicateSection(kind, line.number)
            self._sections.append(kind)
            self._current_section = kind
            self._set_state(ParserState.IN_SECTION)
        elif looks_like_marker(line.text):
            self._close_section()
            self._unknown_section(line)
        elif self._state == ParserState.SCANNING_FOR_SECTION:
            # Content from an unknown section, already reported.
            self.__logger.debug("Ignoring line %d" % line.number)
        else:
            self._current_lines.append(line)

    def _unknown_section(self, line):
        """
        Report an unknown section marker, as configured.
        """
        policy = self._config.on_unknown_section
        if policy == ERROR:
            raise UnknownSection(line.number, line.text)
        if policy == WARN:
            message = "Ignoring unknown section %s" % line.text
            self.__logger.warning("%s at line %d" % (message, line.number))
            self._warnings.append(ParseWarning(None, line.number, message))
        else:
            self.__logger.debug("Ignoring unknown section %s" % line.text)

    def _close_section(self):
        """
        Parse the lines collected for the current section, if any, and go back
        to scanning for the next section.
        """
        lines = self._current_lines
        self._current_lines = []
        if self._state == ParserState.IN_HEADER:
            self._header = self._run(SectionKind.HEADER, parse_header, lines)
            if self._header is None:
                self._header = SessionHeader()
        elif self._state == ParserState.IN_SECTION:
            kind = self._current_section
            records = self._run(kind, SECTION_PARSERS[kind], lines, self._header)
            self._results[kind] = records or ()
            self._current_section = None
        else:
            return
        self._set_state(ParserState.SCANNING_FOR_SECTION)

    def _run(self, kind, section_parser, *args):
        """
        Call the given section parser, handling errors as configured.

        :returns: The section parser result, or None if the section was skipped.
        """
        try:
            return section_parser(*args)
        except SectionParseError as e:
            if self._config.on_section_parse_error == ABORT_SESSION:
                raise
            message = "Skipped %s section: %s" % (kind, e.reason)
            self.__logger.warning("%s at line %s" % (message, e.line_number))
            self._warnings.append(ParseWarning(kind.value, e.line_number, message))
            return None
