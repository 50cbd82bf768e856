# Copyright (c) 2014 Shotgun Software Inc.
#
# CONFIDENTIAL AND PROPRIETARY
#
# This work is provided "AS IS" and subject to the Shotgun Pipeline Toolkit
# Source Code License included in this distribution package. See LICENSE.
# By accessing, using, copying or modifying this work you indicate your
# agreement to the Shotgun Pipeline Toolkit Source Code License. All rights
# not expressly granted therein are reserved by Shotgun Software Inc.

# Some particular errors / exceptions apps might want to catch and handle


class BadFrameRateError(ValueError):
    """
    Thin wrapper around ValueError for frame rate errors, allowing them to be
    caught easily
    """
    def __init__(self, frame_rate, frame_value=None):
        """
        Instantiate a new BadFrameRateError.

        :param frame_rate: The frame rate which caused the error, or for which
                           the frame value caused the error.
        :param frame_value: An optional integer, a frame value which is not
                            smaller than the frame rate.
        """
        if frame_value is None:
            msg = "Unsupported frame rate [%s]" % (frame_rate,)
        else:
            msg = (
                "Invalid frame value [%d], it must be smaller than the "
                "specified frame rate [%s]" % (frame_value, frame_rate)
            )
        super(BadFrameRateError, self).__init__(msg)
        # Store values internally, in case some apps want to retrieve them
        self._frame_value = frame_value
        self._frame_rate = frame_rate

    @property
    def frame_value(self):
        """
        Return the frame value which caused the error, if any.

        :returns: An integer or None
        """
        return self._frame_value

    @property
    def frame_rate(self):
        """
        Return the frame rate which caused the error.
        """
        return self._frame_rate


class BadDropFrameError(ValueError):
    """
    Raised when drop frame counting is requested for a frame rate which does
    not define it.
    """
    def __init__(self, frame_rate):
        super(BadDropFrameError, self).__init__(
            "Drop frame timecode is only defined for 29.97 and 59.94 fps, not %s" % (frame_rate,)
        )
        self._frame_rate = frame_rate

    @property
    def frame_rate(self):
        return self._frame_rate


class TimecodeError(ValueError):
    """
    Base class for all errors raised when building or combining timecodes.
    """


class InvalidComponents(TimecodeError):
    """
    Raised when hours, minutes, seconds or frames are out of range, or name
    a frame which is skipped by drop frame counting.
    """


class MalformedTimecode(TimecodeError):
    """
    Raised when a string can't be parsed as a canonical timecode.
    """


class RateMismatch(TimecodeError):
    """
    Raised when two timecodes with different frame rates are combined or
    compared.
    """
    def __init__(self, left, right):
        super(RateMismatch, self).__init__(
            "Can't combine timecodes at %s and %s" % (left, right)
        )
        self.left = left
        self.right = right


class Underflow(TimecodeError):
    """
    Raised when a subtraction would produce a negative timecode.
    """


class EDLParseError(ValueError):
    """
    Base class for all errors raised when reading a session export.
    """


class SectionParseError(EDLParseError):
    """
    Raised by a section parser on the first line it can't interpret.
    """
    def __init__(self, section, line_number, reason):
        """
        Instantiate a new SectionParseError.

        :param section: The section kind being parsed, a string.
        :param line_number: The 1-based line number in the export, or None
                            when the error is not tied to a single line.
        :param reason: A string, a description of the problem.
        """
        super(SectionParseError, self).__init__(
            "%s while parsing %s section at line %s" % (reason, section, line_number)
        )
        self._section = section
        self._line_number = line_number
        self._reason = reason

    @property
    def section(self):
        """
        Return the section kind which could not be parsed.
        """
        return self._section

    @property
    def line_number(self):
        """
        Return the offending line number.
        """
        return self._line_number

    @property
    def reason(self):
        """
        Return the reason why the line could not be parsed.
        """
        return self._reason


class DuplicateSection(EDLParseError):
    """
    Raised when a section start marker is found twice in the same export.
    """
    def __init__(self, section, line_number):
        super(DuplicateSection, self).__init__(
            "Section %s declared again at line %d" % (section, line_number)
        )
        self.section = section
        self.line_number = line_number


class UnknownSection(EDLParseError):
    """
    Raised for content outside any known section, when configured to do so.
    """
    def __init__(self, line_number, marker):
        super(UnknownSection, self).__init__(
            "Unknown section [%s] at line %d" % (marker, line_number)
        )
        self.line_number = line_number
        self.marker = marker
