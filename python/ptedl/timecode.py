# Copyright 2016 Autodesk, Inc. All rights reserved.
#
# Use of this software is subject to the terms of the Autodesk license agreement
# provided at the time of installation or download, or which otherwise accompanies
# this software in either electronic or hard copy form.
#

import decimal
import numbers
import re

from .errors import (
    BadDropFrameError,
    BadFrameRateError,
    InvalidComponents,
    MalformedTimecode,
    RateMismatch,
    Underflow,
)
from .frame_rate import FrameRate

DROP_FRAME_DELIMITER = ";"
NON_DROP_FRAME_DELIMITER = ":"

# hh:mm:ss:ff or hh:mm:ss;ff, hours can have more than 2 digits for long
# form timecodes, e.g. 103:12:33:07, frames can have 3 digits above 100fps.
# Only ASCII digits, and no leading zero beyond two digits, so parsed values
# are always displayed back identically.
_TIMECODE_REGEXP = re.compile(
    r"^(?P<hours>[0-9]{2}|[1-9][0-9]{2,})"
    r":(?P<minutes>[0-9]{2})"
    r":(?P<seconds>[0-9]{2})"
    r"(?P<delimiter>[:;])(?P<frames>[0-9]{2}|[1-9][0-9]{2})\Z"
)


def _check_drop_frame(frame_rate, drop_frame):
    """
    Raise a BadDropFrameError if drop frame is not defined for the given rate.
    """
    if drop_frame and not frame_rate.supports_drop_frame:
        raise BadDropFrameError(frame_rate)


def _check_components(hours, minutes, seconds, frames, frame_rate, drop_frame):
    """
    Validate timecode components for the given rate.

    :raises: InvalidComponents if a value is out of range or is a frame
             number skipped by drop frame counting.
    """
    for name, value in (
        ("hours", hours), ("minutes", minutes), ("seconds", seconds), ("frames", frames)
    ):
        if not isinstance(value, numbers.Integral) or isinstance(value, bool):
            raise InvalidComponents("Invalid %s value %r, it must be an integer" % (name, value))
        if value < 0:
            raise InvalidComponents("Invalid %s value %d, it must be positive" % (name, value))
    if minutes > 59:
        raise InvalidComponents(
            "Invalid minutes value %d, it must be smaller than 60" % minutes
        )
    if seconds > 59:
        raise InvalidComponents(
            "Invalid seconds value %d, it must be smaller than 60" % seconds
        )
    if frames >= frame_rate.nominal:
        raise InvalidComponents(
            "Invalid frame value %d, it must be smaller than the frame rate %d" % (
                frames, frame_rate.nominal
            )
        )
    if drop_frame and seconds == 0 and minutes % 10 and \
            frames < frame_rate.drop_frames_per_minute:
        raise InvalidComponents(
            "Frame %02d:%02d:%02d;%02d does not exist in drop frame timecode" % (
                hours, minutes, seconds, frames
            )
        )


def _ticks_from_components(hours, minutes, seconds, frames, frame_rate, drop_frame):
    """
    Return the absolute frame count for the given, already validated, components.
    """
    fps_int = frame_rate.nominal
    frame_number = ((hours * 60 + minutes) * 60 + seconds) * fps_int + frames
    if drop_frame:
        # Frame numbers are dropped every minute, but not every ten minutes.
        total_minutes = 60 * hours + minutes
        frame_number -= frame_rate.drop_frames_per_minute * (
            total_minutes - total_minutes // 10
        )
    return frame_number


def _components_from_ticks(ticks, frame_rate, drop_frame):
    """
    Return a (hours, minutes, seconds, frames) tuple for the given frame count.

    For a good discussion around time codes and sample code, see
    http://andrewduncan.net/timecodes/
    """
    fps_int = frame_rate.nominal
    frame_number = ticks
    if drop_frame:
        # Example at the one minute mark, 30 fps:
        #
        # frame: 1798 ND: 00:00:59:28 D: 00:00:59;28
        # frame: 1799 ND: 00:00:59:29 D: 00:00:59;29
        # frame: 1800 ND: 00:01:00:00 D: 00:01:00;02
        # frame: 1801 ND: 00:01:00:01 D: 00:01:00;03
        #
        # example at the ten minute mark, 30 fps:
        #
        # frame: 17981 ND: 00:09:59:11 D: 00:09:59;29
        # frame: 17982 ND: 00:09:59:12 D: 00:10:00;00
        # frame: 17983 ND: 00:09:59:13 D: 00:10:00;01
        #
        # Number of frame numbers dropped on minute marks, 2 for 29.97 fps,
        # 4 for 59.94 fps.
        drop_frames = frame_rate.drop_frames_per_minute
        # Number of actual frames in a minute, and in ten minutes.
        # 30fps: 30 * 60 - 2 = 1798, 30 * 60 * 10 - 2 * 9 = 17982
        frames_per_min = fps_int * 60 - drop_frames
        frames_per_10_mins = fps_int * 60 * 10 - drop_frames * 9

        ten_minute_chunks, remaining_frames = divmod(frame_number, frames_per_10_mins)
        # Every ten minute chunk skips 9 times the drop count, the first
        # minute in each chunk is not dropped.
        frame_number += drop_frames * 9 * ten_minute_chunks
        if remaining_frames > drop_frames:
            frame_number += drop_frames * (
                (remaining_frames - drop_frames) // frames_per_min
            )

    hours, frame_number = divmod(frame_number, 3600 * fps_int)
    minutes, frame_number = divmod(frame_number, 60 * fps_int)
    seconds, frames = divmod(frame_number, fps_int)
    return hours, minutes, seconds, frames


def _format(hours, minutes, seconds, frames, drop_frame):
    if drop_frame:
        frames_token = DROP_FRAME_DELIMITER
    else:
        frames_token = NON_DROP_FRAME_DELIMITER
    return "%02d:%02d:%02d%s%02d" % (hours, minutes, seconds, frames_token, frames)


# Some helpers to convert timecodes to frames, back and forth.
def frame_from_timecode(timecode, fps=24, drop_frame=None):
    """
    Return the frame number for the given timecode.

    :param timecode: A timecode, either as a string in hh:mm:ss:ff format
                     or as a (hours, minutes, seconds, frames) tuple.
    :param fps: Number of frames per second, or a :class:`FrameRate`.
    :param drop_frame: Boolean determining whether timecode should use drop frame
                       or not. If None, it is set from the frame delimiter when
                       a string is given.
    :return: Corresponding frame number, as an int.
    """
    frame_rate = FrameRate.from_fps(fps)
    if isinstance(timecode, str):
        match = _TIMECODE_REGEXP.match(timecode.strip())
        if not match:
            raise MalformedTimecode(
                "Timecode %s is not in a valid hh:mm:ss:ff format." % timecode
            )
        if drop_frame is None:
            drop_frame = match.group("delimiter") == DROP_FRAME_DELIMITER
        components = tuple(
            int(match.group(name)) for name in ("hours", "minutes", "seconds", "frames")
        )
    else:  # Assume a 4 elements tuple
        components = tuple(timecode)
    drop_frame = bool(drop_frame)
    _check_drop_frame(frame_rate, drop_frame)
    _check_components(*(components + (frame_rate, drop_frame)))
    return _ticks_from_components(*(components + (frame_rate, drop_frame)))


def timecode_from_frame(frame_number, fps=24, drop_frame=False):
    """
    Return the timecode corresponding to the given frame.

    :param frame_number: A frame number, as an int.
    :param fps: Number of frames per seconds, or a :class:`FrameRate`.
    :param drop_frame: Boolean determining whether timecode should use drop frame or not.
    :returns: Timecode as string, e.g. '01:02:12:32' (non-drop frame) or
              '01:02:12;32' (drop frame)
    """
    return str(Timecode.from_ticks(frame_number, fps, drop_frame))


class Timecode(object):
    """
    An immutable, frame accurate timecode.

    A Timecode stores an absolute number of ticks, one tick being one frame at
    its frame rate, and the hours, minutes, seconds and frames this count is
    displayed as. Drop frame counting is supported for 29.97 and 59.94 fps.

    Timecodes can be added to or subtracted from each other, or from a number
    of frames, and compared, as long as they share the same frame rate::

        start = Timecode.parse("01:00:00:00", 25)
        end = start + 125
        print(end - start) # 00:00:05:00
    """
    __slots__ = (
        "_frame_rate",
        "_drop_frame",
        "_ticks",
        "_hours",
        "_minutes",
        "_seconds",
        "_frames",
    )

    def __init__(self, ticks=0, frame_rate=FrameRate.FPS_25, drop_frame=False):
        """
        Instantiate a Timecode from an absolute frame count.

        :param ticks: A positive integer, a number of frames since zero.
        :param frame_rate: A :class:`FrameRate`, or a value it can be built from,
                           e.g. 24 or 29.97.
        :param drop_frame: Boolean indicating whether to use drop frame or not.
        :raises: Underflow for negative tick counts, BadDropFrameError if
                 drop frame is not defined for the frame rate.
        """
        frame_rate = FrameRate.from_fps(frame_rate)
        drop_frame = bool(drop_frame)
        _check_drop_frame(frame_rate, drop_frame)
        if not isinstance(ticks, numbers.Integral) or isinstance(ticks, bool):
            raise TypeError("Timecode ticks must be an integer, not %r" % (ticks,))
        if ticks < 0:
            raise Underflow("Timecodes can't be negative, got %d ticks" % ticks)
        hours, minutes, seconds, frames = _components_from_ticks(
            ticks, frame_rate, drop_frame
        )
        set_slot = super(Timecode, self).__setattr__
        set_slot("_frame_rate", frame_rate)
        set_slot("_drop_frame", drop_frame)
        set_slot("_ticks", int(ticks))
        set_slot("_hours", hours)
        set_slot("_minutes", minutes)
        set_slot("_seconds", seconds)
        set_slot("_frames", frames)

    @classmethod
    def from_parts(cls, hours, minutes, seconds, frames, frame_rate, drop_frame=False):
        """
        Return a new :class:`Timecode` from its components.

        :param hours: Number of hours, as an int.
        :param minutes: Number of minutes, as an int.
        :param seconds: Number of seconds, as an int.
        :param frames: Number of frames, as an int.
        :param frame_rate: A :class:`FrameRate`, or a value it can be built from.
        :param drop_frame: Boolean indicating whether to use drop frame or not.
        :returns: A :class:`Timecode` instance.
        :raises: InvalidComponents if a value is out of range, or names a frame
                 skipped by drop frame counting.
        """
        frame_rate = FrameRate.from_fps(frame_rate)
        drop_frame = bool(drop_frame)
        _check_drop_frame(frame_rate, drop_frame)
        _check_components(hours, minutes, seconds, frames, frame_rate, drop_frame)
        return cls(
            _ticks_from_components(hours, minutes, seconds, frames, frame_rate, drop_frame),
            frame_rate,
            drop_frame,
        )

    @classmethod
    def from_ticks(cls, ticks, frame_rate, drop_frame=False):
        """
        Return a new :class:`Timecode` for the given frame count, at the given rate.

        :param ticks: A frame number, as an :obj:`int`.
        :param frame_rate: A :class:`FrameRate`, or a value it can be built from.
        :param drop_frame: Boolean indicating whether to use drop frame or not.
        :return: A :class:`Timecode` instance.
        """
        return cls(ticks, frame_rate, drop_frame)

    from_frame = from_ticks

    @classmethod
    def parse(cls, timecode_str, frame_rate, drop_frame=False):
        """
        Parse a canonical timecode string.

        Non drop frame timecodes use ``hh:mm:ss:ff``, drop frame timecodes
        use ``hh:mm:ss;ff``.

        :param timecode_str: A timecode string.
        :param frame_rate: A :class:`FrameRate`, or a value it can be built from.
        :param drop_frame: Boolean indicating whether to use drop frame or not.
        :returns: A :class:`Timecode` instance.
        :raises: MalformedTimecode if the string can't be parsed.
        """
        frame_rate = FrameRate.from_fps(frame_rate)
        drop_frame = bool(drop_frame)
        _check_drop_frame(frame_rate, drop_frame)
        if not isinstance(timecode_str, str):
            raise MalformedTimecode("Timecode %r is not a string" % (timecode_str,))
        match = _TIMECODE_REGEXP.match(timecode_str)
        if not match:
            raise MalformedTimecode(
                "Timecode %s is not in a valid hh:mm:ss:ff format." % timecode_str
            )
        expected = DROP_FRAME_DELIMITER if drop_frame else NON_DROP_FRAME_DELIMITER
        if match.group("delimiter") != expected:
            raise MalformedTimecode(
                "Timecode %s must use '%s' before frames for %s %s" % (
                    timecode_str,
                    expected,
                    frame_rate,
                    "drop frame" if drop_frame else "non drop frame",
                )
            )
        try:
            return cls.from_parts(
                int(match.group("hours")),
                int(match.group("minutes")),
                int(match.group("seconds")),
                int(match.group("frames")),
                frame_rate,
                drop_frame,
            )
        except InvalidComponents as e:
            raise MalformedTimecode("Invalid timecode %s: %s" % (timecode_str, e))

    @property
    def frame_rate(self):
        """
        Return the :class:`FrameRate` of this timecode.
        """
        return self._frame_rate

    @property
    def drop_frame(self):
        """
        Return True if this timecode uses drop frame counting.
        """
        return self._drop_frame

    @property
    def hours(self):
        return self._hours

    @property
    def minutes(self):
        return self._minutes

    @property
    def seconds(self):
        return self._seconds

    @property
    def frames(self):
        return self._frames

    def to_ticks(self):
        """
        Return the absolute frame count for this :class:`Timecode`.

        :return: A frame number, as an :obj:`int`.
        """
        return self._ticks

    to_frame = to_ticks

    def to_seconds(self):
        """
        Convert this :class:`Timecode` to seconds, using its exact frame rate.

        :return: Number of seconds as a :obj:`Decimal`.
        """
        rate = self._frame_rate.rate
        return decimal.Decimal(self._ticks * rate.denominator) / rate.numerator

    def to_string(self, subframes=False):
        """
        Return the canonical string representation of this :class:`Timecode`.

        :param subframes: Sub-frame display is not available yet, and must be
                          left to False.
        :returns: A string, e.g. "01:00:00:00" or "01:00:00;02".
        :raises: NotImplementedError if sub-frames are requested.
        """
        if subframes:
            raise NotImplementedError("Sub-frame timecode display is not supported")
        return _format(self._hours, self._minutes, self._seconds, self._frames, self._drop_frame)

    def _check_rate(self, other):
        if self._frame_rate is not other.frame_rate:
            raise RateMismatch(self._frame_rate, other.frame_rate)

    def _duration_ticks(self, duration):
        """
        Return a number of frames from an int or a :class:`Timecode` duration.
        """
        if isinstance(duration, Timecode):
            self._check_rate(duration)
            return duration.to_ticks()
        if isinstance(duration, numbers.Integral) and not isinstance(duration, bool):
            return int(duration)
        raise TypeError("Unsupported duration type %s" % type(duration))

    def add(self, duration):
        """
        Return a new :class:`Timecode`, this timecode moved forward by the given
        duration.

        :param duration: A number of frames, or a :class:`Timecode` with the same
                         frame rate.
        :raises: RateMismatch, Underflow if a negative duration would move the
                 result before zero.
        """
        ticks = self._ticks + self._duration_ticks(duration)
        if ticks < 0:
            raise Underflow("%s + %s is negative" % (self, duration))
        return Timecode(ticks, self._frame_rate, self._drop_frame)

    def subtract(self, duration):
        """
        Return a new :class:`Timecode`, this timecode moved backward by the given
        duration.

        :param duration: A number of frames, or a :class:`Timecode` with the same
                         frame rate.
        :raises: RateMismatch, Underflow if the result would be negative.
        """
        ticks = self._ticks - self._duration_ticks(duration)
        if ticks < 0:
            raise Underflow("%s - %s is negative" % (self, duration))
        return Timecode(ticks, self._frame_rate, self._drop_frame)

    # Redefine some standard operators.
    def __add__(self, right):
        """
        + operator override: Add a timecode or a number of frames to this :class:`Timecode`.
        """
        try:
            return self.add(right)
        except TypeError:
            return NotImplemented

    def __radd__(self, left):
        return self.__add__(left)

    def __sub__(self, right):
        """
        - operator override: Subtract a timecode or a number of frames from this
        :class:`Timecode`.
        """
        try:
            return self.subtract(right)
        except TypeError:
            return NotImplemented

    def __eq__(self, other):
        """
        == operator override: timecodes are equal if they share the same frame
        rate, drop frame setting and frame count.

        Unlike ordering comparisons and arithmetic, comparing timecodes with
        different frame rates does not raise a RateMismatch: they are simply
        not equal, no conversion is attempted. This allows timecodes with
        different rates to be stored in sets or used as dictionary keys.
        """
        if not isinstance(other, Timecode):
            return NotImplemented
        return (
            self._frame_rate is other.frame_rate
            and self._drop_frame == other.drop_frame
            and self._ticks == other.to_ticks()
        )

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other):
        if not isinstance(other, Timecode):
            return NotImplemented
        self._check_rate(other)
        return self._ticks < other.to_ticks()

    def __le__(self, other):
        if not isinstance(other, Timecode):
            return NotImplemented
        self._check_rate(other)
        return self._ticks <= other.to_ticks()

    def __gt__(self, other):
        if not isinstance(other, Timecode):
            return NotImplemented
        self._check_rate(other)
        return self._ticks > other.to_ticks()

    def __ge__(self, other):
        if not isinstance(other, Timecode):
            return NotImplemented
        self._check_rate(other)
        return self._ticks >= other.to_ticks()

    def __hash__(self):
        return hash((self._frame_rate, self._drop_frame, self._ticks))

    def __setattr__(self, attr_name, value):
        raise AttributeError("Timecode %s attribute can't be set" % attr_name)

    def __delattr__(self, attr_name):
        raise AttributeError("Timecode %s attribute can't be deleted" % attr_name)

    def __reduce__(self):
        return (Timecode, (self._ticks, self._frame_rate, self._drop_frame))

    def __str__(self):
        """
        String representation of this :class:`Timecode` instance.
        """
        return self.to_string()

    def __repr__(self):
        """
        Code representation of this :class:`Timecode` instance.
        """
        drop = "ND"
        if self._drop_frame:
            drop = "D"
        return "<class %s %s (%s %s)>" % (
            self.__class__.__name__, self.to_string(), self._frame_rate, drop
        )
