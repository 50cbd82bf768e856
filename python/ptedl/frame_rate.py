# Copyright 2016 Autodesk, Inc. All rights reserved.
#
# Use of this software is subject to the terms of the Autodesk license agreement
# provided at the time of installation or download, or which otherwise accompanies
# this software in either electronic or hard copy form.
#
import decimal
import enum
import math
from fractions import Fraction

from .errors import BadFrameRateError

# Maximum difference allowed when matching a numeric fps value to a known rate.
_FPS_TOLERANCE = 0.01


class FrameRate(enum.Enum):
    """
    Frame rates found in session exports.

    Each member stores the number of frames counted per timecode second, and
    the exact rate as a :class:`fractions.Fraction`, so no float drift can
    creep into computations.
    """
    FPS_23_976 = ("23.976", 24, Fraction(24000, 1001))
    FPS_24 = ("24", 24, Fraction(24))
    FPS_25 = ("25", 25, Fraction(25))
    FPS_29_97 = ("29.97", 30, Fraction(30000, 1001))
    FPS_30 = ("30", 30, Fraction(30))
    FPS_48 = ("48", 48, Fraction(48))
    FPS_50 = ("50", 50, Fraction(50))
    FPS_59_94 = ("59.94", 60, Fraction(60000, 1001))
    FPS_60 = ("60", 60, Fraction(60))
    FPS_100 = ("100", 100, Fraction(100))
    FPS_119_88 = ("119.88", 120, Fraction(120000, 1001))
    FPS_120 = ("120", 120, Fraction(120))

    def __init__(self, label, nominal, rate):
        self.label = label
        self.nominal = nominal
        self.rate = rate

    @property
    def supports_drop_frame(self):
        """
        Return True if drop frame counting is defined for this rate.
        """
        return self in (FrameRate.FPS_29_97, FrameRate.FPS_59_94)

    @property
    def drop_frames_per_minute(self):
        """
        Return the number of frame numbers skipped at each minute boundary
        when drop frame counting is used: 2 at 29.97 fps, 4 at 59.94 fps.

        :returns: An integer, 0 for rates without drop frame support.
        """
        if not self.supports_drop_frame:
            return 0
        # 6% of the nominal frame rate, rounded.
        return self.nominal // 15

    def __str__(self):
        return "%sfps" % self.label

    @classmethod
    def from_fps(cls, value):
        """
        Return the :class:`FrameRate` matching the given value.

        :param value: A :class:`FrameRate`, an int, float, :class:`decimal.Decimal`,
                      or a numeric string like "29.97".
        :returns: A :class:`FrameRate` member.
        :raises: BadFrameRateError if no known rate matches.
        """
        if isinstance(value, cls):
            return value
        try:
            fps = float(decimal.Decimal(str(value).strip()))
        except (decimal.InvalidOperation, ValueError):
            raise BadFrameRateError(value)
        if not math.isfinite(fps):
            raise BadFrameRateError(value)
        best = min(cls, key=lambda member: abs(float(member.rate) - fps))
        # 23.98 and 23.976 are both commonly used for 24000/1001.
        if abs(float(best.rate) - fps) > _FPS_TOLERANCE and \
                abs(float(best.label) - fps) > _FPS_TOLERANCE:
            raise BadFrameRateError(value)
        return best


def parse_timecode_format(format_string):
    """
    Parse a TIMECODE FORMAT header value, e.g. "25 Frame" or "29.97 Drop Frame".

    :param format_string: The header value.
    :returns: A (:class:`FrameRate`, drop_frame) tuple.
    :raises: BadFrameRateError if the format is not recognized.
    """
    tokens = format_string.split()
    if len(tokens) < 2 or tokens[-1].lower() != "frame":
        raise BadFrameRateError(format_string)
    drop_frame = len(tokens) == 3 and tokens[1].lower() == "drop"
    if len(tokens) > 2 and not drop_frame:
        raise BadFrameRateError(format_string)
    frame_rate = FrameRate.from_fps(tokens[0])
    if drop_frame and not frame_rate.supports_drop_frame:
        raise BadFrameRateError(format_string)
    return frame_rate, drop_frame
