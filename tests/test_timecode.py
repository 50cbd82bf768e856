# Copyright 2016 Autodesk, Inc. All rights reserved.
#
# Use of this software is subject to the terms of the Autodesk license agreement
# provided at the time of installation or download, or which otherwise accompanies
# this software in either electronic or hard copy form.
#
import decimal
import pickle
import unittest

from ptedl import timecode
from ptedl import (
    BadDropFrameError,
    BadFrameRateError,
    FrameRate,
    InvalidComponents,
    MalformedTimecode,
    RateMismatch,
    Timecode,
    Underflow,
    parse_timecode_format,
)


class TestTimecode(unittest.TestCase):

    def setUp(self):
        # Define some useful valid frame rates to test with
        self._frame_rates = [23.97, 24, 25, 29.97, 30, 50, 59.94, 60]
        # Define the supported drop frame rates
        self._drop_frame_rates = [29.97, 59.94]

        # Set up some reference data that we'll compare against in our conversion tests.
        # Note: drop frame timecode uses ; as the frame delimiter
        self._frames_timecode_map = [
            # Should be the same as 24fps
            (23.98, False, 1234567, "14:17:20:07"),
            (23.98, False, 2345678, "27:08:56:14"),
            (24, False, 1234567, "14:17:20:07"),
            (24, False, 2345678, "27:08:56:14"),
            (24, False, 12345678, "142:53:23:06"),
            (24, False, 23456789, "271:29:26:05"),
            (25, False, 1234567, "13:43:02:17"),
            (25, False, 90000, "01:00:00:00"),
            # Should be the same as 30fps
            (29.97, False, 1234567, "11:25:52:07"),
            (29.97, False, 2345678, "21:43:09:08"),
            (30, False, 1234567, "11:25:52:07"),
            (30, False, 2345678, "21:43:09:08"),
            (30, False, 12345678, "114:18:42:18"),
            (30, False, 23456789, "217:11:32:29"),
            (60, False, 1234567, "05:42:56:07"),
            (60, False, 2345678, "10:51:34:38"),
            (60, False, 12345678, "57:09:21:18"),
            (60, False, 23456789, "108:35:46:29"),
            # Drop frame with DF notation
            (29.97, True, 1234567, "11:26:33;13"),
            (29.97, True, 2345678, "21:44:27;16"),
            (29.97, True, 12345678, "114:25:34;16"),
            (29.97, True, 23456789, "217:24:35;19"),
            (59.94, True, 1234567, "05:43:16;43"),
            (59.94, True, 2345678, "10:52:13;46"),
            (59.94, True, 12345678, "57:12:47;14"),
            (59.94, True, 23456789, "108:42:17;49"),
        ]

        # Drop frame timecodes without drop frame notation, only accepted
        # by the frame_from_timecode helper when drop frame is explicitly set.
        self._frames_timecode_df_no_notation_map = [
            (29.97, True, 1234567, "11:26:33:13"),
            (29.97, True, 2345678, "21:44:27:16"),
            (59.94, True, 1234567, "05:43:16:43"),
            (59.94, True, 2345678, "10:52:13:46"),
        ]

    def test_frames_to_timecode(self):
        """
        Test we return the correct timecodes for various frame, fps, and drop frame settings.
        """
        for fps, drop_frame, frame, expected_tc in self._frames_timecode_map:
            tc = timecode.timecode_from_frame(frame, fps=fps, drop_frame=drop_frame)
            self.assertEqual(tc, expected_tc)
            tc = Timecode.from_ticks(frame, fps, drop_frame)
            self.assertEqual(tc.to_string(), expected_tc)

    def test_timecode_to_frames(self):
        """
        Test we return the correct frames for various timecode, fps, and drop frame settings.
        """
        for fps, drop_frame, expected_frame, tc in self._frames_timecode_map:
            frame = timecode.frame_from_timecode(tc, fps=fps, drop_frame=drop_frame)
            self.assertEqual(frame, expected_frame)
            # Let the helper figure out the drop frame setting from the notation.
            frame = timecode.frame_from_timecode(tc, fps)
            self.assertEqual(frame, expected_frame)
            self.assertEqual(Timecode.parse(tc, fps, drop_frame).to_ticks(), expected_frame)

    def test_timecode_to_frames_df_without_notation(self):
        for fps, drop_frame, expected_frame, tc in self._frames_timecode_df_no_notation_map:
            frame = timecode.frame_from_timecode(tc, fps=fps, drop_frame=drop_frame)
            self.assertEqual(frame, expected_frame)
            # Timecode.parse is strict about the notation.
            with self.assertRaises(MalformedTimecode):
                Timecode.parse(tc, fps, drop_frame)

    def test_tuple_input(self):
        self.assertEqual(timecode.frame_from_timecode((1, 0, 0, 0), fps=25), 90000)
        self.assertEqual(
            timecode.frame_from_timecode((0, 1, 0, 2), fps=29.97, drop_frame=True), 1800
        )

    def test_tc_round_trip(self):
        # We need to make sure tc values aren't mutated when going back and
        # forth from tc to frames to tc
        # NDF tests
        timecodes = ["01:02:03:04", "02:03:04:05", "103:12:33:07"]
        for tc in timecodes:
            for fps in self._frame_rates:
                parsed = Timecode.parse(tc, fps)
                self.assertEqual(parsed.to_string(), tc)
                frame = timecode.frame_from_timecode(tc, fps=fps, drop_frame=False)
                self.assertEqual(timecode.timecode_from_frame(frame, fps=fps), tc)

        # DF tests
        df_timecodes = ["01:02:03;04", "02:03:04;05", "00:10:00;00", "00:11:00;04"]
        for tc in df_timecodes:
            for fps in self._drop_frame_rates:
                parsed = Timecode.parse(tc, fps, drop_frame=True)
                self.assertEqual(str(parsed), tc)
                frame = timecode.frame_from_timecode(tc, fps=fps, drop_frame=True)
                new_tc = timecode.timecode_from_frame(frame, fps=fps, drop_frame=True)
                self.assertEqual(tc, new_tc)

    def test_frame_round_trip(self):
        # We need to make sure frame values aren't mutated when going back and
        # forth from frames to tc to frames.
        frames = [0, 1, 1799, 1800, 17981, 17982, 2394732, 12332, 8599999, 8640005]
        for frame in frames:
            # NDF
            for fps in self._frame_rates:
                tc = Timecode.from_ticks(frame, fps)
                self.assertEqual(tc.to_ticks(), frame)
                self.assertEqual(Timecode.parse(str(tc), fps).to_ticks(), frame)
            # DF
            for fps in self._drop_frame_rates:
                tc = Timecode.from_ticks(frame, fps, drop_frame=True)
                self.assertEqual(tc.to_ticks(), frame)
                new_frame = timecode.frame_from_timecode(str(tc), fps=fps, drop_frame=True)
                self.assertEqual(frame, new_frame)

    def test_drop_frame_minute_boundaries(self):
        # Walk the first hour frame by frame, minute labels 1 to 9 of each ten
        # minutes never show frames 00 and 01.
        for ticks in range(0, 30 * 60 * 60, 7):
            tc = Timecode.from_ticks(ticks, FrameRate.FPS_29_97, drop_frame=True)
            if tc.seconds == 0 and tc.minutes % 10:
                self.assertGreaterEqual(tc.frames, 2, str(tc))
        for minutes in range(1, 10):
            for frames in (0, 1):
                with self.assertRaises(InvalidComponents):
                    Timecode.from_parts(0, minutes, 0, frames, 29.97, drop_frame=True)
                with self.assertRaises(MalformedTimecode):
                    Timecode.parse("00:%02d:00;%02d" % (minutes, frames), 29.97, True)
        for minutes in (0, 10, 20, 30, 40, 50):
            for frames in (0, 1):
                tc = Timecode.from_parts(0, minutes, 0, frames, 29.97, drop_frame=True)
                self.assertEqual(tc.minutes, minutes)
                self.assertEqual(tc.frames, frames)
        # 59.94 drops four frame numbers
        with self.assertRaises(InvalidComponents):
            Timecode.from_parts(0, 1, 0, 3, 59.94, drop_frame=True)
        tc = Timecode.from_parts(0, 1, 0, 4, 59.94, drop_frame=True)
        self.assertEqual(tc.to_ticks(), 3600)

    def test_drop_frame_consecutive(self):
        # 00:00:59;29 is followed by 00:01:00;02
        tc = Timecode.parse("00:00:59;29", 29.97, drop_frame=True)
        self.assertEqual(str(tc + 1), "00:01:00;02")
        self.assertEqual(str(Timecode.from_ticks(17982, 29.97, True)), "00:10:00;00")
        self.assertEqual(str(Timecode.from_ticks(17981, 29.97, True)), "00:09:59;29")

    def test_components(self):
        tc = Timecode.from_parts(1, 2, 3, 4, FrameRate.FPS_25)
        self.assertEqual((tc.hours, tc.minutes, tc.seconds, tc.frames), (1, 2, 3, 4))
        self.assertEqual(tc.frame_rate, FrameRate.FPS_25)
        self.assertFalse(tc.drop_frame)
        self.assertEqual(tc.to_ticks(), ((1 * 60 + 2) * 60 + 3) * 25 + 4)
        self.assertEqual(tc.to_frame(), tc.to_ticks())
        self.assertEqual(Timecode.from_frame(tc.to_ticks(), 25), tc)

    def test_invalid_components(self):
        for parts in [(0, 60, 0, 0), (0, 0, 60, 0), (0, 0, 0, 25), (-1, 0, 0, 0), (0, 0, 0, 1.5)]:
            with self.assertRaises(InvalidComponents):
                Timecode.from_parts(*(parts + (25,)))

    def test_malformed(self):
        for value in ["", "01:00:00", "1:00:00:00", "01:00:00:0a", "01-00-00-00", "01:00:00:25"]:
            with self.assertRaises(MalformedTimecode):
                Timecode.parse(value, 25)
        # Wrong notation for the drop frame setting.
        with self.assertRaises(MalformedTimecode):
            Timecode.parse("01:00:00;00", 25)
        with self.assertRaises(MalformedTimecode):
            Timecode.parse("01:00:00:00", 29.97, drop_frame=True)
        with self.assertRaises(MalformedTimecode):
            Timecode.parse(None, 25)

    def test_canonical_strings(self):
        # Only strings displayed back identically are accepted
        for value in [
            "\u0661\u0660:00:00:00",
            "001:00:00:00",
            "01:00:00:005",
            " 01:00:00:00",
            "01:00:00:00 ",
            "01:00:00:00\n",
        ]:
            with self.assertRaises(MalformedTimecode):
                Timecode.parse(value, 25)
        for value, fps in [
            ("00:00:00:00", 25),
            ("103:12:33:07", 24),
            ("01:00:00:105", 120),
            ("01:00:00:99", 100),
        ]:
            self.assertEqual(Timecode.parse(value, fps).to_string(), value)
        with self.assertRaises(MalformedTimecode):
            Timecode.parse("01:00:00:100", 100)

    def test_ordering(self):
        values = [Timecode.from_ticks(ticks, 24) for ticks in (0, 5, 24, 86400, 86401)]
        for left in values:
            for right in values:
                self.assertEqual(left < right, left.to_ticks() < right.to_ticks())
                self.assertEqual(left <= right, left.to_ticks() <= right.to_ticks())
                self.assertEqual(left > right, left.to_ticks() > right.to_ticks())
                self.assertEqual(left >= right, left.to_ticks() >= right.to_ticks())
                self.assertEqual(left == right, left.to_ticks() == right.to_ticks())
        self.assertEqual(sorted(reversed(values)), values)

    def test_arithmetic(self):
        start = Timecode.parse("01:00:00:00", 25)
        end = start + 125
        self.assertEqual(str(end), "01:00:05:00")
        self.assertEqual(str(end - start), "00:00:05:00")
        self.assertEqual(str(125 + start), "01:00:05:00")
        self.assertEqual(end.subtract(125), start)
        self.assertEqual(start.add(Timecode.from_ticks(25, 25)), start + 25)
        self.assertEqual(str(start + (-25)), "00:59:59:00")
        with self.assertRaises(TypeError):
            start + "01:00:00:00"
        with self.assertRaises(TypeError):
            start + 1.5

    def test_rate_mismatch(self):
        tc_24 = Timecode.from_ticks(100, 24)
        tc_30 = Timecode.from_ticks(100, 30)
        with self.assertRaises(RateMismatch):
            tc_24 + tc_30
        with self.assertRaises(RateMismatch):
            tc_24 - tc_30
        with self.assertRaises(RateMismatch):
            tc_24 < tc_30
        with self.assertRaises(RateMismatch):
            tc_24.add(tc_30)
        # Equality never converts either
        self.assertNotEqual(tc_24, tc_30)
        self.assertEqual(len(set([tc_24, tc_30])), 2)
        # 29.97 and 30 share the same nominal rate, but are different rates.
        with self.assertRaises(RateMismatch):
            Timecode.from_ticks(1, 29.97) + Timecode.from_ticks(1, 30)

    def test_underflow(self):
        tc = Timecode.from_ticks(10, 25)
        with self.assertRaises(Underflow):
            tc - 11
        with self.assertRaises(Underflow):
            tc - Timecode.from_ticks(11, 25)
        with self.assertRaises(Underflow):
            tc.add(-11)
        with self.assertRaises(Underflow):
            Timecode(-1, 25)
        self.assertEqual((tc - 10).to_ticks(), 0)

    def test_accessor_overrides(self):
        tc = Timecode.from_ticks(10, 25)
        with self.assertRaises(AttributeError):
            tc.hours = 2
        with self.assertRaises(AttributeError):
            tc._ticks = 2
        with self.assertRaises(AttributeError):
            del tc._ticks
        self.assertEqual(tc.to_ticks(), 10)

    def test_hash_and_pickle(self):
        tc = Timecode.parse("01:00:00;00", 29.97, drop_frame=True)
        same = Timecode.from_ticks(tc.to_ticks(), FrameRate.FPS_29_97, True)
        self.assertEqual(len(set([tc, same])), 1)
        self.assertNotEqual(tc, Timecode.from_ticks(tc.to_ticks(), 29.97, False))
        self.assertEqual(pickle.loads(pickle.dumps(tc)), tc)

    def test_to_seconds(self):
        self.assertEqual(Timecode.from_ticks(50, 25).to_seconds(), decimal.Decimal(2))
        # One frame at 29.97 is 1001 / 30000 seconds
        self.assertEqual(
            Timecode.from_ticks(30, 29.97).to_seconds(), decimal.Decimal("1.001")
        )

    def test_subframes(self):
        with self.assertRaises(NotImplementedError):
            Timecode.from_ticks(1, 25).to_string(subframes=True)

    def test_repr(self):
        tc = Timecode.parse("01:00:00;00", 29.97, drop_frame=True)
        self.assertEqual(repr(tc), "<class Timecode 01:00:00;00 (29.97fps D)>")

    def test_fps_types(self):
        # Testing input of effective int and establishing the fact that these
        # are valid input types
        frame_rates = [24, 24.00, 60, 60.00]
        for fps in frame_rates:
            _int = int(fps)
            _float = float(fps)
            _decimal = decimal.Decimal(fps)
            frame = 2394732
            tc_int = timecode.timecode_from_frame(frame, fps=_int)
            tc_float = timecode.timecode_from_frame(frame, fps=_float)
            tc_decimal = timecode.timecode_from_frame(frame, fps=_decimal)
            self.assertEqual(tc_int, tc_float)
            self.assertEqual(tc_int, tc_decimal)
        # Testing input of non-int
        for fps in [23.976, 59.94]:
            frame = 2394732
            tc_float = timecode.timecode_from_frame(frame, fps=float(fps))
            tc_decimal = timecode.timecode_from_frame(frame, fps=decimal.Decimal(fps))
            tc_string = timecode.timecode_from_frame(frame, fps=str(fps))
            self.assertEqual(tc_float, tc_decimal)
            self.assertEqual(tc_float, tc_string)

    def test_bad_frame_rates(self):
        for fps in [0, 12, 29.5, "foo", None, "nan", float("nan"), "inf", float("-inf")]:
            with self.assertRaises(BadFrameRateError):
                FrameRate.from_fps(fps)
            with self.assertRaises(BadFrameRateError):
                Timecode.from_ticks(1, fps)

    def test_invalid_drop_frame_fps(self):
        """
        Test that we raise BadDropFrameError when trying to use drop frame on unsupported
        frame rates.
        """
        for fps in [23.97, 24, 25, 30, 60]:
            with self.assertRaises(BadDropFrameError):
                Timecode.from_ticks(12345, fps, drop_frame=True)
            with self.assertRaises(BadDropFrameError):
                Timecode.parse("01:23:21;01", fps, drop_frame=True)

    def test_frame_rates(self):
        self.assertEqual(FrameRate.FPS_29_97.nominal, 30)
        self.assertEqual(FrameRate.FPS_29_97.drop_frames_per_minute, 2)
        self.assertEqual(FrameRate.FPS_59_94.drop_frames_per_minute, 4)
        self.assertEqual(FrameRate.FPS_25.drop_frames_per_minute, 0)
        self.assertEqual(str(FrameRate.FPS_23_976), "23.976fps")
        self.assertIs(FrameRate.from_fps(FrameRate.FPS_50), FrameRate.FPS_50)
        self.assertIs(FrameRate.from_fps("23.98"), FrameRate.FPS_23_976)
        self.assertIs(FrameRate.from_fps(119.88), FrameRate.FPS_119_88)

    def test_timecode_formats(self):
        self.assertEqual(parse_timecode_format("25 Frame"), (FrameRate.FPS_25, False))
        self.assertEqual(parse_timecode_format("29.97 Frame"), (FrameRate.FPS_29_97, False))
        self.assertEqual(
            parse_timecode_format("29.97 Drop Frame"), (FrameRate.FPS_29_97, True)
        )
        self.assertEqual(parse_timecode_format("23.976 Frame"), (FrameRate.FPS_23_976, False))
        for value in ["25", "25 Frames", "30 Drop Frame", "Drop Frame", "29.97 Foo Frame"]:
            with self.assertRaises(BadFrameRateError):
                parse_timecode_format(value)
