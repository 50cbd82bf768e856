# Copyright (c) 2014 Shotgun Software Inc.
#
# CONFIDENTIAL AND PROPRIETARY
#
# This work is provided "AS IS" and subject to the Shotgun Pipeline Toolkit
# Source Code License included in this distribution package. See LICENSE.
# By accessing, using, copying or modifying this work you indicate your
# agreement to the Shotgun Pipeline Toolkit Source Code License. All rights
# not expressly granted therein are reserved by Shotgun Software Inc.
import collections
import re

# Any line ending: Windows, old Mac or Unix.
_LINE_BREAK_REGEXP = re.compile(r"\r\n|\r|\n")


class LogicalLine(collections.namedtuple("LogicalLine", ["number", "raw", "text"])):
    """
    A line from a session export.

    :ivar number: The 1-based line number.
    :ivar raw: The line content, without its line ending. Section parsers
               split this value on tabs, so empty trailing columns are kept.
    :ivar text: The line content with leading and trailing whitespace removed.
    """
    __slots__ = ()

    @property
    def is_blank(self):
        """
        Return True if this line has no content.
        """
        return not self.text


class LineReader(object):
    """
    Split some raw text into :class:`LogicalLine` instances.

    Lines are produced lazily, and the reader can be iterated over as many
    times as needed, each iteration starting from the first line.
    """
    def __init__(self, text):
        """
        :param text: A string, the full content of a session export.
        """
        # Some exports start with a byte order mark.
        if text.startswith("\ufeff"):
            text = text[1:]
        self._text = text

    def __iter__(self):
        position = 0
        number = 0
        text = self._text
        while position < len(text):
            number += 1
            match = _LINE_BREAK_REGEXP.search(text, position)
            if match:
                raw = text[position:match.start()]
                position = match.end()
            else:
                raw = text[position:]
                position = len(text)
            # Not sure why we have to do that ...
            # Some crappy Windows thing ?
            raw = raw.replace("\x1a", "")
            yield LogicalLine(number, raw, raw.strip())
