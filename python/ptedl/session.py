# Copyright (c) 2014 Shotgun Software Inc.
#
# CONFIDENTIAL AND PROPRIETARY
#
# This work is provided "AS IS" and subject to the Shotgun Pipeline Toolkit
# Source Code License included in this distribution package. See LICENSE.
# By accessing, using, copying or modifying this work you indicate your
# agreement to the Shotgun Pipeline Toolkit Source Code License. All rights
# not expressly granted therein are reserved by Shotgun Software Inc.
from .records import SessionHeader


class EDLSession(object):
    """
    A session, as read from a session export.

    Typical use of EDLSession could look like that::

        session = EDLParser().parse(text)
        print(session.header.session_name)
        for track in session.tracks:
            for event in track.events:
                print(track.name, event.clip_name, event.start, event.end)

    EDLSession instances are built by :class:`EDLParser` and are read only:
    all record lists are returned as tuples, in file order.
    """
    __mine = [
        "_header",
        "_online_files",
        "_offline_files",
        "_plugins",
        "_online_clips",
        "_tracks",
        "_markers",
        "_sections",
        "_warnings",
    ]

    def __init__(
        self,
        header=None,
        online_files=(),
        offline_files=(),
        plugins=(),
        online_clips=(),
        tracks=(),
        markers=(),
        sections=(),
        warnings=(),
    ):
        """
        Instantiate a new EDLSession

        :param header: A :class:`SessionHeader`.
        :param online_files: A list of :class:`MediaFile`.
        :param offline_files: A list of :class:`MediaFile`.
        :param plugins: A list of :class:`PluginRecord`.
        :param online_clips: A list of :class:`ClipRecord`.
        :param tracks: A list of :class:`TrackRecord`.
        :param markers: A list of :class:`MarkerRecord`.
        :param sections: The list of :class:`SectionKind` found in the export,
                         in file order.
        :param warnings: A list of :class:`ParseWarning`.
        """
        set_attr = super(EDLSession, self).__setattr__
        set_attr("_header", header or SessionHeader())
        set_attr("_online_files", tuple(online_files))
        set_attr("_offline_files", tuple(offline_files))
        set_attr("_plugins", tuple(plugins))
        set_attr("_online_clips", tuple(online_clips))
        set_attr("_tracks", tuple(tracks))
        set_attr("_markers", tuple(markers))
        set_attr("_sections", tuple(sections))
        set_attr("_warnings", tuple(warnings))

    @property
    def header(self):
        """
        Return the :class:`SessionHeader` for this session.
        """
        return self._header

    @property
    def online_files(self):
        return self._online_files

    @property
    def offline_files(self):
        return self._offline_files

    @property
    def plugins(self):
        return self._plugins

    @property
    def online_clips(self):
        return self._online_clips

    @property
    def tracks(self):
        return self._tracks

    @property
    def markers(self):
        return self._markers

    @property
    def sections(self):
        """
        Return the kinds of the sections found in the export, in file order.

        Sections which were skipped because of errors are listed as well.
        """
        return self._sections

    @property
    def warnings(self):
        """
        Return the :class:`ParseWarning` list collected while parsing.
        """
        return self._warnings

    @property
    def frame_rate(self):
        """
        Return the :class:`FrameRate` used by this session timecodes.
        """
        return self._header.frame_rate

    def track(self, name):
        """
        Return the first track with the given name.

        :param name: A track name.
        :returns: A :class:`TrackRecord` or None.
        """
        for track in self._tracks:
            if track.name == name:
                return track
        return None

    def clip(self, name):
        """
        Return the first online clip with the given name.

        :param name: A clip name.
        :returns: A :class:`ClipRecord` or None.
        """
        for clip in self._online_clips:
            if clip.clip_name == name:
                return clip
        return None

    def source_file_for(self, clip_name):
        """
        Return the online or offline file a clip was built from.

        Clips only reference files by name, this is a simple look up in
        the file lists.

        :param clip_name: A clip name.
        :returns: A :class:`MediaFile` or None.
        """
        clip = self.clip(clip_name)
        if clip is None:
            return None
        for media_file in self._online_files + self._offline_files:
            if media_file.file_name == clip.source_file:
                return media_file
        return None

    def __eq__(self, other):
        if not isinstance(other, EDLSession):
            return NotImplemented
        return all(
            getattr(self, attr_name) == getattr(other, attr_name)
            for attr_name in self.__mine
        )

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __setattr__(self, attr_name, value):
        raise AttributeError("EDLSession %s attribute can't be redefined" % attr_name)

    def __repr__(self):
        return "<class %s %s (%d tracks, %d markers)>" % (
            self.__class__.__name__,
            self._header.session_name,
            len(self._tracks),
            len(self._markers),
        )
