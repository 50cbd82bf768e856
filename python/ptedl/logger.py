# Copyright 2016 Autodesk, Inc. All rights reserved.
#
# Use of this software is subject to the terms of the Autodesk license agreement
# provided at the time of installation or download, or which otherwise accompanies
# this software in either electronic or hard copy form.
#
import logging

_ROOT_LOGGER_NAME = "ptedl"

# Applications are responsible for configuring handlers.
logging.getLogger(_ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name=None):
    """
    Return a logger for this package.

    :param name: An optional child name, e.g. "parser".
    :returns: A standard :class:`logging.Logger`.
    """
    if name:
        return logging.getLogger("%s.%s" % (_ROOT_LOGGER_NAME, name))
    return logging.getLogger(_ROOT_LOGGER_NAME)
