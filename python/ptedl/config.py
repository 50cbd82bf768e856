# Copyright 2016 Autodesk, Inc. All rights reserved.
#
# Use of this software is subject to the terms of the Autodesk license agreement
# provided at the time of installation or download, or which otherwise accompanies
# this software in either electronic or hard copy form.
#
"""Configuration for the session export parser."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

IGNORE = "ignore"
WARN = "warn"
ERROR = "error"

ABORT_SESSION = "abort_session"
SKIP_SECTION = "skip_section"


class ParserConfig(BaseModel):
    """How the parser reacts to unexpected content."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Content found under an unknown section marker: ignore | warn | error
    on_unknown_section: Literal["ignore", "warn", "error"] = IGNORE
    # A section which can't be parsed: abort_session | skip_section
    on_section_parse_error: Literal["abort_session", "skip_section"] = ABORT_SESSION
