#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""User-defined exceptions and error handling related constant."""

__all__ = [
    "EXIT_USAGE",
    "MKBailOut",
    "MKException",
    "MKFetcherError",
    "MKGeneralException",
    "MKUsageError",
]

# Exit code of a run aborted by a usage error, outside of the 0..3 range of the
# monitoring plug-in API.
EXIT_USAGE = 255


# never used directly in the code. Just some wrapper to make all of our
# exceptions handleable with one call
class MKException(Exception):
    pass


class MKGeneralException(MKException):
    pass


class MKFetcherError(MKException):
    """Raised when the Proxmox VE API answers with an error."""


# This is raised when the command line, the config file or one of the
# expressions and rules given there can not be parsed. The program is stopped
# with EXIT_USAGE and no check result is written.
class MKUsageError(MKException):
    pass


# This is raised to print an error message and then end the program.
# The program should catch this at top level and end exit the program
# with exit code 3, in order to be compatible with monitoring plug-in API.
class MKBailOut(MKException):
    pass
