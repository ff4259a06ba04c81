"""
Error types shared by the library, the CLI and the HTTP API
"""


class XPathMapperError(Exception):
    """Base class for all fatal mapper errors"""

    exit_code = 1


class ConfigurationError(XPathMapperError):
    """Defaults file missing, unreadable or invalid"""

    exit_code = 1


class InputReadError(XPathMapperError):
    """Input path missing or unreadable"""

    exit_code = 2


class InputParseError(XPathMapperError):
    """Malformed XML; the message carries the parser diagnostic"""

    exit_code = 2


class OutputWriteError(XPathMapperError):
    """Output path unwritable"""

    exit_code = 3
