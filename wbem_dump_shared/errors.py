"""
Errors — The closed set of failure kinds raised while dumping.

Every failure surfaced by the WBEM client or the output manager is a DumpError
tagged with an ErrorKind. Callers branch on the kind instead of inspecting the
exception type:

  NOT_SUPPORTED  The service does not implement the operation here. Silent.
  EMPTY_RESULT   The operation succeeded but returned nothing. Silent.
  OTHER          Any other remote or protocol error. Printed, walk continues.
  TRANSPORT      Connection, TLS or authentication failure. Aborts the run.
  IO             Local directory or file write failure. Aborts the run.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    NOT_SUPPORTED = "not_supported"
    EMPTY_RESULT = "empty_result"
    OTHER = "other"
    TRANSPORT = "transport"
    IO = "io"


IGNORABLE_KINDS = frozenset({ErrorKind.NOT_SUPPORTED, ErrorKind.EMPTY_RESULT})
FATAL_KINDS = frozenset({ErrorKind.TRANSPORT, ErrorKind.IO})


class DumpError(Exception):
    """An error tagged with its ErrorKind.

    Attributes:
        kind: The ErrorKind classification.
        message: Human-readable error text.
        code: CIM status code when the service returned an ERROR element.
        description: The service's DESCRIPTION attribute, if any.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        code: Optional[int] = None,
        description: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.code = code
        self.description = description

    def __str__(self) -> str:
        if self.code is not None:
            return f"{self.message} (CIM error {self.code})"
        return self.message


def is_ignorable(error: Exception) -> bool:
    """True for NOT_SUPPORTED and EMPTY_RESULT errors."""
    return isinstance(error, DumpError) and error.kind in IGNORABLE_KINDS


def is_fatal(error: Exception) -> bool:
    """True for TRANSPORT and IO errors."""
    return isinstance(error, DumpError) and error.kind in FATAL_KINDS


def describe(error: Exception) -> str:
    """Format an error with its classification for console output."""
    if isinstance(error, DumpError):
        return f"[{error.kind.value}] {error}"
    return f"[{type(error).__name__}] {error}"
