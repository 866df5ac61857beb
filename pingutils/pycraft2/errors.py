"""Errors raised by the pycraft2 status client.

Every failure of a ping is a ``ProtocolError``; the subclasses say which step
went wrong so callers can tell a bad address from a dead server from a broken
response.
"""


class ProtocolError(Exception):
    """Base class for all status exchange failures"""

    kind = "Protocol error"

    def __str__(self):
        msg = super().__str__()
        return f"{self.kind}: {msg}" if msg else self.kind


class AddressResolutionFailed(ProtocolError):
    kind = "Failed to resolve address"


class ConnectionFailed(ProtocolError, ConnectionError):
    kind = "Connection failed"


class IoError(ProtocolError, OSError):
    kind = "I/O error"


class DecodeError(ProtocolError):
    kind = "Malformed packet"


class VarIntTooLarge(DecodeError, ValueError):
    kind = "VarInt is too big"


class UnexpectedEndOfData(DecodeError, EOFError):
    kind = "Unexpected end of data"


class TruncatedString(DecodeError, EOFError):
    kind = "String length exceeds data size"


class InvalidPacketLength(DecodeError, ValueError):
    kind = "Invalid packet length"


class MalformedStatusPayload(ProtocolError, ValueError):
    kind = "Failed to parse server response"
