from . import Handshake, Status, packet
from .connector import MCSocket, parse_address, ping, resolve
from .errors import (
    AddressResolutionFailed,
    ConnectionFailed,
    DecodeError,
    InvalidPacketLength,
    IoError,
    MalformedStatusPayload,
    ProtocolError,
    TruncatedString,
    UnexpectedEndOfData,
    VarIntTooLarge,
)
from .status import Description, Players, PlayerSample, ServerStatus, Version
