import struct
from ctypes import c_int32 as signed_int32
from ctypes import c_uint32 as unsigned_int32

from .errors import (
    InvalidPacketLength,
    TruncatedString,
    UnexpectedEndOfData,
    VarIntTooLarge,
)

# largest length a 3 byte VarInt frame prefix can carry
MAX_PACKET_LENGTH = 2**21 - 1


class States:
    HANDSHAKE = 0
    STATUS = 1
    LOGIN = 2


class DataTypes:
    VARINT = "VarInt"
    STRING = "String"
    USHORT = "Unsigned Short"


def encode_varint(value: int) -> bytes:
    """Encode ``value`` as a VarInt.

    :param value: The Maximum is ``2 ** 31-1`` the minimum is ``-(2 ** 31)``.
        Negative values are sent as their unsigned 32-bit pattern.
    :raises ValueError: If value is out of range.
    """
    if value > 2**31 - 1 or value < -(2**31):
        raise ValueError(f'The value "{value}" is too big to send in a varint')

    remaining = unsigned_int32(value).value
    out = b""
    while remaining & ~0x7F:
        out += struct.pack("!B", remaining & 0x7F | 0x80)
        remaining >>= 7
    return out + struct.pack("!B", remaining)


def process_varint_byte(byte: int, result: int, shift: int) -> tuple[int, int, bool]:
    """Fold one VarInt byte into ``result``.

    Returns the new result, the shift for the next byte and whether another
    byte follows.

    :raises VarIntTooLarge: If a fifth byte still has its continuation bit set.
    """
    result |= (byte & 0x7F) << shift
    if not byte & 0x80:
        return result, shift, False

    shift += 7
    if shift >= 35:
        raise VarIntTooLarge(f"continuation bit set after {shift // 7} bytes")
    return result, shift, True


def decode_varint(source) -> tuple[int, int]:
    """Read a VarInt from ``source``, one byte at a time.

    ``source`` is anything with ``read_exact(n)``: a ``Buffer`` or a live
    ``MCSocket``.

    :return: The decoded value and the number of bytes consumed.
    """
    result, shift, consumed = 0, 0, 0
    more = True
    while more:
        byte = source.read_exact(1)[0]
        consumed += 1
        result, shift, more = process_varint_byte(byte, result, shift)
    return signed_int32(result).value, consumed


def encode_string(string: str) -> bytes:
    """Encode ``string`` as a VarInt byte length followed by its UTF-8 bytes."""
    data = string.encode("utf-8")
    return encode_varint(len(data)) + data


def decode_string(source) -> str:
    """Read a length prefixed UTF-8 string, replacing invalid sequences.

    :raises TruncatedString: If fewer bytes remain than the prefix declares.
    """
    length, _ = decode_varint(source)
    if length < 0:
        raise TruncatedString(f"negative string length {length}")

    try:
        data = source.read_exact(length)
    except UnexpectedEndOfData as err:
        raise TruncatedString(f"declared {length} bytes: {err}") from err
    return data.decode("utf-8", errors="replace")


def encode_ushort(value: int) -> bytes:
    """Encode an unsigned short, big-endian.

    :raises ValueError: If value is out of range.
    """
    if value < 0 or value > 2**16 - 1:
        raise ValueError(f"The value {value} is out of range for an unsigned short")
    return struct.pack("!H", value)


def send_packet(connection, payload: bytes) -> None:
    """Frame ``payload`` with its length and write it in one call."""
    connection.write_all(encode_varint(len(payload)) + payload)


def read_packet(connection) -> bytes:
    """Read one framed packet and return its payload.

    The payload is read exactly; a short read is an error, never a partial
    result.
    """
    length, _ = decode_varint(connection)
    if length < 0 or length > MAX_PACKET_LENGTH:
        raise InvalidPacketLength(f"{length} bytes")
    return connection.read_exact(length)


class Buffer:
    """In-memory byte source with bounds-checked reads"""

    def __init__(self, data: bytes = b""):
        self.__data = bytes(data)
        self.__offset = 0

    def __len__(self):
        return len(self.__data) - self.__offset

    def __repr__(self):
        return f"Buffer({self.__data[self.__offset:]!r})"

    def write(self, data: bytes):
        self.__data += data

    def read_exact(self, length: int) -> bytes:
        if length > len(self):
            raise UnexpectedEndOfData(
                f"wanted {length} bytes, {len(self)} remaining"
            )
        result = self.__data[self.__offset : self.__offset + length]
        self.__offset += length
        return result

    def read_varint(self) -> int:
        return decode_varint(self)[0]

    def read_string(self) -> str:
        return decode_string(self)


# https://wiki.vg/Protocol#Packet_format
class C2SPacket:
    """Base for packets sent to the server.

    Subclasses describe themselves with ``_info`` (name, id, state) and
    ``_dataTypes`` (field name -> ``DataTypes`` value, in wire order).
    """

    def __init__(self, **kwargs):
        self.__data = kwargs
        self.name = self._info()["name"]
        self.id = self._info()["id"]
        self.state = self._info()["state"]

    def _info(self):
        raise NotImplementedError

    def _dataTypes(self):
        return {}

    def __str__(self):
        return f"{self.name}({', '.join([f'{k}={v}' for k, v in self.__data.items()]) if self.__data else ''})"

    def toDict(self):
        return {
            "id": self.id,
            "name": self.name,
            "data": self.__data,
        }

    def toBytes(self) -> bytes:
        """The unframed payload: packet id followed by each field"""
        b = encode_varint(self.id)

        for k, v in self._dataTypes().items():
            match v:
                case DataTypes.VARINT:
                    b += encode_varint(self.__data[k])
                case DataTypes.STRING:
                    b += encode_string(self.__data[k])
                case DataTypes.USHORT:
                    b += encode_ushort(self.__data[k])
                case _:
                    raise ValueError(f"Unknown data type: {v}")

        return b

    def send(self, connection):
        send_packet(connection, self.toBytes())


class S2CPacket(Buffer):
    """Base for packets received from the server.

    The first payload byte is the packet id; the rest stays in the buffer for
    the subclass to decode.
    """

    def __init__(self):
        super().__init__(b"")
        self.name = self._info()["name"]
        self.state = self._info()["state"]
        self.packet_id = None

    def _info(self):
        raise NotImplementedError

    def _dataTypes(self):
        return {}

    def read_response(self, connection):
        self.write(read_packet(connection))
        self.packet_id = self.read_exact(1)[0]
        return self
