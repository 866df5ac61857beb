import os.path
import traceback

import pytest

from pingutils.pycraft2 import Handshake, Status
from pingutils.pycraft2.errors import (
    InvalidPacketLength,
    TruncatedString,
    UnexpectedEndOfData,
    VarIntTooLarge,
)
from pingutils.pycraft2.packet import (
    Buffer,
    decode_string,
    decode_varint,
    encode_string,
    encode_ushort,
    encode_varint,
    read_packet,
    send_packet,
)

packetDir = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "pingutils", "pycraft2"
)


class FakeConnection(Buffer):
    """Buffer that also records what is written to it"""

    def __init__(self, data: bytes = b""):
        super().__init__(data)
        self.sent = []

    def write_all(self, data: bytes):
        self.sent.append(data)


def check_foo_packets(name: str):
    directory = os.path.join(packetDir, name)

    for file in os.listdir(directory):
        file = os.path.join(directory, file)

        if not file.endswith(".py") or file.endswith("__init__.py"):
            continue

        with open(file, "r") as f:
            content = f.read()
            expected_name = os.path.splitext(os.path.basename(file))[0]
            expected_id = expected_name[-4:]

            assert (
                f"class {expected_name}(" in content
            ), f"Expected class {expected_name} to be in {file}"

            assert (
                f'"id": {expected_id},' in content
            ), f"Expected id to be {expected_id} in {file}"

            assert (
                "def _info(self):" in content
            ), f"Expected _info method to be in {file}"

            assert (
                "def _dataTypes(self):" in content
            ), f"Expected _dataTypes method to be in {file}"

    return 1


def test_Status_packets():
    try:
        assert check_foo_packets("Status")
    except AssertionError as err:
        print("Status packets failed:", traceback.format_exc())
        raise err


def test_Handshake_packets():
    try:
        assert check_foo_packets("Handshake")
    except AssertionError as err:
        print("Handshake packets failed:", traceback.format_exc())
        raise err


# VarInt


def test_varint_vectors():
    assert encode_varint(0) == b"\x00"
    assert encode_varint(127) == b"\x7f"
    assert encode_varint(128) == b"\x80\x01"
    assert encode_varint(300) == b"\xac\x02"
    assert encode_varint(-1) == b"\xff\xff\xff\xff\x0f"


@pytest.mark.parametrize(
    "value", [0, 1, 127, 128, 255, 300, 2147483647, -1, -2147483648]
)
def test_varint_round_trip(value):
    encoded = encode_varint(value)

    assert 1 <= len(encoded) <= 5
    assert decode_varint(Buffer(encoded)) == (value, len(encoded))


def test_varint_out_of_range():
    with pytest.raises(ValueError):
        encode_varint(2**31)
    with pytest.raises(ValueError):
        encode_varint(-(2**31) - 1)


def test_varint_too_large():
    buf = Buffer(b"\x80\x80\x80\x80\x80\x01")

    with pytest.raises(VarIntTooLarge):
        decode_varint(buf)
    # stops after the fifth byte
    assert len(buf) == 1


def test_varint_end_of_data():
    with pytest.raises(UnexpectedEndOfData):
        decode_varint(Buffer(b"\x80\x80"))
    with pytest.raises(UnexpectedEndOfData):
        decode_varint(Buffer(b""))


# Strings


def test_string_vector():
    assert encode_string("test") == b"\x04test"


@pytest.mark.parametrize("value", ["", "test", "Grüße §a MOTD", "日本語 🎮"])
def test_string_round_trip(value):
    assert decode_string(Buffer(encode_string(value))) == value


def test_string_length_counts_bytes():
    assert encode_string("é")[0] == 2


def test_string_truncated():
    buf = Buffer(b"\x0atest")

    with pytest.raises(TruncatedString):
        decode_string(buf)
    # nothing was read past the prefix
    assert len(buf) == 4


def test_string_invalid_utf8_is_replaced():
    assert decode_string(Buffer(b"\x03a\xffb")) == "a�b"


def test_ushort():
    assert encode_ushort(25565) == b"\x63\xdd"
    with pytest.raises(ValueError):
        encode_ushort(2**16)


# Framing


def test_send_packet_is_one_write():
    conn = FakeConnection()
    send_packet(conn, b"\x00")

    assert conn.sent == [b"\x01\x00"]


def test_read_packet():
    conn = FakeConnection(b"\x03abcrest")

    assert read_packet(conn) == b"abc"
    assert len(conn) == 4


def test_read_packet_short():
    with pytest.raises(UnexpectedEndOfData):
        read_packet(FakeConnection(b"\x05abc"))


def test_read_packet_negative_length():
    with pytest.raises(InvalidPacketLength):
        read_packet(FakeConnection(encode_varint(-1)))


# Packet classes


def test_handshake_bytes():
    p = Handshake.C2S_0x00(
        protocol_version=-1,
        server_address="127.0.0.1",
        server_port=25565,
        next_state=1,
    )

    assert p.toBytes() == (
        b"\x00" + b"\xff\xff\xff\xff\x0f" + b"\x09127.0.0.1" + b"\x63\xdd" + b"\x01"
    )
    assert p.toDict()["name"] == "Handshake (0x00)"


def test_status_request_bytes():
    conn = FakeConnection()
    Status.C2S_0x00().send(conn)

    assert conn.sent == [b"\x01\x00"]


def test_status_response_packet_id_unchecked():
    body = encode_string('{"a": 1}')
    payload = b"\x07" + body
    conn = FakeConnection(encode_varint(len(payload)) + payload)

    response = Status.S2C_0x00().read_response(conn)

    assert response.packet_id == 0x07
    assert response.read_json() == {"a": 1}


def test_status_response_empty_payload():
    with pytest.raises(UnexpectedEndOfData):
        Status.S2C_0x00().read_response(FakeConnection(b"\x00"))
