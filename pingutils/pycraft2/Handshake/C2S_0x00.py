from ...pycraft2.packet import C2SPacket, States, DataTypes


class C2S_0x00(C2SPacket):
    """
    Handshake packet (0x00) sent by the client to the server.

    Data:
        - Protocol Version | VarInt | -1 asks for a status answer regardless of the client version.
        - Server Address | String (255) | Hostname or IP that was used to connect. We send the resolved IP.
        - Server Port | Unsigned Short | Default is 25565.
        - Next State | VarInt Enum | 1 for Status, 2 for Login.
    """

    def _info(self):
        return {
            "name": "Handshake (0x00)",
            "id": 0x00,
            "state": States.HANDSHAKE,
        }

    def _dataTypes(self):
        return {
            "protocol_version": DataTypes.VARINT,
            "server_address": DataTypes.STRING,
            "server_port": DataTypes.USHORT,
            "next_state": DataTypes.VARINT,
        }
