import json

from ...pycraft2.errors import MalformedStatusPayload
from ...pycraft2.packet import S2CPacket, States, DataTypes


class S2C_0x00(S2CPacket):
    """
    Status Response Packet (0x00)

    The packet id byte is kept in ``packet_id`` but not checked, servers only send
    this packet at this point of the exchange.

    Data:
        - JSON Response | String (32767) | See (Server List Ping#Status Response)[https://wiki.vg/Server_List_Ping#Status_Response]; as with all strings, this is prefixed by its length as a VarInt.
    """

    def _info(self):
        return {
            "name": "Status Response",
            "id": 0x00,
            "state": States.STATUS,
        }

    def _dataTypes(self):
        return {
            "json_response": DataTypes.STRING,
        }

    def read_json(self) -> dict:
        dict_str = self.read_string()

        try:
            return json.loads(dict_str)
        except json.JSONDecodeError as err:
            raise MalformedStatusPayload(str(err)) from err
