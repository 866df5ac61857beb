"""Typed view of the status response JSON.

https://wiki.vg/Server_List_Ping#Status_Response
"""
from typing import Any

from .errors import MalformedStatusPayload


def _field(doc: dict, key: str, kind: type, where: str) -> Any:
    if not isinstance(doc, dict):
        raise MalformedStatusPayload(f"{where} is not an object")
    if key not in doc:
        raise MalformedStatusPayload(f"missing field `{where}.{key}`")

    value = doc[key]
    # bool is an int subclass, but never a valid count
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise MalformedStatusPayload(
            f"`{where}.{key}` should be {kind.__name__}, got {type(value).__name__}"
        )
    return value


class Description:
    """Server MOTD, sent either as a bare string or as a chat component"""

    class PlainText:
        def __init__(self, text: str):
            self._text = text

        def __repr__(self):
            return f"Description.PlainText({self._text!r})"

        def __eq__(self, other):
            return isinstance(other, Description.PlainText) and other._text == self._text

        def text(self) -> str:
            return self._text

    class Wrapped:
        def __init__(self, text: str, extra: list = None):
            self._text = text
            self.extra = extra or []

        def __repr__(self):
            return f"Description.Wrapped({self._text!r})"

        def __eq__(self, other):
            return isinstance(other, Description.Wrapped) and other._text == self._text

        def text(self) -> str:
            return self._text

    @staticmethod
    def from_json(value) -> "Description.PlainText | Description.Wrapped":
        if isinstance(value, str):
            return Description.PlainText(value)
        if isinstance(value, dict):
            text = _field(value, "text", str, "description")
            extra = value.get("extra", [])
            return Description.Wrapped(text, extra if isinstance(extra, list) else [])
        raise MalformedStatusPayload(
            f"`description` should be a string or an object, got {type(value).__name__}"
        )


class Version:
    def __init__(self, name: str, protocol: int):
        self.name = name
        self.protocol = protocol

    def __repr__(self):
        return f"Version(name={self.name!r}, protocol={self.protocol})"


class PlayerSample:
    def __init__(self, name: str, id: str):
        self.name = name
        self.id = id

    def __repr__(self):
        return f"PlayerSample(name={self.name!r}, id={self.id!r})"


class Players:
    def __init__(self, max: int, online: int, sample: list[PlayerSample] = None):
        self.max = max
        self.online = online
        self.sample = sample or []

    def __repr__(self):
        return f"Players(online={self.online}, max={self.max}, sample={self.sample})"


class ServerStatus:
    """The decoded status response of one ping"""

    def __init__(self, version: Version, players: Players, description):
        self.version = version
        self.players = players
        self.description = description

    def __repr__(self):
        return (
            f"ServerStatus(version={self.version}, players={self.players}, "
            f"description={self.description})"
        )

    @classmethod
    def from_dict(cls, doc: dict) -> "ServerStatus":
        """Build a status from the parsed JSON document

        Raises:
            MalformedStatusPayload: If a required field is missing or has the wrong type
        """
        if not isinstance(doc, dict):
            raise MalformedStatusPayload(
                f"expected a JSON object, got {type(doc).__name__}"
            )

        version = _field(doc, "version", dict, "status")
        players = _field(doc, "players", dict, "status")
        if "description" not in doc:
            raise MalformedStatusPayload("missing field `status.description`")

        sample = players.get("sample")
        if sample is None:
            sample = []
        elif not isinstance(sample, list):
            raise MalformedStatusPayload("`players.sample` should be a list")

        return cls(
            version=Version(
                name=_field(version, "name", str, "version"),
                protocol=_field(version, "protocol", int, "version"),
            ),
            players=Players(
                max=_field(players, "max", int, "players"),
                online=_field(players, "online", int, "players"),
                sample=[
                    PlayerSample(
                        name=_field(player, "name", str, "players.sample"),
                        id=_field(player, "id", str, "players.sample"),
                    )
                    for player in sample
                ],
            ),
            description=Description.from_json(doc["description"]),
        )
