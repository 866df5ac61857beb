import pytest

from pingutils.pycraft2.errors import MalformedStatusPayload
from pingutils.pycraft2.status import Description, ServerStatus


def status_doc(**overrides):
    doc = {
        "version": {"name": "1.20", "protocol": 763},
        "players": {"max": 20, "online": 3, "sample": []},
        "description": "A Server",
    }
    doc.update(overrides)
    return doc


def test_string_description():
    status = ServerStatus.from_dict(status_doc())

    assert status.description == Description.PlainText("A Server")
    assert status.description.text() == "A Server"


def test_object_description():
    status = ServerStatus.from_dict(status_doc(description={"text": "Another Server"}))

    assert isinstance(status.description, Description.Wrapped)
    assert status.description.text() == "Another Server"


def test_object_description_keeps_extra():
    status = ServerStatus.from_dict(
        status_doc(description={"text": "", "extra": [{"text": "Hi", "color": "red"}]})
    )

    assert status.description.text() == ""
    assert status.description.extra == [{"text": "Hi", "color": "red"}]


def test_sample_absent_is_empty():
    status = ServerStatus.from_dict(status_doc(players={"max": 10, "online": 0}))

    assert status.players.sample == []


def test_sample_players():
    status = ServerStatus.from_dict(
        status_doc(
            players={
                "max": 10,
                "online": 1,
                "sample": [{"name": "Steve", "id": "00000000-0000-0000-0000-000000000000"}],
            }
        )
    )

    assert [p.name for p in status.players.sample] == ["Steve"]
    assert status.players.sample[0].id == "00000000-0000-0000-0000-000000000000"


def test_extra_fields_ignored():
    status = ServerStatus.from_dict(
        status_doc(favicon="data:image/png;base64,", enforcesSecureChat=True)
    )

    assert status.version.protocol == 763


@pytest.mark.parametrize(
    "doc",
    [
        [],
        "A Server",
        status_doc(version={"name": "1.20"}),
        status_doc(version={"name": 1.2, "protocol": 763}),
        status_doc(players={"max": "20", "online": 3}),
        status_doc(players={"max": True, "online": 3}),
        status_doc(players={"max": 20, "online": 3, "sample": {}}),
        status_doc(players={"max": 20, "online": 3, "sample": [{"name": "Steve"}]}),
        status_doc(description=42),
        status_doc(description={"translate": "multiplayer.status"}),
    ],
)
def test_malformed(doc):
    with pytest.raises(MalformedStatusPayload):
        ServerStatus.from_dict(doc)


def test_missing_description():
    doc = status_doc()
    del doc["description"]

    with pytest.raises(MalformedStatusPayload, match="description"):
        ServerStatus.from_dict(doc)
