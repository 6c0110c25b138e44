import pytest

from collection_diff.config import BotConfig
from collection_diff.models import Entity


@pytest.fixture
def bot_config() -> BotConfig:
    return BotConfig(
        nexus_api_key="test-nexus-key",
        app_name="TestBot",
        app_version="9.9.9",
        discord_bot_token="test-discord-token",
        telegram_bot_token="123:ABC",
        telegram_chat_id="-1001",
    )


@pytest.fixture
def old_snapshot():
    return (
        Entity(id="1", name="A", version="1.0"),
        Entity(id="2", name="B", version="2.0"),
    )


@pytest.fixture
def new_snapshot():
    return (
        Entity(id="2", name="B", version="2.1"),
        Entity(id="3", name="C", version="1.0"),
    )


def mod_file(mod_id, name, version, file_id=None):
    """Raw modFiles record as returned by collectionRevision."""
    file_id = file_id if file_id is not None else mod_id * 100
    return {
        "fileId": file_id,
        "optional": False,
        "file": {
            "fileId": file_id,
            "name": f"{name}-file",
            "version": version,
            "mod": {"modId": mod_id, "name": name},
        },
    }


@pytest.fixture
def revision_payload():
    """Successful GraphQL body for one revision."""
    return {
        "data": {
            "collectionRevision": {
                "revisionNumber": 4,
                "modFiles": [
                    mod_file(10, "SkyUI", "5.2"),
                    mod_file(20, "USSEP", "4.2.9"),
                ],
            }
        }
    }


class RecordingChannel:
    """Reply channel that remembers what it was sent; can fail on the Nth send."""

    def __init__(self, fail_on=None, exc=None):
        self.sent = []
        self.fail_on = fail_on
        self.exc = exc or RuntimeError("transport closed")

    async def send(self, text):
        if self.fail_on is not None and len(self.sent) == self.fail_on:
            raise self.exc
        self.sent.append(text)


@pytest.fixture
def recording_channel():
    return RecordingChannel()


@pytest.fixture
def make_mod_file():
    return mod_file


@pytest.fixture
def channel_factory():
    return RecordingChannel
