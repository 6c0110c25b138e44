"""Tests for the Nexus Mods GraphQL client (HTTP mocked at the session)."""
import pytest
import requests
from unittest.mock import MagicMock

from collection_diff.connectivity import NexusModsClient, get_source
from collection_diff.connectivity.nexus import REVISION_QUERY
from collection_diff.exceptions import (
    AuthenticationError,
    BadResponseError,
    InvalidRequestError,
    RateLimitError,
    RemoteConnectionError,
    RemoteError,
    RevisionNotFoundError,
)
from collection_diff.models import Entity


def _response(status=200, body=None, json_error=None):
    resp = MagicMock()
    resp.status_code = status
    resp.text = str(body)
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = body
    if status >= 400:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status} error", response=resp
        )
    return resp


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(bot_config, session):
    return NexusModsClient(bot_config, session=session)


@pytest.mark.mocked_deps
class TestFetchRevision:
    def test_returns_normalized_snapshot(self, client, session, revision_payload):
        session.post.return_value = _response(body=revision_payload)

        snapshot = client.fetch_revision("rcuccp", 4)

        assert snapshot == (
            Entity(id="10", name="SkyUI", version="5.2"),
            Entity(id="20", name="USSEP", version="4.2.9"),
        )

    def test_request_shape(self, client, session, bot_config, revision_payload):
        session.post.return_value = _response(body=revision_payload)

        client.fetch_revision("rcuccp", 4)

        args, kwargs = session.post.call_args
        assert args[0] == bot_config.api_url
        assert kwargs["json"] == {
            "query": REVISION_QUERY,
            "variables": {"slug": "rcuccp", "revision": 4},
        }
        assert kwargs["headers"]["apikey"] == "test-nexus-key"
        assert kwargs["headers"]["Application-Name"] == "TestBot"
        assert kwargs["headers"]["Application-Version"] == "9.9.9"
        assert kwargs["timeout"] == bot_config.request_timeout
        assert "viewAdultContent: true" in REVISION_QUERY

    def test_graphql_errors_forwarded_verbatim(self, client, session):
        errors = [{"message": "Collection not found", "extensions": {"code": "NOT_FOUND"}}]
        session.post.return_value = _response(body={"errors": errors, "data": None})

        with pytest.raises(RemoteError) as excinfo:
            client.fetch_revision("nope", 1)

        assert excinfo.value.payload == errors

    def test_null_revision(self, client, session):
        session.post.return_value = _response(body={"data": {"collectionRevision": None}})

        with pytest.raises(RevisionNotFoundError):
            client.fetch_revision("rcuccp", 999)

    def test_missing_mod_files(self, client, session):
        session.post.return_value = _response(
            body={"data": {"collectionRevision": {"revisionNumber": 1}}}
        )

        with pytest.raises(BadResponseError):
            client.fetch_revision("rcuccp", 1)

    def test_invalid_json(self, client, session):
        session.post.return_value = _response(json_error=ValueError("Expecting value"))

        with pytest.raises(BadResponseError):
            client.fetch_revision("rcuccp", 1)

    @pytest.mark.parametrize(
        "status,exc",
        [
            (401, AuthenticationError),
            (403, AuthenticationError),
            (429, RateLimitError),
            (400, InvalidRequestError),
            (502, RemoteError),
        ],
    )
    def test_http_errors(self, client, session, status, exc):
        session.post.return_value = _response(status=status, body={"message": "x"})

        with pytest.raises(exc) as excinfo:
            client.fetch_revision("rcuccp", 1)

        assert excinfo.value.payload == {"message": "x"}

    def test_connection_error(self, client, session):
        session.post.side_effect = requests.exceptions.ConnectionError("dns failure")

        with pytest.raises(RemoteConnectionError):
            client.fetch_revision("rcuccp", 1)


def test_context_manager_closes_session(bot_config, session):
    with NexusModsClient(bot_config, session=session) as c:
        assert c.session is session
    session.close.assert_called_once()


def test_get_source_builds_client(bot_config):
    source = get_source(bot_config)
    try:
        assert isinstance(source, NexusModsClient)
        assert source.config is bot_config
    finally:
        source.close()


@pytest.mark.mocked_deps
@pytest.mark.parametrize(
    "body",
    [
        {"data": ["x"]},
        {"data": "oops"},
        {"data": {"collectionRevision": "oops"}},
        {"data": {"collectionRevision": ["x"]}},
        {"data": {"collectionRevision": {"modFiles": {"not": "a list"}}}},
    ],
)
def test_malformed_body_is_bad_response(client, session, body):
    session.post.return_value = _response(body=body)

    with pytest.raises(BadResponseError):
        client.fetch_revision("rcuccp", 1)


@pytest.mark.mocked_deps
@pytest.mark.asyncio
async def test_malformed_body_becomes_failed_result(client, session):
    from collection_diff.command import DiffCommand, handle_command

    session.post.return_value = _response(body={"data": ["x"]})

    result = await handle_command(DiffCommand("rcuccp", 1, 2), client)

    assert not result.ok
    assert isinstance(result.error, BadResponseError)


def test_each_thread_gets_its_own_session(bot_config, mocker):
    import threading

    real_session_cls = requests.Session
    mocker.patch(
        "collection_diff.connectivity.nexus.requests.Session",
        side_effect=lambda: MagicMock(spec=real_session_cls),
    )
    client = NexusModsClient(bot_config)
    seen = []

    worker = threading.Thread(target=lambda: seen.append(client.session))
    worker.start()
    worker.join()
    seen.append(client.session)

    assert seen[0] is not seen[1]
    assert client.session is seen[1]  # stable within a thread

    client.close()
    for s in seen:
        s.close.assert_called_once()
