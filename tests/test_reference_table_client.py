"""
Tests for ReferenceTableClient: HTTP mocking, error mapping.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from conftest import SAMPLE_ATTRIBUTES, table_payload
from reftable.config import Settings
from reftable.core.errors import ApiError, TransportError
from reftable.services.reference_table_client import TABLES_PATH, ReferenceTableClient


@pytest.fixture
def client():
    return ReferenceTableClient(
        base_url="https://api.test.example/",
        api_key="k",
        app_key="a",
        timeout=2.0,
    )


def _response(status_code, body=None, content=b"{}"):
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = content
    resp.text = str(body)
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    return resp


def _patched(resp=None, side_effect=None):
    mock_instance = AsyncMock()
    mock_instance.request = AsyncMock(return_value=resp, side_effect=side_effect)
    mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
    mock_instance.__aexit__ = AsyncMock(return_value=False)
    return mock_instance


class TestGetTable:
    @pytest.mark.asyncio
    async def test_get_success(self, client):
        mock_instance = _patched(_response(200, table_payload("tbl-1", **SAMPLE_ATTRIBUTES)))
        with patch("httpx.AsyncClient", return_value=mock_instance):
            response, status_code = await client.get_table("tbl-1")

        assert status_code == 200
        assert response.data.id == "tbl-1"
        assert response.data.attributes.table_name == "t1"

        method, url = mock_instance.request.call_args.args
        assert method == "GET"
        assert url == f"https://api.test.example{TABLES_PATH}/tbl-1"
        headers = mock_instance.request.call_args.kwargs["headers"]
        assert headers["DD-API-KEY"] == "k"
        assert headers["DD-APPLICATION-KEY"] == "a"

    @pytest.mark.asyncio
    async def test_get_404_raises_api_error(self, client):
        mock_instance = _patched(_response(404, {"errors": ["Not found"]}))
        with patch("httpx.AsyncClient", return_value=mock_instance):
            with pytest.raises(ApiError) as exc:
                await client.get_table("missing")

        assert exc.value.status_code == 404
        assert exc.value.operation == "retrieving reference table"

    @pytest.mark.asyncio
    async def test_network_error_is_transport_error(self, client):
        """No retries: one attempt, then TransportError."""
        mock_instance = _patched(side_effect=httpx.ConnectError("refused"))
        with patch("httpx.AsyncClient", return_value=mock_instance):
            with pytest.raises(TransportError) as exc:
                await client.get_table("tbl-1")

        assert mock_instance.request.call_count == 1
        assert exc.value.operation == "retrieving reference table"
        assert isinstance(exc.value.cause, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_undecodable_body_is_transport_error(self, client):
        mock_instance = _patched(_response(200, ValueError("not json")))
        with patch("httpx.AsyncClient", return_value=mock_instance):
            with pytest.raises(TransportError):
                await client.get_table("tbl-1")

    @pytest.mark.asyncio
    async def test_malformed_envelope_is_transport_error(self, client):
        mock_instance = _patched(_response(200, {"data": {"type": "reference_table"}}))
        with patch("httpx.AsyncClient", return_value=mock_instance):
            with pytest.raises(TransportError):
                await client.get_table("tbl-1")


class TestWrites:
    @pytest.mark.asyncio
    async def test_create_posts_payload(self, client):
        payload = {"data": {"type": "reference_table", "attributes": {"table_name": "t1"}}}
        mock_instance = _patched(_response(200, table_payload("tbl-9", table_name="t1")))
        with patch("httpx.AsyncClient", return_value=mock_instance):
            response, status_code = await client.create_reference_table(payload)

        assert status_code == 200
        assert response.data.id == "tbl-9"
        assert mock_instance.request.call_args.args[0] == "POST"
        assert mock_instance.request.call_args.kwargs["json"] == payload

    @pytest.mark.asyncio
    async def test_update_with_empty_body(self, client):
        mock_instance = _patched(_response(200, None, content=b""))
        with patch("httpx.AsyncClient", return_value=mock_instance):
            status_code = await client.update_reference_table("tbl-1", {"data": {}})

        assert status_code == 200
        assert mock_instance.request.call_args.args[0] == "PATCH"

    @pytest.mark.asyncio
    async def test_delete_204(self, client):
        mock_instance = _patched(_response(204, None, content=b""))
        with patch("httpx.AsyncClient", return_value=mock_instance):
            status_code = await client.delete_table("tbl-1")

        assert status_code == 204
        assert mock_instance.request.call_args.args[0] == "DELETE"

    @pytest.mark.asyncio
    async def test_server_error_on_create(self, client):
        mock_instance = _patched(_response(500, {"errors": ["boom"]}))
        with patch("httpx.AsyncClient", return_value=mock_instance):
            with pytest.raises(ApiError) as exc:
                await client.create_reference_table({"data": {}})

        assert exc.value.status_code == 500
        assert exc.value.code == "RT-API-002"


class TestListTables:
    @pytest.mark.asyncio
    async def test_list(self, client):
        body = {"data": [
            {"id": "1", "type": "reference_table", "attributes": {"table_name": "a"}},
            {"id": "2", "type": "reference_table", "attributes": {"table_name": "b"}},
        ]}
        mock_instance = _patched(_response(200, body))
        with patch("httpx.AsyncClient", return_value=mock_instance):
            listing = await client.list_tables()

        assert [t.id for t in listing.data] == ["1", "2"]


class TestConfiguration:
    def test_headers_from_settings(self):
        cfg = Settings(api_url="https://x.example", api_key="env-key", app_key="env-app")
        c = ReferenceTableClient(settings=cfg)
        assert c._base_url == "https://x.example"
        assert c._headers["DD-API-KEY"] == "env-key"
        assert c._timeout == cfg.request_timeout

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("REFTABLE_REQUEST_TIMEOUT", "5")
        assert Settings().request_timeout == 5.0
