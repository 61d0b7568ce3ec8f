"""Unit tests for HTTP utilities module."""

import asyncio

import aiohttp
import pytest
from aioresponses import aioresponses

from contentful_ingest.core.exceptions import FetchError
from contentful_ingest.utils.http import auth_headers, describe_error_status, encode_params, get_json

URL = "https://cdn.contentful.com/spaces/s/environments/master/entries"


class TestEncodeParams:
    """Test query parameter encoding."""

    def test_scalars_become_strings(self):
        assert encode_params({"limit": 10, "skip": 0}) == {"limit": "10", "skip": "0"}

    def test_booleans_are_lowercase(self):
        assert encode_params({"fields.featured": True}) == {"fields.featured": "true"}

    def test_sequences_are_comma_joined(self):
        params = {"sys.id[in]": ["a", "b", "c"], "select": ("fields.title", "sys.id")}
        assert encode_params(params) == {
            "sys.id[in]": "a,b,c",
            "select": "fields.title,sys.id",
        }

    def test_none_values_dropped(self):
        assert encode_params({"order": None, "limit": 1}) == {"limit": "1"}


class TestHelpers:
    """Test header and status helpers."""

    def test_auth_headers(self):
        assert auth_headers("abc") == {"Authorization": "Bearer abc"}

    def test_describe_error_status(self):
        assert describe_error_status(401) == "access token rejected"
        assert "not found" in describe_error_status(404)
        assert describe_error_status(503) == "server error"
        assert describe_error_status(418) == "unexpected status"


@pytest.mark.asyncio
class TestGetJson:
    """Test JSON GET requests and error mapping."""

    async def test_success(self):
        with aioresponses() as m:
            m.get(URL, payload={"items": [], "total": 0})
            async with aiohttp.ClientSession() as session:
                result = await get_json(session, URL)

        assert result == {"items": [], "total": 0}

    async def test_server_error(self):
        with aioresponses() as m:
            m.get(URL, status=500, body="oops")
            async with aiohttp.ClientSession() as session:
                with pytest.raises(FetchError) as exc_info:
                    await get_json(session, URL)

        assert exc_info.value.status == 500
        assert "server error" in str(exc_info.value)

    async def test_not_found(self):
        with aioresponses() as m:
            m.get(URL, status=404, payload={"sys": {"id": "NotFound"}})
            async with aiohttp.ClientSession() as session:
                with pytest.raises(FetchError, match="not found"):
                    await get_json(session, URL)

    async def test_timeout(self):
        with aioresponses() as m:
            m.get(URL, exception=asyncio.TimeoutError())
            async with aiohttp.ClientSession() as session:
                with pytest.raises(FetchError, match="timed out"):
                    await get_json(session, URL, timeout=5)

    async def test_invalid_json(self):
        with aioresponses() as m:
            m.get(URL, body="<html>not json</html>")
            async with aiohttp.ClientSession() as session:
                with pytest.raises(FetchError, match="Invalid JSON"):
                    await get_json(session, URL)

    async def test_non_object_body(self):
        with aioresponses() as m:
            m.get(URL, payload=[1, 2, 3])
            async with aiohttp.ClientSession() as session:
                with pytest.raises(FetchError, match="Expected a JSON object"):
                    await get_json(session, URL)
