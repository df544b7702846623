"""Tests for core/serper.py"""
import json

import httpx
import pytest

from deep_search_mcp.core.config import SearchResult
from deep_search_mcp.core.errors import ConfigurationError, ProviderError
from deep_search_mcp.core.serper import SerperClient, parse_response

ORGANIC = {
    "organic": [
        {"title": "First", "link": "https://a.com", "snippet": "A snippet", "position": 1},
        {"title": "Second", "link": "https://b.com", "snippet": "B snippet", "position": 2,
         "date": "2 days ago"},
    ]
}


def _recording_client(status=200, payload=None):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(status, json=payload if payload is not None else {})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), requests


@pytest.mark.asyncio
async def test_web_search_request_and_mapping():
    client, requests = _recording_client(payload=ORGANIC)
    async with client:
        results = await SerperClient("secret", client).search("python tips", 5, "web")

    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://google.serper.dev/search"
    assert request.headers["X-API-KEY"] == "secret"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"q": "python tips", "num": 5}

    assert results == [
        SearchResult(title="First", link="https://a.com", snippet="A snippet", position=1),
        SearchResult(title="Second", link="https://b.com", snippet="B snippet", position=2,
                     date="2 days ago"),
    ]


@pytest.mark.asyncio
async def test_news_endpoint():
    client, requests = _recording_client(payload={"news": ORGANIC["organic"]})
    async with client:
        results = await SerperClient("secret", client).search("elections", search_type="news")
    assert str(requests[0].url) == "https://google.serper.dev/news"
    assert [r.link for r in results] == ["https://a.com", "https://b.com"]


@pytest.mark.asyncio
async def test_missing_api_key_fails_before_network():
    client, requests = _recording_client(payload=ORGANIC)
    async with client:
        with pytest.raises(ConfigurationError):
            await SerperClient(None, client).search("anything")
    assert requests == []


@pytest.mark.asyncio
async def test_non_2xx_raises_provider_error():
    client, _ = _recording_client(status=403, payload={"message": "bad key"})
    async with client:
        with pytest.raises(ProviderError) as err:
            await SerperClient("secret", client).search("anything")
    assert err.value.status_code == 403
    assert str(err.value) == "Serper API error: 403 Forbidden"


@pytest.mark.asyncio
async def test_transport_error_raises_provider_error():
    def handler(request):
        raise httpx.ConnectError("no route", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ProviderError) as err:
            await SerperClient("secret", client).search("anything")
    assert err.value.status_code == 0


@pytest.mark.asyncio
async def test_no_matches_is_empty_list():
    client, _ = _recording_client(payload={"searchParameters": {"q": "zzz"}})
    async with client:
        assert await SerperClient("secret", client).search("zzz") == []


@pytest.mark.asyncio
async def test_num_results_clamped():
    client, requests = _recording_client(payload=ORGANIC)
    async with client:
        await SerperClient("secret", client).search("q", 25)
        await SerperClient("secret", client).search("q", 0)
    assert [json.loads(r.content)["num"] for r in requests] == [10, 1]


@pytest.mark.asyncio
async def test_unknown_search_type():
    client, requests = _recording_client(payload=ORGANIC)
    async with client:
        with pytest.raises(ValueError):
            await SerperClient("secret", client).search("q", search_type="videos")
    assert requests == []


def test_images_remapped():
    data = {
        "images": [
            {"title": "Cat", "imageUrl": "https://img.com/cat.jpg", "link": "https://cats.com/page"},
            {"title": "Dog", "imageUrl": "https://img.com/dog.jpg", "link": "https://dogs.com/page"},
        ]
    }
    results = parse_response(data, "images")
    assert results[0] == SearchResult(
        title="Cat", link="https://cats.com/page", snippet="https://img.com/cat.jpg", position=1,
    )
    assert results[1].position == 2
    assert results[1].snippet == "https://img.com/dog.jpg"


def test_missing_position_uses_output_order():
    data = {"organic": [{"title": "T", "link": "https://x.com", "snippet": "s"}]}
    assert parse_response(data, "web")[0].position == 1
