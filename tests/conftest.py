import os
from urllib.parse import parse_qsl

import httpx
import pytest

os.environ.setdefault("ALCHEMY_API_KEY", "test-key")

from alchemy_language import AlchemyLanguage

LANGUAGE_PAYLOAD = {
    "status": "OK",
    "usage": "By accessing AlchemyAPI or using information generated by AlchemyAPI, you are agreeing to be bound by the AlchemyAPI Terms of Use",
    "url": "",
    "language": "french",
    "iso-639-1": "fr",
    "iso-639-2": "fra",
    "iso-639-3": "fra",
    "ethnologue": "http://www.ethnologue.com/show_language.asp?code=fra",
    "native-speakers": "67 million",
    "wikipedia": "http://en.wikipedia.org/wiki/French_language",
}


def form_of(request: httpx.Request) -> dict:
    """Decode the url-encoded body of a recorded request."""
    return dict(parse_qsl(request.content.decode(), keep_blank_values=True))


@pytest.fixture
def recorded():
    return []


@pytest.fixture
def make_client(recorded):
    """Build a client whose transport is a responder function; requests are recorded."""

    def factory(responder, **kwargs):
        def handler(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            return responder(request)

        return AlchemyLanguage("test-key", transport=httpx.MockTransport(handler), **kwargs)

    return factory


@pytest.fixture
def reply_with():
    """Responder returning the same JSON payload for every request."""

    def factory(payload, status_code=200):
        return lambda request: httpx.Response(status_code, json=payload)

    return factory


@pytest.fixture
def handler_calls():
    """A completion handler that records every invocation."""
    calls = []

    def handler(result, error):
        calls.append((result, error))

    handler.calls = calls
    return handler
