import asyncio

import httpx
import pytest

import alchemy_language.client as client_module
from alchemy_language import (
    BASE_URL,
    AlchemyLanguage,
    DecodeError,
    DocumentText,
    DocumentTitle,
    HtmlSource,
    Language,
    RequestCompositionError,
    SentimentParameters,
    SentimentType,
    ServiceError,
    TextSource,
    TextType,
    UrlSource,
)

from .conftest import LANGUAGE_PAYLOAD, form_of


@pytest.mark.asyncio
async def test_language_end_to_end(make_client, reply_with, recorded):
    client = make_client(reply_with(LANGUAGE_PAYLOAD))

    language = await client.get_language(TextSource(text="Bonjour le monde"))

    assert isinstance(language, Language)
    assert language.iso_639_1 == "fr"

    (request,) = recorded
    assert request.method == "POST"
    assert str(request.url) == f"{BASE_URL}/text/TextGetLanguage"
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    assert form_of(request) == {
        "apikey": "test-key",
        "outputMode": "json",
        "sourceText": "cleaned_or_raw",
        "text": "Bonjour le monde",
    }
    await client.shutdown()


@pytest.mark.asyncio
async def test_completion_handler_receives_result_once(make_client, reply_with, handler_calls):
    client = make_client(reply_with(LANGUAGE_PAYLOAD))

    returned = await client.get_language(
        TextSource(text="Bonjour le monde"), completion_handler=handler_calls
    )

    assert len(handler_calls.calls) == 1
    result, error = handler_calls.calls[0]
    assert error is None
    assert result is returned
    assert result.iso_639_1 == "fr"


@pytest.mark.asyncio
async def test_async_completion_handler_is_awaited(make_client, reply_with):
    client = make_client(reply_with({"status": "OK", "feeds": [{"feed": "https://example.com/rss"}]}))
    seen = []

    async def handler(result, error):
        await asyncio.sleep(0)
        seen.append((result, error))

    await client.get_feed_links(UrlSource(url="https://example.com"), completion_handler=handler)

    assert len(seen) == 1
    assert seen[0][0].feeds[0].feed == "https://example.com/rss"


@pytest.mark.asyncio
async def test_transport_failure_is_delivered_without_decoding(make_client, handler_calls, monkeypatch):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    decode_attempts = []
    monkeypatch.setattr(
        client_module, "decode_payload", lambda raw, model: decode_attempts.append(raw)
    )
    client = make_client(refuse)

    returned = await client.get_entities(
        UrlSource(url="https://example.com"), completion_handler=handler_calls
    )

    assert returned is None
    assert decode_attempts == []
    assert len(handler_calls.calls) == 1
    result, error = handler_calls.calls[0]
    assert result is None
    assert isinstance(error, httpx.ConnectError)


@pytest.mark.asyncio
async def test_transport_failure_is_raised_untouched(make_client):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(refuse)
    with pytest.raises(httpx.ConnectError):
        await client.get_ranked_keywords(TextSource(text="cloud computing"))


@pytest.mark.asyncio
async def test_http_error_status_is_a_transport_error(make_client, reply_with, handler_calls):
    client = make_client(reply_with({"status": "ERROR"}, status_code=503))

    await client.get_ranked_concepts(TextSource(text="x"), completion_handler=handler_calls)

    (result, error), = handler_calls.calls
    assert result is None
    assert isinstance(error, httpx.HTTPStatusError)
    assert error.response.status_code == 503


@pytest.mark.asyncio
async def test_malformed_response_is_a_decode_error(make_client, reply_with, handler_calls):
    client = make_client(reply_with({"status": "OK", "taxonomy": {"label": "/news"}}))

    returned = await client.get_ranked_taxonomy(
        TextSource(text="x"), completion_handler=handler_calls
    )

    assert returned is None
    (result, error), = handler_calls.calls
    assert result is None
    assert isinstance(error, DecodeError)


@pytest.mark.asyncio
async def test_payload_of_another_operation_is_delivered_as_decode_error(make_client, reply_with, handler_calls):
    client = make_client(reply_with({"status": "OK", "feeds": [{"feed": "https://example.com/rss"}]}))

    returned = await client.get_entities(
        UrlSource(url="https://example.com"), completion_handler=handler_calls
    )

    assert returned is None
    (result, error), = handler_calls.calls
    assert result is None
    assert isinstance(error, DecodeError)


@pytest.mark.asyncio
async def test_get_text_without_text_is_a_decode_error(make_client, reply_with):
    client = make_client(reply_with({"status": "OK", "title": "Headline"}))
    with pytest.raises(DecodeError):
        await client.get_text(UrlSource(url="https://example.com"))


@pytest.mark.asyncio
async def test_non_json_body_raises_decode_error(make_client):
    client = make_client(lambda request: httpx.Response(200, text="<html>maintenance</html>"))
    with pytest.raises(DecodeError):
        await client.get_relations(TextSource(text="Apple acquired Beats."))


@pytest.mark.asyncio
async def test_service_error_status(make_client, reply_with):
    client = make_client(reply_with({"status": "ERROR", "statusInfo": "invalid-api-key"}))

    with pytest.raises(ServiceError) as exc_info:
        await client.get_authors(UrlSource(url="https://example.com/post"))

    assert exc_info.value.status_info == "invalid-api-key"
    assert exc_info.value.operation == "authors"


@pytest.mark.asyncio
async def test_targeted_sentiment_without_targets_never_reaches_transport(
    make_client, reply_with, recorded, handler_calls
):
    client = make_client(reply_with({"status": "OK"}))

    with pytest.raises(RequestCompositionError):
        await client.get_sentiment(
            TextSource(text="Apple beat Google"), sentiment_type=SentimentType.TARGETED
        )

    await client.get_sentiment(
        TextSource(text="Apple beat Google"),
        sentiment_type=SentimentType.TARGETED,
        completion_handler=handler_calls,
    )

    assert recorded == []
    (result, error), = handler_calls.calls
    assert result is None
    assert isinstance(error, RequestCompositionError)


@pytest.mark.asyncio
async def test_targeted_sentiment(make_client, reply_with, recorded):
    payload = {"status": "OK", "docSentiment": {"type": "positive", "score": "0.61"}}
    client = make_client(reply_with(payload))

    response = await client.get_sentiment(
        HtmlSource(html="<p>Apple beat Google</p>"),
        SentimentParameters(targets="Apple"),
        sentiment_type="targeted",
    )

    assert response.doc_sentiment.type == "positive"
    assert recorded[0].url.path.endswith("/html/HTMLGetTargetedSentiment")
    assert form_of(recorded[0])["targets"] == "Apple"


@pytest.mark.asyncio
async def test_get_text_returns_text_and_title(make_client, reply_with, recorded):
    client = make_client(reply_with({"status": "OK", "url": "https://example.com", "title": "Headline"}))

    text, title = await client.get_text(UrlSource(url="https://example.com"), text_type=TextType.TITLE)

    assert isinstance(text, DocumentText) and text.text is None
    assert isinstance(title, DocumentTitle) and title.title == "Headline"
    assert recorded[0].url.path.endswith("/url/URLGetTitle")


@pytest.mark.asyncio
async def test_get_text_rejects_plain_text_source(make_client, reply_with, recorded):
    client = make_client(reply_with({"status": "OK"}))
    with pytest.raises(RequestCompositionError):
        await client.get_text(TextSource(text="already text"))
    assert recorded == []


@pytest.mark.asyncio
@pytest.mark.parametrize("method,path", [
    ("get_microformat_data", "/url/URLGetMicroformatData"),
    ("get_feed_links", "/url/URLGetFeedLinks"),
])
async def test_detection_without_source_posts_placeholder(method, path, make_client, reply_with, recorded):
    client = make_client(reply_with({"status": "OK", "microformats": [], "feeds": []}))

    await getattr(client, method)()

    assert recorded[0].url.path.endswith(path)
    assert form_of(recorded[0])["url"] == "test"


@pytest.mark.asyncio
async def test_handler_exception_is_not_redelivered(make_client, reply_with):
    client = make_client(reply_with(LANGUAGE_PAYLOAD))
    calls = []

    def handler(result, error):
        calls.append((result, error))
        raise RuntimeError("handler bug")

    with pytest.raises(RuntimeError):
        await client.get_language(TextSource(text="Hallo Welt"), completion_handler=handler)

    assert len(calls) == 1
    assert calls[0][1] is None


@pytest.mark.asyncio
async def test_concurrent_calls_are_independent(make_client):
    def respond(request):
        text = form_of(request)["text"]
        return httpx.Response(200, json={"status": "OK", "language": text})

    client = make_client(respond)

    results = await asyncio.gather(
        *(client.get_language(TextSource(text=word)) for word in ("english", "french", "german"))
    )

    assert [r.language for r in results] == ["english", "french", "german"]
    await client.shutdown()


@pytest.mark.asyncio
async def test_basic_auth_is_attached(make_client, reply_with, recorded):
    client = make_client(reply_with(LANGUAGE_PAYLOAD), auth=httpx.BasicAuth("user", "secret"))

    await client.get_language(TextSource(text="Bonjour"))

    assert recorded[0].headers["authorization"].startswith("Basic ")


def test_compose_does_not_send(make_client, reply_with, recorded):
    client = make_client(reply_with(LANGUAGE_PAYLOAD))
    request = client.compose("language", TextSource(text="Bonjour"))
    assert request.endpoint == "/text/TextGetLanguage"
    assert recorded == []


def test_api_key_is_required():
    with pytest.raises(ValueError):
        AlchemyLanguage("")


def test_get_client_reads_environment(monkeypatch):
    monkeypatch.setattr(client_module, "_cached_client", None)
    monkeypatch.setenv("ALCHEMY_API_KEY", "env-key")
    monkeypatch.setenv("ALCHEMY_BASE_URL", "https://alchemy.example.com/calls/")
    monkeypatch.setenv("ALCHEMY_TIMEOUT_SECONDS", "5")

    client = client_module.get_client()

    assert client is client_module.get_client()
    assert client.common_parameters == {"apikey": "env-key", "outputMode": "json"}
    assert client.base_url == "https://alchemy.example.com/calls"
    assert client.timeout == 5.0
    asyncio.run(client_module.shutdown_client())
    assert client_module._cached_client is None


def test_get_client_without_key(monkeypatch):
    monkeypatch.setattr(client_module, "_cached_client", None)
    monkeypatch.delenv("ALCHEMY_API_KEY", raising=False)
    with pytest.raises(ValueError):
        client_module.get_client()
