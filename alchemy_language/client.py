from __future__ import annotations

import asyncio
import inspect
import logging
import os
from threading import Lock
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar, Union

import httpx
from dotenv import load_dotenv

from .composer import PreparedRequest, compose_request, common_parameters
from .content import ContentSource
from .endpoints import BASE_URL, Operation, SentimentType, TextType, Variant
from .errors import AlchemyError, DecodeError, ServiceError
from .models import (
    AlchemyResponse,
    ConceptResponse,
    DocumentAuthors,
    DocumentText,
    DocumentTitle,
    Entities,
    Feeds,
    Keywords,
    Language,
    Microformats,
    SAORelations,
    SentimentResponse,
    Taxonomies,
    decode_payload,
)
from .parameters import (
    ConceptsParameters,
    EntitiesParameters,
    KeywordsParameters,
    LanguageParameters,
    OperationParameters,
    RelationsParameters,
    SentimentParameters,
    TaxonomyParameters,
    TextParameters,
)

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_HEADERS = {"Accept": "application/json"}

ResultT = TypeVar("ResultT")
CompletionHandler = Callable[[Optional[Any], Optional[BaseException]], Union[None, Awaitable[None]]]
TextResult = Tuple[DocumentText, DocumentTitle]

# Everything a call can fail with; handed to the completion handler when one is given.
_DELIVERABLE_ERRORS = (AlchemyError, httpx.HTTPError)


class AlchemyLanguage:
    """Async client for the AlchemyLanguage analysis calls.

    Each public method either returns the decoded model (raising on failure) or,
    when ``completion_handler`` is given, calls it exactly once with
    ``(result, None)`` or ``(None, error)`` and returns the result or ``None``.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        auth: Optional[httpx.Auth] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not api_key:
            raise ValueError("An AlchemyLanguage API key is required.")

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._auth = auth
        self._transport = transport
        self._common = common_parameters(api_key)

        self._client: Optional[httpx.AsyncClient] = None
        self._client_lock = asyncio.Lock()

        logger.info(
            "AlchemyLanguage client ready (base_url=%s, timeout=%.1fs)",
            self.base_url,
            self.timeout,
        )

    @property
    def common_parameters(self) -> dict:
        return dict(self._common)

    async def start(self) -> None:
        """Warm the HTTP client ahead of serving requests."""
        await self._get_http_client()

    async def shutdown(self) -> None:
        """Tear down the shared HTTP client."""
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Create (or return) a shared async HTTP client."""
        if self._client is None:
            async with self._client_lock:
                if self._client is None:
                    self._client = httpx.AsyncClient(
                        headers=DEFAULT_HEADERS,
                        timeout=httpx.Timeout(self.timeout),
                        auth=self._auth,
                        transport=self._transport,
                    )
        return self._client

    # ------------------------------------------------------------------
    #  Dispatch
    # ------------------------------------------------------------------
    def compose(
        self,
        operation: Operation,
        source: Optional[ContentSource],
        parameters: Optional[OperationParameters] = None,
        *,
        variant: Optional[Variant] = None,
    ) -> PreparedRequest:
        """Build the request for a call without sending it."""
        return compose_request(
            operation, source, parameters, api_key=self.api_key, variant=variant
        )

    async def _post(self, request: PreparedRequest) -> bytes:
        client = await self._get_http_client()
        url = f"{self.base_url}{request.endpoint}"
        logger.debug("POST %s (%s, %d form fields)", url, request.operation.value, len(request.form))

        try:
            response = await client.post(url, data=dict(request.form))
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("%s call to %s failed: %s", request.operation.value, request.endpoint, exc)
            raise

        return response.content

    @staticmethod
    def _check_status(operation: Operation, result: AlchemyResponse) -> None:
        if not result.ok:
            raise ServiceError(operation.value, result.status, result.status_info)

    async def _execute(
        self,
        operation: Operation,
        source: Optional[ContentSource],
        parameters: Optional[OperationParameters],
        decode: Callable[[bytes], ResultT],
        variant: Optional[Variant] = None,
    ) -> ResultT:
        request = self.compose(operation, source, parameters, variant=variant)
        raw = await self._post(request)
        try:
            return decode(raw)
        except AlchemyError as exc:
            logger.warning("Rejected %s response: %s", operation.value, exc)
            raise

    async def _dispatch(
        self,
        operation: Operation,
        source: Optional[ContentSource],
        parameters: Optional[OperationParameters],
        decode: Callable[[bytes], ResultT],
        *,
        variant: Optional[Variant] = None,
        completion_handler: Optional[CompletionHandler] = None,
    ) -> Optional[ResultT]:
        if completion_handler is None:
            return await self._execute(operation, source, parameters, decode, variant)

        try:
            result = await self._execute(operation, source, parameters, decode, variant)
        except _DELIVERABLE_ERRORS as exc:
            await _deliver(completion_handler, None, exc)
            return None

        await _deliver(completion_handler, result, None)
        return result

    def _decoder(self, operation: Operation, model: Type[AlchemyResponse]) -> Callable[[bytes], Any]:
        def decode(raw: bytes) -> AlchemyResponse:
            result = decode_payload(raw, model)
            self._check_status(operation, result)
            return result

        return decode

    # ------------------------------------------------------------------
    #  Operations
    # ------------------------------------------------------------------
    async def get_entities(
        self,
        source: ContentSource,
        parameters: Optional[EntitiesParameters] = None,
        *,
        completion_handler: Optional[CompletionHandler] = None,
    ) -> Optional[Entities]:
        """Ranked named entities (people, companies, places, ...)."""
        return await self._dispatch(
            Operation.ENTITIES,
            source,
            parameters,
            self._decoder(Operation.ENTITIES, Entities),
            completion_handler=completion_handler,
        )

    async def get_sentiment(
        self,
        source: ContentSource,
        parameters: Optional[SentimentParameters] = None,
        *,
        sentiment_type: SentimentType = SentimentType.NORMAL,
        completion_handler: Optional[CompletionHandler] = None,
    ) -> Optional[SentimentResponse]:
        """Document sentiment, or sentiment towards ``parameters.targets`` when targeted."""
        return await self._dispatch(
            Operation.SENTIMENT,
            source,
            parameters,
            self._decoder(Operation.SENTIMENT, SentimentResponse),
            variant=sentiment_type,
            completion_handler=completion_handler,
        )

    async def get_ranked_keywords(
        self,
        source: ContentSource,
        parameters: Optional[KeywordsParameters] = None,
        *,
        completion_handler: Optional[CompletionHandler] = None,
    ) -> Optional[Keywords]:
        return await self._dispatch(
            Operation.KEYWORDS,
            source,
            parameters,
            self._decoder(Operation.KEYWORDS, Keywords),
            completion_handler=completion_handler,
        )

    async def get_ranked_concepts(
        self,
        source: ContentSource,
        parameters: Optional[ConceptsParameters] = None,
        *,
        completion_handler: Optional[CompletionHandler] = None,
    ) -> Optional[ConceptResponse]:
        return await self._dispatch(
            Operation.CONCEPTS,
            source,
            parameters,
            self._decoder(Operation.CONCEPTS, ConceptResponse),
            completion_handler=completion_handler,
        )

    async def get_relations(
        self,
        source: ContentSource,
        parameters: Optional[RelationsParameters] = None,
        *,
        completion_handler: Optional[CompletionHandler] = None,
    ) -> Optional[SAORelations]:
        """Subject-action-object relations."""
        return await self._dispatch(
            Operation.RELATIONS,
            source,
            parameters,
            self._decoder(Operation.RELATIONS, SAORelations),
            completion_handler=completion_handler,
        )

    async def get_ranked_taxonomy(
        self,
        source: ContentSource,
        parameters: Optional[TaxonomyParameters] = None,
        *,
        completion_handler: Optional[CompletionHandler] = None,
    ) -> Optional[Taxonomies]:
        return await self._dispatch(
            Operation.TAXONOMY,
            source,
            parameters,
            self._decoder(Operation.TAXONOMY, Taxonomies),
            completion_handler=completion_handler,
        )

    async def get_authors(
        self,
        source: ContentSource,
        *,
        completion_handler: Optional[CompletionHandler] = None,
    ) -> Optional[DocumentAuthors]:
        """Author names of an HTML page or URL."""
        return await self._dispatch(
            Operation.AUTHORS,
            source,
            None,
            self._decoder(Operation.AUTHORS, DocumentAuthors),
            completion_handler=completion_handler,
        )

    async def get_language(
        self,
        source: ContentSource,
        parameters: Optional[LanguageParameters] = None,
        *,
        completion_handler: Optional[CompletionHandler] = None,
    ) -> Optional[Language]:
        return await self._dispatch(
            Operation.LANGUAGE,
            source,
            parameters,
            self._decoder(Operation.LANGUAGE, Language),
            completion_handler=completion_handler,
        )

    async def get_text(
        self,
        source: ContentSource,
        parameters: Optional[TextParameters] = None,
        *,
        text_type: TextType = TextType.NORMAL,
        completion_handler: Optional[CompletionHandler] = None,
    ) -> Optional[TextResult]:
        """Extracted text and title, both decoded from the same payload.

        ``TextType.NORMAL`` returns cleaned text, ``RAW`` the text with markup
        stripped only, ``TITLE`` the page title (the text half is then empty).
        """

        def decode(raw: bytes) -> TextResult:
            text = decode_payload(raw, DocumentText)
            self._check_status(Operation.TEXT, text)
            title = decode_payload(raw, DocumentTitle)
            if TextType(text_type) is TextType.TITLE:
                expected, field = title, "title"
            else:
                expected, field = text, "text"
            if getattr(expected, field) is None:
                raise DecodeError(type(expected).__name__, f"OK response is missing {field}")
            return text, title

        return await self._dispatch(
            Operation.TEXT,
            source,
            parameters,
            decode,
            variant=text_type,
            completion_handler=completion_handler,
        )

    async def get_microformat_data(
        self,
        source: Optional[ContentSource] = None,
        *,
        completion_handler: Optional[CompletionHandler] = None,
    ) -> Optional[Microformats]:
        return await self._dispatch(
            Operation.MICROFORMATS,
            source,
            None,
            self._decoder(Operation.MICROFORMATS, Microformats),
            completion_handler=completion_handler,
        )

    async def get_feed_links(
        self,
        source: Optional[ContentSource] = None,
        *,
        completion_handler: Optional[CompletionHandler] = None,
    ) -> Optional[Feeds]:
        """RSS/Atom feed links advertised by a page."""
        return await self._dispatch(
            Operation.FEEDS,
            source,
            None,
            self._decoder(Operation.FEEDS, Feeds),
            completion_handler=completion_handler,
        )


async def _deliver(
    handler: CompletionHandler, result: Optional[Any], error: Optional[BaseException]
) -> None:
    outcome = handler(result, error)
    if inspect.isawaitable(outcome):
        await outcome


_cached_client: Optional[AlchemyLanguage] = None
_cached_client_lock = Lock()


def get_client() -> AlchemyLanguage:
    """Return a singleton client configured from the environment, creating it on first use."""
    global _cached_client
    with _cached_client_lock:
        if _cached_client is None:
            api_key = os.getenv("ALCHEMY_API_KEY")
            if not api_key:
                raise ValueError(
                    "Missing API key. Set the ALCHEMY_API_KEY environment variable."
                )

            username = os.getenv("ALCHEMY_USERNAME")
            password = os.getenv("ALCHEMY_PASSWORD")
            auth = httpx.BasicAuth(username, password or "") if username else None

            _cached_client = AlchemyLanguage(
                api_key,
                base_url=os.getenv("ALCHEMY_BASE_URL") or BASE_URL,
                timeout=float(os.getenv("ALCHEMY_TIMEOUT_SECONDS") or DEFAULT_TIMEOUT_SECONDS),
                auth=auth,
            )
        return _cached_client


async def shutdown_client() -> None:
    """Close the cached client and reset the singleton."""
    global _cached_client
    with _cached_client_lock:
        client = _cached_client
        _cached_client = None

    if client is not None:
        await client.shutdown()
