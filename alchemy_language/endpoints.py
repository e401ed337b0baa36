"""Endpoint table for the AlchemyLanguage service.

Every call is a POST to ``BASE_URL`` plus a path selected by the operation,
an optional variant (sentiment and text extraction only), and the kind of
content the caller supplied.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple, Union

from .content import RequestType
from .errors import RequestCompositionError

BASE_URL = "https://gateway-a.watsonplatform.net/calls"


class Operation(str, Enum):
    ENTITIES = "entities"
    SENTIMENT = "sentiment"
    KEYWORDS = "keywords"
    CONCEPTS = "concepts"
    RELATIONS = "relations"
    TAXONOMY = "taxonomy"
    AUTHORS = "authors"
    LANGUAGE = "language"
    TEXT = "text"
    MICROFORMATS = "microformats"
    FEEDS = "feeds"


class SentimentType(str, Enum):
    NORMAL = "normal"
    TARGETED = "targeted"


class TextType(str, Enum):
    NORMAL = "normal"
    RAW = "raw"
    TITLE = "title"


Variant = Union[SentimentType, TextType]

_HTML_URL_TEXT = (RequestType.HTML, RequestType.URL, RequestType.TEXT)
_HTML_URL = (RequestType.HTML, RequestType.URL)

_PREFIXES = {
    RequestType.HTML: ("html", "HTML"),
    RequestType.URL: ("url", "URL"),
    RequestType.TEXT: ("text", "Text"),
}


def _paths(call: str, kinds: Tuple[RequestType, ...]) -> Dict[RequestType, str]:
    """Expand a call name such as ``GetLanguage`` into its per-source paths."""
    return {
        kind: f"/{_PREFIXES[kind][0]}/{_PREFIXES[kind][1]}{call}"
        for kind in kinds
    }


ENDPOINTS: Dict[Tuple[Operation, Optional[Variant]], Dict[RequestType, str]] = {
    (Operation.ENTITIES, None): _paths("GetRankedNamedEntities", _HTML_URL_TEXT),
    (Operation.SENTIMENT, SentimentType.NORMAL): _paths("GetTextSentiment", _HTML_URL_TEXT),
    (Operation.SENTIMENT, SentimentType.TARGETED): _paths("GetTargetedSentiment", _HTML_URL_TEXT),
    (Operation.KEYWORDS, None): _paths("GetRankedKeywords", _HTML_URL_TEXT),
    (Operation.CONCEPTS, None): _paths("GetRankedConcepts", _HTML_URL_TEXT),
    (Operation.RELATIONS, None): _paths("GetRelations", _HTML_URL_TEXT),
    (Operation.TAXONOMY, None): _paths("GetRankedTaxonomy", _HTML_URL_TEXT),
    (Operation.AUTHORS, None): _paths("GetAuthors", _HTML_URL),
    (Operation.LANGUAGE, None): _paths("GetLanguage", _HTML_URL_TEXT),
    (Operation.TEXT, TextType.NORMAL): _paths("GetText", _HTML_URL),
    (Operation.TEXT, TextType.RAW): _paths("GetRawText", _HTML_URL),
    (Operation.TEXT, TextType.TITLE): _paths("GetTitle", _HTML_URL),
    (Operation.MICROFORMATS, None): _paths("GetMicroformatData", _HTML_URL),
    (Operation.FEEDS, None): _paths("GetFeedLinks", _HTML_URL),
}


_VARIANT_TYPES = {Operation.SENTIMENT: SentimentType, Operation.TEXT: TextType}


def coerce_variant(operation: Operation, variant: Optional[Union[Variant, str]]) -> Optional[Variant]:
    """Normalise a variant given as enum or string for ``operation``."""
    if variant is None:
        return None
    variant_type = _VARIANT_TYPES.get(Operation(operation))
    if variant_type is None:
        raise RequestCompositionError(
            f"Operation '{Operation(operation).value}' has no variant {variant!r}."
        )
    try:
        return variant_type(variant)
    except ValueError as exc:
        raise RequestCompositionError(
            f"Unknown {variant_type.__name__} {variant!r}."
        ) from exc


def resolve_endpoint(
    operation: Operation,
    request_type: RequestType,
    variant: Optional[Union[Variant, str]] = None,
) -> str:
    """Return the path suffix for a call.

    Raises:
        RequestCompositionError: the combination is not offered by the service.
    """
    table = ENDPOINTS.get((Operation(operation), coerce_variant(operation, variant)))
    if table is None:
        raise RequestCompositionError(
            f"Operation '{Operation(operation).value}' has no variant {variant!r}."
        )
    try:
        return table[RequestType(request_type)]
    except KeyError as exc:
        raise RequestCompositionError(
            f"Operation '{Operation(operation).value}' does not accept "
            f"'{RequestType(request_type).value}' content."
        ) from exc
