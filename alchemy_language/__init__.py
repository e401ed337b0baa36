"""
AlchemyLanguage client library

Async bindings for the AlchemyLanguage text-analysis API: entities, sentiment,
keywords, concepts, relations, taxonomy, authors, language, text extraction,
microformats and feed detection.

Example usage as a library:
    from alchemy_language import AlchemyLanguage, TextSource

    client = AlchemyLanguage(api_key="your-key")
    await client.start()
    language = await client.get_language(TextSource(text="Bonjour le monde"))
    print(language.iso_639_1)
    await client.shutdown()
"""

from .client import AlchemyLanguage, CompletionHandler, get_client, shutdown_client
from .composer import PreparedRequest, compose_request, merge_parameters
from .content import ContentSource, HtmlSource, RequestType, TextSource, UrlSource, content_source
from .endpoints import BASE_URL, Operation, SentimentType, TextType, resolve_endpoint
from .errors import AlchemyError, DecodeError, RequestCompositionError, ServiceError
from .models import (
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
)
from .parameters import (
    ConceptsParameters,
    EntitiesParameters,
    KeywordExtractMode,
    KeywordsParameters,
    LanguageParameters,
    RelationsParameters,
    SentimentParameters,
    SourceText,
    TaxonomyParameters,
    TextParameters,
)

__all__ = [
    "AlchemyLanguage",
    "CompletionHandler",
    "get_client",
    "shutdown_client",
    "PreparedRequest",
    "compose_request",
    "merge_parameters",
    "ContentSource",
    "HtmlSource",
    "UrlSource",
    "TextSource",
    "RequestType",
    "content_source",
    "BASE_URL",
    "Operation",
    "SentimentType",
    "TextType",
    "resolve_endpoint",
    "AlchemyError",
    "DecodeError",
    "RequestCompositionError",
    "ServiceError",
    "ConceptResponse",
    "DocumentAuthors",
    "DocumentText",
    "DocumentTitle",
    "Entities",
    "Feeds",
    "Keywords",
    "Language",
    "Microformats",
    "SAORelations",
    "SentimentResponse",
    "Taxonomies",
    "ConceptsParameters",
    "EntitiesParameters",
    "KeywordExtractMode",
    "KeywordsParameters",
    "LanguageParameters",
    "RelationsParameters",
    "SentimentParameters",
    "SourceText",
    "TaxonomyParameters",
    "TextParameters",
]

__version__ = "1.0.0"
