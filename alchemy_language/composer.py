"""Turn (operation, content source, parameters) into a ready-to-send request."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Type

from .content import ContentSource, RequestType, UrlSource
from .endpoints import (
    Operation,
    SentimentType,
    TextType,
    Variant,
    coerce_variant,
    resolve_endpoint,
)
from .errors import RequestCompositionError
from .parameters import (
    ConceptsParameters,
    EntitiesParameters,
    KeywordsParameters,
    LanguageParameters,
    OperationParameters,
    OutputMode,
    RelationsParameters,
    SentimentParameters,
    TaxonomyParameters,
    TextParameters,
)

logger = logging.getLogger(__name__)

# Sent as ``url`` by microformat and feed detection when the caller gives no source.
PLACEHOLDER_URL = "test"

PARAMETER_TYPES: Dict[Operation, Optional[Type[OperationParameters]]] = {
    Operation.ENTITIES: EntitiesParameters,
    Operation.SENTIMENT: SentimentParameters,
    Operation.KEYWORDS: KeywordsParameters,
    Operation.CONCEPTS: ConceptsParameters,
    Operation.RELATIONS: RelationsParameters,
    Operation.TAXONOMY: TaxonomyParameters,
    Operation.AUTHORS: None,
    Operation.LANGUAGE: LanguageParameters,
    Operation.TEXT: TextParameters,
    Operation.MICROFORMATS: None,
    Operation.FEEDS: None,
}

DEFAULT_VARIANTS: Dict[Operation, Variant] = {
    Operation.SENTIMENT: SentimentType.NORMAL,
    Operation.TEXT: TextType.NORMAL,
}

_PLACEHOLDER_OPERATIONS = frozenset({Operation.MICROFORMATS, Operation.FEEDS})


@dataclass(frozen=True)
class PreparedRequest:
    """Everything the transport needs for one call."""

    operation: Operation
    variant: Optional[Variant]
    request_type: RequestType
    endpoint: str
    form: Mapping[str, str]


def common_parameters(api_key: str) -> Dict[str, str]:
    """Parameters sent with every call."""
    return {"apikey": api_key, "outputMode": OutputMode.JSON.value}


def merge_parameters(
    common: Mapping[str, str],
    parameters: Optional[OperationParameters],
    source: ContentSource,
) -> Dict[str, str]:
    """Layer common < operation parameters < content source; later keys win."""
    merged = dict(common)
    if parameters is not None:
        merged.update(parameters.as_form())
    merged.update(source.as_form())
    return merged


def default_parameters(operation: Operation) -> Optional[OperationParameters]:
    """Fresh parameters with documented defaults, or ``None`` if the operation takes none."""
    parameter_type = PARAMETER_TYPES[Operation(operation)]
    return parameter_type() if parameter_type is not None else None


def _check_parameters(
    operation: Operation, parameters: Optional[OperationParameters]
) -> Optional[OperationParameters]:
    expected = PARAMETER_TYPES[operation]
    if parameters is None:
        return default_parameters(operation)
    if expected is None:
        raise RequestCompositionError(
            f"Operation '{operation.value}' does not take parameters."
        )
    if not isinstance(parameters, expected):
        raise RequestCompositionError(
            f"Operation '{operation.value}' expects {expected.__name__}, "
            f"got {type(parameters).__name__}."
        )
    return parameters


def _check_source(operation: Operation, source: Optional[ContentSource]) -> ContentSource:
    if source is not None:
        return source
    if operation in _PLACEHOLDER_OPERATIONS:
        logger.warning(
            "No html or url supplied for %s; sending placeholder url=%r",
            operation.value,
            PLACEHOLDER_URL,
        )
        return UrlSource(url=PLACEHOLDER_URL)
    raise RequestCompositionError(
        f"Operation '{operation.value}' requires an html, url or text source."
    )


def compose_request(
    operation: Operation,
    source: Optional[ContentSource],
    parameters: Optional[OperationParameters] = None,
    *,
    api_key: str,
    variant: Optional[Variant] = None,
) -> PreparedRequest:
    """Resolve the endpoint and build the form body for one call.

    Raises:
        RequestCompositionError: the call is malformed; nothing has been sent.
    """
    operation = Operation(operation)
    if variant is None:
        variant = DEFAULT_VARIANTS.get(operation)
    else:
        variant = coerce_variant(operation, variant)

    source = _check_source(operation, source)
    parameters = _check_parameters(operation, parameters)

    if variant is SentimentType.TARGETED:
        targets = getattr(parameters, "targets", None) or ""
        if not targets.strip():
            raise RequestCompositionError(
                "Targeted sentiment requires a non-empty 'targets' parameter."
            )

    endpoint = resolve_endpoint(operation, source.request_type, variant)
    form = merge_parameters(common_parameters(api_key), parameters, source)

    return PreparedRequest(
        operation=operation,
        variant=variant,
        request_type=source.request_type,
        endpoint=endpoint,
        form=form,
    )
