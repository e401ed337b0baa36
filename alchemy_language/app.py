from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import httpx
from fastapi import Depends, FastAPI, HTTPException, Path
from pydantic import BaseModel, Field, ValidationError

from .client import AlchemyLanguage, get_client, shutdown_client
from .composer import PARAMETER_TYPES
from .content import content_source
from .endpoints import Operation, SentimentType, TextType
from .errors import AlchemyError, RequestCompositionError

_METHODS = {
    Operation.ENTITIES: "get_entities",
    Operation.SENTIMENT: "get_sentiment",
    Operation.KEYWORDS: "get_ranked_keywords",
    Operation.CONCEPTS: "get_ranked_concepts",
    Operation.RELATIONS: "get_relations",
    Operation.TAXONOMY: "get_ranked_taxonomy",
    Operation.AUTHORS: "get_authors",
    Operation.LANGUAGE: "get_language",
    Operation.TEXT: "get_text",
    Operation.MICROFORMATS: "get_microformat_data",
    Operation.FEEDS: "get_feed_links",
}

_OPTIONAL_SOURCE = frozenset({Operation.MICROFORMATS, Operation.FEEDS})


class AnalyzeRequest(BaseModel):
    """Payload accepted by ``POST /analyze/{operation}``."""

    html: Optional[str] = Field(default=None, description="Raw HTML to analyse.")
    url: Optional[str] = Field(default=None, description="URL the service should fetch.")
    text: Optional[str] = Field(default=None, description="Plain text to analyse.")
    parameters: Dict[str, Any] = Field(
        default_factory=dict,
        description="Overrides for the operation's optional settings (field or wire names).",
    )
    sentiment_type: SentimentType = SentimentType.NORMAL
    text_type: TextType = TextType.NORMAL


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = get_client()
    await client.start()
    try:
        yield
    finally:
        await shutdown_client()


app = FastAPI(title="AlchemyLanguage Gateway", version="1.0.0", lifespan=lifespan)


@app.get("/health")
def healthcheck() -> dict:
    return {"ok": True}


async def run_operation(
    client: AlchemyLanguage, operation: Operation, request: AnalyzeRequest
) -> Any:
    """Translate a gateway payload into a client call."""
    if operation in _OPTIONAL_SOURCE and not any((request.html, request.url, request.text)):
        source = None
    else:
        source = content_source(html=request.html, url=request.url, text=request.text)

    method = getattr(client, _METHODS[operation])
    kwargs: Dict[str, Any] = {}
    parameter_type = PARAMETER_TYPES[operation]
    if parameter_type is not None:
        kwargs["parameters"] = parameter_type().with_overrides(**request.parameters)
    elif request.parameters:
        raise RequestCompositionError(f"Operation '{operation.value}' does not take parameters.")
    if operation is Operation.SENTIMENT:
        kwargs["sentiment_type"] = request.sentiment_type
    if operation is Operation.TEXT:
        kwargs["text_type"] = request.text_type

    result = await method(source, **kwargs)
    if operation is Operation.TEXT:
        text, title = result
        return {"text": text.model_dump(by_alias=True), "title": title.model_dump(by_alias=True)}
    return result.model_dump(by_alias=True)


@app.post("/analyze/{operation}")
async def analyze(
    request: AnalyzeRequest,
    operation: str = Path(..., description="One of the AlchemyLanguage operations."),
    client: AlchemyLanguage = Depends(get_client),
) -> dict:
    """Run one AlchemyLanguage call and return the decoded response."""
    try:
        selected = Operation(operation)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown operation '{operation}'") from exc

    try:
        return await run_operation(client, selected, request)
    except (RequestCompositionError, ValidationError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except httpx.TimeoutException as exc:
        raise HTTPException(status_code=504, detail=f"AlchemyLanguage timed out: {exc}") from exc
    except (httpx.HTTPError, AlchemyError) as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


if __name__ == "__main__":
    # Optional: run with `python -m alchemy_language.app`
    import uvicorn

    uvicorn.run(
        "alchemy_language.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
