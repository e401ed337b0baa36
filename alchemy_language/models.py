"""Response models for every AlchemyLanguage call, plus the payload decoder."""

from __future__ import annotations

import json
from typing import ClassVar, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import DecodeError


class _Record(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)


class AlchemyResponse(_Record):
    """Envelope fields shared by every response."""

    status: str = Field(..., description="'OK' on success, 'ERROR' otherwise.")
    status_info: Optional[str] = Field(default=None, alias="statusInfo")
    usage: Optional[str] = None
    url: Optional[str] = None
    total_transactions: Optional[int] = Field(default=None, alias="totalTransactions")
    language: Optional[str] = None

    # An OK payload must carry at least one of these fields.
    payload_fields: ClassVar[Tuple[str, ...]] = ()

    @property
    def ok(self) -> bool:
        return self.status == "OK"

    @model_validator(mode="after")
    def _require_payload(self) -> "AlchemyResponse":
        if not self.ok or not self.payload_fields:
            return self
        if not any(name in self.model_fields_set for name in self.payload_fields):
            wire = [type(self).model_fields[name].alias or name for name in self.payload_fields]
            raise ValueError(f"OK response is missing {' or '.join(wire)}")
        return self


# ----------------------------------------------------------------------
#  Shared building blocks
# ----------------------------------------------------------------------
class Sentiment(_Record):
    type: Optional[str] = Field(default=None, description="positive, negative or neutral.")
    score: Optional[float] = None
    mixed: Optional[int] = None


class KnowledgeGraph(_Record):
    type_hierarchy: Optional[str] = Field(default=None, alias="typeHierarchy")


class LinkedData(_Record):
    """Links into linked-data sources, returned for disambiguated items."""

    website: Optional[str] = None
    geo: Optional[str] = None
    dbpedia: Optional[str] = None
    freebase: Optional[str] = None
    yago: Optional[str] = None
    opencyc: Optional[str] = None
    umbel: Optional[str] = None
    cia_factbook: Optional[str] = Field(default=None, alias="ciaFactbook")
    census: Optional[str] = None
    geonames: Optional[str] = None
    music_brainz: Optional[str] = Field(default=None, alias="musicBrainz")
    crunchbase: Optional[str] = None
    semantic_crunchbase: Optional[str] = Field(default=None, alias="semanticCrunchbase")


class DisambiguatedLinks(LinkedData):
    name: Optional[str] = None
    sub_type: List[str] = Field(default_factory=list, alias="subType")


# ----------------------------------------------------------------------
#  Entities
# ----------------------------------------------------------------------
class Quotation(_Record):
    quotation: str


class Entity(_Record):
    type: Optional[str] = None
    relevance: Optional[float] = None
    count: Optional[int] = None
    text: Optional[str] = None
    knowledge_graph: Optional[KnowledgeGraph] = Field(default=None, alias="knowledgeGraph")
    disambiguated: Optional[DisambiguatedLinks] = None
    quotations: List[Quotation] = Field(default_factory=list)
    sentiment: Optional[Sentiment] = None


class Entities(AlchemyResponse):
    payload_fields: ClassVar[Tuple[str, ...]] = ("entities",)

    entities: List[Entity] = Field(default_factory=list)


# ----------------------------------------------------------------------
#  Sentiment
# ----------------------------------------------------------------------
class TargetedSentiment(_Record):
    text: Optional[str] = None
    sentiment: Optional[Sentiment] = None


class SentimentResponse(AlchemyResponse):
    payload_fields: ClassVar[Tuple[str, ...]] = ("doc_sentiment", "results")

    doc_sentiment: Optional[Sentiment] = Field(default=None, alias="docSentiment")
    results: List[TargetedSentiment] = Field(default_factory=list)


# ----------------------------------------------------------------------
#  Keywords & concepts
# ----------------------------------------------------------------------
class Keyword(_Record):
    text: Optional[str] = None
    relevance: Optional[float] = None
    knowledge_graph: Optional[KnowledgeGraph] = Field(default=None, alias="knowledgeGraph")
    sentiment: Optional[Sentiment] = None


class Keywords(AlchemyResponse):
    payload_fields: ClassVar[Tuple[str, ...]] = ("keywords",)

    keywords: List[Keyword] = Field(default_factory=list)


class Concept(LinkedData):
    text: Optional[str] = None
    relevance: Optional[float] = None
    knowledge_graph: Optional[KnowledgeGraph] = Field(default=None, alias="knowledgeGraph")


class ConceptResponse(AlchemyResponse):
    payload_fields: ClassVar[Tuple[str, ...]] = ("concepts",)

    concepts: List[Concept] = Field(default_factory=list)


# ----------------------------------------------------------------------
#  Subject-action-object relations
# ----------------------------------------------------------------------
class RelationEntity(_Record):
    text: Optional[str] = None
    type: Optional[str] = None
    knowledge_graph: Optional[KnowledgeGraph] = Field(default=None, alias="knowledgeGraph")
    disambiguated: Optional[DisambiguatedLinks] = None
    sentiment: Optional[Sentiment] = None


class RelationKeyword(_Record):
    text: Optional[str] = None
    knowledge_graph: Optional[KnowledgeGraph] = Field(default=None, alias="knowledgeGraph")
    sentiment: Optional[Sentiment] = None


class RelationComponent(_Record):
    text: Optional[str] = None
    entities: List[RelationEntity] = Field(default_factory=list)
    keywords: List[RelationKeyword] = Field(default_factory=list)
    sentiment: Optional[Sentiment] = None


class RelationObject(RelationComponent):
    sentiment_from_subject: Optional[Sentiment] = Field(default=None, alias="sentimentFromSubject")


class Verb(_Record):
    text: Optional[str] = None
    tense: Optional[str] = None
    negated: Optional[int] = None


class Action(_Record):
    text: Optional[str] = None
    lemmatized: Optional[str] = None
    verb: Optional[Verb] = None


class SAORelation(_Record):
    sentence: Optional[str] = None
    subject: Optional[RelationComponent] = None
    action: Optional[Action] = None
    object_: Optional[RelationObject] = Field(default=None, alias="object")
    location: Optional[RelationComponent] = None


class SAORelations(AlchemyResponse):
    payload_fields: ClassVar[Tuple[str, ...]] = ("relations",)

    relations: List[SAORelation] = Field(default_factory=list)


# ----------------------------------------------------------------------
#  Taxonomy, language, text, authors, microformats, feeds
# ----------------------------------------------------------------------
class Taxonomy(_Record):
    label: Optional[str] = None
    score: Optional[float] = None
    confident: Optional[str] = Field(default=None, description="'no' when the service is unsure.")


class Taxonomies(AlchemyResponse):
    payload_fields: ClassVar[Tuple[str, ...]] = ("taxonomy",)

    taxonomy: List[Taxonomy] = Field(default_factory=list)


class Language(AlchemyResponse):
    payload_fields: ClassVar[Tuple[str, ...]] = ("language",)

    iso_639_1: Optional[str] = Field(default=None, alias="iso-639-1")
    iso_639_2: Optional[str] = Field(default=None, alias="iso-639-2")
    iso_639_3: Optional[str] = Field(default=None, alias="iso-639-3")
    ethnologue: Optional[str] = None
    native_speakers: Optional[str] = Field(default=None, alias="native-speakers")
    wikipedia: Optional[str] = None


class DocumentText(AlchemyResponse):
    text: Optional[str] = None


class DocumentTitle(AlchemyResponse):
    title: Optional[str] = None


class Authors(_Record):
    confident: Optional[str] = None
    names: List[str] = Field(default_factory=list)


class DocumentAuthors(AlchemyResponse):
    payload_fields: ClassVar[Tuple[str, ...]] = ("authors",)

    authors: Optional[Authors] = None


class Microformat(_Record):
    field: Optional[str] = None
    data: Optional[str] = None


class Microformats(AlchemyResponse):
    payload_fields: ClassVar[Tuple[str, ...]] = ("microformats",)

    microformats: List[Microformat] = Field(default_factory=list)


class Feed(_Record):
    feed: str


class Feeds(AlchemyResponse):
    payload_fields: ClassVar[Tuple[str, ...]] = ("feeds",)

    feeds: List[Feed] = Field(default_factory=list)


ResponseT = TypeVar("ResponseT", bound=AlchemyResponse)


def decode_payload(raw: Union[str, bytes], model: Type[ResponseT]) -> ResponseT:
    """Strictly map a raw JSON body onto ``model``.

    Raises:
        DecodeError: the body is not JSON, not an object, or does not fit the model.
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise DecodeError(model.__name__, f"body is not valid JSON ({exc})") from exc

    if not isinstance(payload, dict):
        raise DecodeError(model.__name__, f"expected a JSON object, got {type(payload).__name__}")

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise DecodeError(model.__name__, str(exc)) from exc
