"""Optional per-operation settings with the service's documented defaults.

Each model is immutable. Start from the defaults and override only what you
need::

    params = EntitiesParameters().with_overrides(max_retrieve=10, sentiment=1)
    params.as_form()["maxRetrieve"]  # "10"
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class OutputMode(str, Enum):
    JSON = "json"
    XML = "xml"


class SourceText(str, Enum):
    CLEANED_OR_RAW = "cleaned_or_raw"
    CLEANED = "cleaned"
    RAW = "raw"
    CQUERY = "cquery"
    XPATH = "xpath"
    XPATH_OR_RAW = "xpath_or_raw"


class KeywordExtractMode(str, Enum):
    NORMAL = "normal"
    STRICT = "strict"


def _flag(default: int, alias: str, description: str) -> Any:
    return Field(default=default, ge=0, le=1, alias=alias, description=description)


class OperationParameters(BaseModel):
    """Base class: serialises to the flat form map the service expects."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    def with_overrides(self, **changes: Any) -> "OperationParameters":
        """Return a validated copy with ``changes`` applied (field or wire names)."""
        data = self.model_dump(by_alias=True)
        fields = type(self).model_fields
        for name, value in changes.items():
            field = fields.get(name)
            data[field.alias if field and field.alias else name] = value
        return type(self).model_validate(data)

    def as_form(self) -> Dict[str, str]:
        """Wire representation. ``None`` and empty strings are not sent."""
        form: Dict[str, str] = {}
        for key, value in self.model_dump(by_alias=True, mode="json").items():
            if value is None or value == "":
                continue
            form[key] = str(value)
        return form


class EntitiesParameters(OperationParameters):
    disambiguate: Optional[int] = _flag(1, "disambiguate", "Disambiguate entities and attach linked data.")
    linked_data: Optional[int] = _flag(1, "linkedData", "Include links to linked-data sources.")
    coreference: Optional[int] = _flag(1, "coreference", "Resolve coreferences such as 'he' or 'she'.")
    quotations: Optional[int] = _flag(0, "quotations", "Extract quotations attributed to entities.")
    sentiment: Optional[int] = _flag(0, "sentiment", "Analyse sentiment for each entity.")
    source_text: Optional[SourceText] = Field(default=SourceText.CLEANED_OR_RAW, alias="sourceText")
    show_source_text: Optional[int] = _flag(0, "showSourceText", "Echo the analysed text back.")
    cquery: Optional[str] = Field(default="", alias="cquery", description="Visual constraints query.")
    xpath: Optional[str] = Field(default="", alias="xpath", description="XPath query selecting the text.")
    max_retrieve: Optional[int] = Field(default=50, ge=1, alias="maxRetrieve")
    base_url: Optional[str] = Field(default="", alias="baseUrl", description="Base URL for relative links in html.")
    knowledge_graph: Optional[int] = _flag(0, "knowledgeGraph", "Include knowledge-graph type hierarchies.")
    structured_entities: Optional[int] = _flag(1, "structuredEntities", "Extract numbers, dates and similar.")


class SentimentParameters(OperationParameters):
    sentiment: Optional[int] = _flag(0, "sentiment", "Request sentiment breakdown.")
    show_source_text: Optional[int] = _flag(0, "showSourceText", "Echo the analysed text back.")
    source_text: Optional[SourceText] = Field(default=SourceText.CLEANED_OR_RAW, alias="sourceText")
    cquery: Optional[str] = Field(default="", alias="cquery")
    xpath: Optional[str] = Field(default="", alias="xpath")
    targets: Optional[str] = Field(
        default="",
        alias="targets",
        description="Pipe-delimited phrases; required for targeted sentiment.",
    )


class KeywordsParameters(OperationParameters):
    sentiment: Optional[int] = _flag(0, "sentiment", "Analyse sentiment for each keyword.")
    source_text: Optional[SourceText] = Field(default=SourceText.CLEANED_OR_RAW, alias="sourceText")
    show_source_text: Optional[int] = _flag(0, "showSourceText", "Echo the analysed text back.")
    cquery: Optional[str] = Field(default="", alias="cquery")
    xpath: Optional[str] = Field(default="", alias="xpath")
    max_retrieve: Optional[int] = Field(default=50, ge=1, alias="maxRetrieve")
    base_url: Optional[str] = Field(default="", alias="baseUrl")
    knowledge_graph: Optional[int] = _flag(0, "knowledgeGraph", "Include knowledge-graph type hierarchies.")
    keyword_extract_mode: Optional[KeywordExtractMode] = Field(
        default=KeywordExtractMode.NORMAL, alias="keywordExtractMode"
    )


class ConceptsParameters(OperationParameters):
    linked_data: Optional[int] = _flag(1, "linkedData", "Include links to linked-data sources.")
    source_text: Optional[SourceText] = Field(default=SourceText.CLEANED_OR_RAW, alias="sourceText")
    show_source_text: Optional[int] = _flag(0, "showSourceText", "Echo the analysed text back.")
    cquery: Optional[str] = Field(default="", alias="cquery")
    xpath: Optional[str] = Field(default="", alias="xpath")
    max_retrieve: Optional[int] = Field(default=50, ge=1, alias="maxRetrieve")
    base_url: Optional[str] = Field(default="", alias="baseUrl")
    knowledge_graph: Optional[int] = _flag(0, "knowledgeGraph", "Include knowledge-graph type hierarchies.")


class RelationsParameters(OperationParameters):
    # entities, keywords and sentiment each cost an extra transaction
    entities: Optional[int] = _flag(0, "entities", "Extract entities inside relation components.")
    keywords: Optional[int] = _flag(0, "keywords", "Extract keywords inside relation components.")
    require_entities: Optional[int] = _flag(0, "requireEntities", "Only return relations containing entities.")
    sentiment_exclude_entities: Optional[int] = _flag(
        1, "sentimentExcludeEntities", "Exclude entity text from sentiment scoring."
    )
    disambiguate: Optional[int] = _flag(1, "disambiguate", "Disambiguate detected entities.")
    linked_data: Optional[int] = _flag(1, "linkedData", "Include links to linked-data sources.")
    coreference: Optional[int] = _flag(1, "coreference", "Resolve coreferences.")
    sentiment: Optional[int] = _flag(1, "sentiment", "Analyse sentiment of subjects and objects.")
    source_text: Optional[SourceText] = Field(default=SourceText.CLEANED_OR_RAW, alias="sourceText")
    show_source_text: Optional[int] = _flag(0, "showSourceText", "Echo the analysed text back.")
    cquery: Optional[str] = Field(default="", alias="cquery")
    xpath: Optional[str] = Field(default="", alias="xpath")
    max_retrieve: Optional[int] = Field(default=50, ge=1, alias="maxRetrieve")
    base_url: Optional[str] = Field(default="", alias="baseUrl")


class TaxonomyParameters(OperationParameters):
    source_text: Optional[SourceText] = Field(default=SourceText.CLEANED_OR_RAW, alias="sourceText")
    cquery: Optional[str] = Field(default="", alias="cquery")
    xpath: Optional[str] = Field(default="", alias="xpath")
    base_url: Optional[str] = Field(default="", alias="baseUrl")


class LanguageParameters(OperationParameters):
    source_text: Optional[SourceText] = Field(default=SourceText.CLEANED_OR_RAW, alias="sourceText")
    cquery: Optional[str] = Field(default="", alias="cquery")
    xpath: Optional[str] = Field(default="", alias="xpath")


class TextParameters(OperationParameters):
    use_metadata: Optional[int] = _flag(1, "useMetadata", "Use title and description metadata.")
    extract_links: Optional[int] = _flag(0, "extractLinks", "Keep hyperlinks in the extracted text.")
    source_text: Optional[SourceText] = Field(default=SourceText.CLEANED_OR_RAW, alias="sourceText")
    cquery: Optional[str] = Field(default="", alias="cquery")
    xpath: Optional[str] = Field(default="", alias="xpath")
