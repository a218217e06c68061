"""Source resolution shared by the knowledge-base create and update paths."""

from emailbots.domain.entities.knowledge_base_item import KnowledgeBaseType
from emailbots.domain.exceptions import DomainValidationError
from emailbots.domain.value_objects.knowledge_source import KnowledgeSource


def resolve_source(item_type: KnowledgeBaseType, raw: str) -> str:
    """Normalized source string; raises InvalidUrlError for a bad website."""
    try:
        return KnowledgeSource.for_item(KnowledgeBaseType(item_type).value, raw).value
    except ValueError as e:
        raise DomainValidationError(str(e)) from e
