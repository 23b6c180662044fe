"""Shared pydantic configuration for persisted documents."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def _to_local_naive(value: datetime) -> datetime:
    """Convert aware timestamps to naive local time."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


LocalDatetime = Annotated[datetime, AfterValidator(_to_local_naive)]


class DocumentModel(BaseModel):
    """Base for models stored as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_document(self) -> dict[str, Any]:
        """Dump as a JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
