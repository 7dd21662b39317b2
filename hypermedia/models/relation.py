from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer


# -----------------------------------------------------------------------------
# Pydantic Models
# -----------------------------------------------------------------------------
class LinkRelation(BaseModel):
    """
    Relation type of a link (RFC 8288).

    Relations compare case-insensitively; the value keeps the casing it was
    created with and serializes as a plain string.
    """
    value: str = Field(
        ...,
        min_length=1,
        description="Relation name or extension relation URI",
        examples=["self", "next", "https://example.com/rels/orders"]
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("value", mode="before")
    @classmethod
    def strip_value(cls, v):
        return v.strip() if isinstance(v, str) else v

    @classmethod
    def of(cls, value: str | LinkRelation) -> LinkRelation:
        if isinstance(value, LinkRelation):
            return value
        return cls(value=value)

    @property
    def normalized(self) -> str:
        return self.value.lower()

    @model_serializer
    def serialize(self) -> str:
        return self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinkRelation):
            return NotImplemented
        return self.normalized == other.normalized

    def __hash__(self) -> int:
        return hash(self.normalized)

    def __str__(self) -> str:
        return self.value
