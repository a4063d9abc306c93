"""
Shared building blocks for domain models

The public API speaks camelCase JSON (imageUrl, inStock, shippingAddress);
Python code and database columns use snake_case. CamelModel bridges the two.
"""
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer, StringConstraints
from pydantic.alias_generators import to_camel

# Decimal in Python, float in JSON
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase aliases on the wire"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_dict(self) -> dict:
        """JSON-ready dict with camelCase keys"""
        return self.model_dump(mode="json", by_alias=True)
