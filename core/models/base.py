"""Shared pydantic configuration for records kept in the key-value store."""

import json
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, PlainSerializer
from pydantic.alias_generators import to_camel

# Money is exact in memory; stored records keep plain JSON numbers.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

ZERO = Decimal("0")


class StoredModel(BaseModel):
    """
    Immutable record serialized with camelCase keys.

    Decoding accepts both camelCase and snake_case keys.
    """

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    def to_json_dict(self) -> dict[str, Any]:
        """JSON-compatible dict in the stored (camelCase) shape."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return json.dumps(self.to_json_dict())

    @classmethod
    def from_json(cls, raw: str):
        """
        Decode one stored JSON string.

        Raises:
            pydantic.ValidationError: If the string is not valid JSON or
                does not describe this record
        """
        return cls.model_validate_json(raw)
