"""
Shared configuration for canonical value objects.
"""

from typing import Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Number = Union[int, float]


class CanonicalModel(BaseModel):
    """Immutable value object serialized with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_dict(self) -> dict:
        """JSON-compatible outbound shape."""
        return self.model_dump(by_alias=True, mode="json")
