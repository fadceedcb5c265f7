"""
Shared schema pieces: camelCase wire format and the optional date window.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DateRange(BaseModel):
    """Inclusive ``[from, to]`` window, either bound optional (ISO YYYY-MM-DD)."""
    model_config = ConfigDict(populate_by_name=True)

    date_from: Optional[str] = Field(None, alias="from")
    date_to: Optional[str] = Field(None, alias="to")

    @property
    def is_empty(self) -> bool:
        return not self.date_from and not self.date_to
