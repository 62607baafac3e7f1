"""Edit form for the descriptive fields of a contributor.

The form only exposes the fields a contributor's administrators may edit
freely.  Ownership, administrator lists, the derived ``identifier`` and the
variant specific relations never appear here; keys for them in submitted
data are ignored.  Submitted data may use the camelCase names an HTML form
posts (``shortName``, ``bannerPicUrl``, ...) or the attribute names.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..core.models import ContributorBase

EDITABLE_FIELDS = (
    "name",
    "description",
    "short_name",
    "location",
    "banner_pic_url",
    "profile_pic_url",
)
SUBMIT_LABEL = "Save"


class ContributorEditForm(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=255)
    short_name: str = Field(min_length=1, max_length=70)
    location: str = Field(default="", max_length=100)
    banner_pic_url: str | None = Field(default=None, max_length=255)
    profile_pic_url: str | None = Field(default=None, max_length=255)

    @field_validator("description", "location", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("banner_pic_url", "profile_pic_url", mode="before")
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_contributor(cls, contributor: ContributorBase) -> ContributorEditForm:
        """Prefill the form with the current values of ``contributor``."""
        return cls(**{name: getattr(contributor, name) for name in EDITABLE_FIELDS})

    @classmethod
    def submit(cls, data: Mapping[str, Any]) -> ContributorEditForm:
        """Validate submitted ``data``; raises :class:`pydantic.ValidationError`."""
        return cls.model_validate(dict(data))

    def bind(self, contributor: ContributorBase) -> bool:
        """Copy the form values onto ``contributor``.

        Returns ``True`` when the short name changed, in which case the
        contributor's identifier has to be regenerated.
        """
        short_name_changed = contributor.short_name != self.short_name
        for name in EDITABLE_FIELDS:
            setattr(contributor, name, getattr(self, name))
        return short_name_changed
