"""Data models for contributors, open dates and the users administering them.

The models are implemented using :mod:`pydantic` so that they provide
runtime validation and convenient serialisation to and from dictionaries.
Relations between models are stored as identifiers only; resolving them to
objects is the job of :class:`~improv_agenda.data.store.AgendaStore`, and
keeping both sides of a relation consistent is the job of
:mod:`improv_agenda.core.relations`.

A contributor is one of four variants sharing a common set of attributes.
The variants form a tagged union discriminated on ``kind``, whose values are
the short codes used when the contributors are persisted.
"""

from __future__ import annotations

import datetime
import uuid
from datetime import UTC
from typing import Annotated, Any, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Kind:
    """Discriminator codes of the contributor variants."""

    TROUPE = "TRO"
    TEAM = "TEA"
    IMPROVISATOR = "IMP"
    IMPROV_GROUP = "Grou"


TYPE_TROUPE = "troupe"
TYPE_TEAM = "team"
TYPE_IMPROVISATOR = "improvisator"
TYPE_IMPROV_GROUP = "improv_group"


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime.datetime:
    return datetime.datetime.now(tz=UTC)


class User(BaseModel):
    """An account that may create and administer contributors.

    ``admin_of_contributors`` and ``super_admin_of_contributors`` are the
    inverse sides of :attr:`ContributorBase.admins` and
    :attr:`ContributorBase.super_admins`.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=_new_id, frozen=True)
    username: str = Field(min_length=1, max_length=180)
    admin_of_contributors: set[str] = Field(default_factory=set)
    super_admin_of_contributors: set[str] = Field(default_factory=set)


class OpenDate(BaseModel):
    """A calendar entry owned by one contributor.

    Attributes
    ----------
    owner_id:
        Identifier of the owning contributor, ``None`` while unowned.
    invited_contributors:
        Identifiers of the contributors invited to the date, in invitation
        order and without duplicates.
    is_public:
        Only public dates are listed on a contributor's public agenda.

    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=_new_id, frozen=True)
    title: str = Field(default="", max_length=255)
    date: datetime.datetime | None = None
    is_public: bool = False
    owner_id: str | None = None
    invited_contributors: list[str] = Field(default_factory=list)


class ContributorBase(BaseModel):
    """Attributes shared by every kind of event contributor."""

    model_config = ConfigDict(validate_assignment=True)

    type_name: ClassVar[str]

    # narrowed to a single code by each variant
    kind: str
    id: str = Field(default_factory=_new_id, frozen=True)
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=255)
    short_name: str = Field(min_length=1, max_length=70)
    # slug of ``short_name``, unique across all contributors
    identifier: str | None = Field(default=None, max_length=100)
    location: str = Field(default="", max_length=100)
    banner_pic_url: str | None = Field(default=None, max_length=255)
    profile_pic_url: str | None = Field(default=None, max_length=255)
    created_by: str
    super_admins: set[str] = Field(default_factory=set)
    admins: set[str] = Field(default_factory=set)
    owned_open_dates: list[str] = Field(default_factory=list)
    invited_to_open_dates: list[str] = Field(default_factory=list)
    created_at: datetime.datetime = Field(default_factory=_now)
    updated_at: datetime.datetime = Field(default_factory=_now)

    @property
    def is_improv_group(self) -> bool:
        return False

    def touch(self) -> None:
        """Record a modification."""
        self.updated_at = _now()


class Troupe(ContributorBase):
    """A theatre company; its ``teams`` are the Team contributors it fields."""

    type_name: ClassVar[str] = TYPE_TROUPE

    kind: Literal["TRO"] = "TRO"
    teams: list[str] = Field(default_factory=list)


class Team(ContributorBase):
    type_name: ClassVar[str] = TYPE_TEAM

    kind: Literal["TEA"] = "TEA"
    troupe_id: str | None = None


class Improvisator(ContributorBase):
    type_name: ClassVar[str] = TYPE_IMPROVISATOR

    kind: Literal["IMP"] = "IMP"


class ImprovGroup(ContributorBase):
    type_name: ClassVar[str] = TYPE_IMPROV_GROUP

    kind: Literal["Grou"] = "Grou"

    @property
    def is_improv_group(self) -> bool:
        return True


Contributor = Annotated[
    Union[Troupe, Team, Improvisator, ImprovGroup],
    Field(discriminator="kind"),
]

CONTRIBUTOR_CLASSES: dict[str, type[ContributorBase]] = {
    Kind.TROUPE: Troupe,
    Kind.TEAM: Team,
    Kind.IMPROVISATOR: Improvisator,
    Kind.IMPROV_GROUP: ImprovGroup,
}

_contributor_adapter: TypeAdapter[Any] = TypeAdapter(Contributor)


def parse_contributor(data: dict[str, Any]) -> ContributorBase:
    """Validate ``data`` into the contributor variant named by its ``kind``."""
    return _contributor_adapter.validate_python(data)
