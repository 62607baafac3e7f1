"""Core package for the improv agenda.

This module exposes the contributor models, the relationship helpers and
the storage layer so that consumers of the package can simply import them
from ``improv_agenda``.
"""

from .core.agenda import public_owned_open_dates
from .core.models import (
    Improvisator,
    ImprovGroup,
    Kind,
    OpenDate,
    Team,
    Troupe,
    User,
    parse_contributor,
)
from .core.relations import RelationError
from .data.store import AgendaStore
from .forms.contributor_edit import ContributorEditForm

__all__ = [
    "AgendaStore",
    "ContributorEditForm",
    "Improvisator",
    "ImprovGroup",
    "Kind",
    "OpenDate",
    "RelationError",
    "Team",
    "Troupe",
    "User",
    "parse_contributor",
    "public_owned_open_dates",
]
