"""Public agenda of a contributor."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .models import ContributorBase, Kind, OpenDate, Team


def public_owned_open_dates(
    contributor: ContributorBase,
    open_dates: Mapping[str, OpenDate],
    teams: Iterable[Team] = (),
) -> list[OpenDate]:
    """Return the public open dates owned by ``contributor``.

    For a troupe the public dates owned directly by each of its ``teams`` are
    included as well.  Only one level is followed: the teams' own relations
    are never traversed, and ``teams`` is ignored for every other kind.

    Dates are returned in the order they are found and each at most once.
    Identifiers missing from ``open_dates`` are skipped.
    """
    result: list[OpenDate] = []
    seen: set[str] = set()

    def collect(owner: ContributorBase) -> None:
        for open_date_id in owner.owned_open_dates:
            open_date = open_dates.get(open_date_id)
            if open_date is None or not open_date.is_public:
                continue
            if open_date.id in seen:
                continue
            seen.add(open_date.id)
            result.append(open_date)

    collect(contributor)

    match contributor.kind:
        case Kind.TROUPE:
            for team in teams:
                collect(team)
        case _:
            pass

    return result
