"""Mutations of the relationships a contributor takes part in.

Every relation in :mod:`improv_agenda.core.models` is stored on both of its
sides.  The functions below are the only code that changes those fields and
each one updates both sides within the same call.  Memberships behave like
sets: adding a present element or removing an absent one changes nothing.

Nothing here is thread-safe; callers work on one set of objects at a time.
"""

from __future__ import annotations

import logging

from .models import ContributorBase, Kind, OpenDate, Team, Troupe, User

log = logging.getLogger("improv_agenda.relations")


class RelationError(ValueError):
    """Raised when a mutation would break a relationship invariant."""


def _append(items: list[str], value: str) -> bool:
    if value in items:
        return False
    items.append(value)
    return True


def _discard(items: list[str], value: str) -> bool:
    if value not in items:
        return False
    items.remove(value)
    return True


# ----------------------------------------------------------------------
# Owned open dates
# ----------------------------------------------------------------------
def add_owned_open_date(
    contributor: ContributorBase,
    open_date: OpenDate,
    previous_owner: ContributorBase | None = None,
) -> ContributorBase:
    """Make ``contributor`` the owner of ``open_date``.

    An open date has a single owner.  When it already belongs to another
    contributor, that contributor has to be given as ``previous_owner`` so
    that it loses the date in the same step.
    """
    current = open_date.owner_id
    if current is not None and current != contributor.id:
        if previous_owner is None or previous_owner.id != current:
            raise RelationError(
                f"Open date {open_date.id} is owned by {current}; "
                "its current owner must be released first."
            )
        _discard(previous_owner.owned_open_dates, open_date.id)
        log.debug("Open date %s released by %s", open_date.id, current)

    if _append(contributor.owned_open_dates, open_date.id):
        log.debug("Open date %s now owned by %s", open_date.id, contributor.id)
    open_date.owner_id = contributor.id
    return contributor


def remove_owned_open_date(
    contributor: ContributorBase, open_date: OpenDate
) -> ContributorBase:
    if _discard(contributor.owned_open_dates, open_date.id):
        # set the owning side to None unless it already changed
        if open_date.owner_id == contributor.id:
            open_date.owner_id = None
        log.debug("Open date %s released by %s", open_date.id, contributor.id)
    return contributor


# ----------------------------------------------------------------------
# Invitations
# ----------------------------------------------------------------------
def add_invited_to_open_date(
    contributor: ContributorBase, open_date: OpenDate
) -> ContributorBase:
    added = _append(contributor.invited_to_open_dates, open_date.id)
    added |= _append(open_date.invited_contributors, contributor.id)
    if added:
        log.debug("%s invited to open date %s", contributor.id, open_date.id)
    return contributor


def remove_invited_to_open_date(
    contributor: ContributorBase, open_date: OpenDate
) -> ContributorBase:
    removed = _discard(contributor.invited_to_open_dates, open_date.id)
    removed |= _discard(open_date.invited_contributors, contributor.id)
    if removed:
        log.debug("%s uninvited from open date %s", contributor.id, open_date.id)
    return contributor


# ----------------------------------------------------------------------
# Administrators
# ----------------------------------------------------------------------
def add_admin(contributor: ContributorBase, user: User) -> ContributorBase:
    contributor.admins.add(user.id)
    user.admin_of_contributors.add(contributor.id)
    return contributor


def remove_admin(contributor: ContributorBase, user: User) -> ContributorBase:
    contributor.admins.discard(user.id)
    user.admin_of_contributors.discard(contributor.id)
    return contributor


def add_super_admin(contributor: ContributorBase, user: User) -> ContributorBase:
    contributor.super_admins.add(user.id)
    user.super_admin_of_contributors.add(contributor.id)
    return contributor


def remove_super_admin(contributor: ContributorBase, user: User) -> ContributorBase:
    contributor.super_admins.discard(user.id)
    user.super_admin_of_contributors.discard(contributor.id)
    return contributor


# ----------------------------------------------------------------------
# Troupe membership
# ----------------------------------------------------------------------
def _check_membership_kinds(troupe: ContributorBase, team: ContributorBase) -> None:
    if troupe.kind != Kind.TROUPE:
        raise RelationError(f"{troupe.name} is not a troupe.")
    if team.kind != Kind.TEAM:
        raise RelationError(f"{team.name} is not a team.")


def add_team(
    troupe: Troupe, team: Team, previous_troupe: Troupe | None = None
) -> Troupe:
    """Attach ``team`` to ``troupe``; a team belongs to one troupe at a time."""
    _check_membership_kinds(troupe, team)
    current = team.troupe_id
    if current is not None and current != troupe.id:
        if previous_troupe is None or previous_troupe.id != current:
            raise RelationError(
                f"Team {team.name} already belongs to troupe {current}."
            )
        _discard(previous_troupe.teams, team.id)

    if _append(troupe.teams, team.id):
        log.debug("Team %s joined troupe %s", team.id, troupe.id)
    team.troupe_id = troupe.id
    return troupe


def remove_team(troupe: Troupe, team: Team) -> Troupe:
    _check_membership_kinds(troupe, team)
    if _discard(troupe.teams, team.id):
        if team.troupe_id == troupe.id:
            team.troupe_id = None
        log.debug("Team %s left troupe %s", team.id, troupe.id)
    return troupe
