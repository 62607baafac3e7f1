"""Persistence layer for users, contributors and open dates."""

from __future__ import annotations

import datetime
import json
import logging
import os
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from ..core import relations
from ..core.agenda import public_owned_open_dates
from ..core.models import (
    CONTRIBUTOR_CLASSES,
    ContributorBase,
    Kind,
    OpenDate,
    Team,
    User,
    parse_contributor,
)
from ..core.relations import RelationError
from ..core.slug import unique_slug
from ..forms.contributor_edit import ContributorEditForm

log = logging.getLogger("improv_agenda.store")

NOT_FOUND_CONTRIBUTOR = "Contributor not found."
NOT_FOUND_OPEN_DATE = "Open date not found."
NOT_FOUND_USER = "User not found."

# relations and identity are only set through ``core.relations`` and defaults
CREATION_FIELDS = frozenset(
    {"description", "location", "banner_pic_url", "profile_pic_url"}
)


class AgendaStore:
    """Simple JSON based repository.

    Every object is kept in memory and the whole state is written back to
    ``path`` after each successful mutation.
    """

    def __init__(self, path: str = "improv_agenda.json") -> None:
        self.path = path
        self.users: dict[str, User] = {}
        self.contributors: dict[str, ContributorBase] = {}
        self.open_dates: dict[str, OpenDate] = {}
        self._load()

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------
    def _load(self) -> None:
        """Load store contents from ``self.path`` if it exists."""
        if not os.path.exists(self.path):
            return

        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)

        self.users = {
            item["id"]: User.model_validate(item) for item in data.get("users", [])
        }
        self.contributors = {
            item["id"]: parse_contributor(item)
            for item in data.get("contributors", [])
        }
        self.open_dates = {
            item["id"]: OpenDate.model_validate(item)
            for item in data.get("open_dates", [])
        }
        log.debug(
            "Loaded %d users, %d contributors and %d open dates from %s",
            len(self.users),
            len(self.contributors),
            len(self.open_dates),
            self.path,
        )

    def _to_dict(self) -> dict:
        """Serialise the current state to a JSON-serialisable dict."""
        return {
            "users": [u.model_dump(mode="json") for u in self.users.values()],
            "contributors": [
                c.model_dump(mode="json") for c in self.contributors.values()
            ],
            "open_dates": [
                o.model_dump(mode="json") for o in self.open_dates.values()
            ],
        }

    def save(self) -> None:
        """Persist the current state atomically."""
        tmp = self.path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(self._to_dict(), f, indent=2, ensure_ascii=False)
        os.replace(tmp, self.path)

    def _commit(self, *touched: ContributorBase) -> None:
        for contributor in touched:
            contributor.touch()
        self.save()

    def _taken_identifiers(self, exclude: str | None = None) -> set[str]:
        return {
            c.identifier
            for c in self.contributors.values()
            if c.identifier and c.id != exclude
        }

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def create_user(self, username: str) -> User:
        user = User(username=username)
        self.users[user.id] = user
        self.save()
        log.info("Created user %s (%s)", user.username, user.id)
        return user

    def get_user(self, user_id: str) -> User | None:
        return self.users.get(user_id)

    # ------------------------------------------------------------------
    # Contributors
    # ------------------------------------------------------------------
    def create_contributor(
        self,
        kind: str,
        name: str,
        short_name: str,
        created_by: str,
        **fields: Any,
    ) -> ContributorBase | None:
        """Create a contributor of the given ``kind`` code.

        Only the descriptive ``CREATION_FIELDS`` may be passed as ``fields``.
        Returns ``None`` when the kind or the creating user is unknown, or
        when any other field is given.  Invalid field values raise
        :class:`pydantic.ValidationError`.
        """
        cls = CONTRIBUTOR_CLASSES.get(kind)
        if cls is None:
            log.warning("Unknown contributor kind %r", kind)
            return None
        rejected = sorted(set(fields) - CREATION_FIELDS)
        if rejected:
            log.warning("Refused fields on contributor creation: %s", rejected)
            return None
        if created_by not in self.users:
            log.warning("Unknown creating user %s", created_by)
            return None

        contributor = cls(
            name=name, short_name=short_name, created_by=created_by, **fields
        )
        contributor.identifier = unique_slug(short_name, self._taken_identifiers())
        self.contributors[contributor.id] = contributor
        self.save()
        log.info(
            "Created %s %s (%s)",
            contributor.type_name,
            contributor.identifier,
            contributor.id,
        )
        return contributor

    def get_contributor(self, contributor_id: str) -> ContributorBase | None:
        return self.contributors.get(contributor_id)

    def get_contributor_by_identifier(self, identifier: str) -> ContributorBase | None:
        """Look up a contributor by its slug identifier."""
        return next(
            (c for c in self.contributors.values() if c.identifier == identifier),
            None,
        )

    def list_contributors(self, kind: str | None = None) -> list[ContributorBase]:
        return [
            c for c in self.contributors.values() if kind is None or c.kind == kind
        ]

    def set_short_name(self, contributor_id: str, short_name: str) -> str | None:
        contributor = self.contributors.get(contributor_id)
        if not contributor:
            return NOT_FOUND_CONTRIBUTOR
        contributor.short_name = short_name
        self._refresh_identifier(contributor)
        self._commit(contributor)
        return None

    def _refresh_identifier(self, contributor: ContributorBase) -> None:
        contributor.identifier = unique_slug(
            contributor.short_name, self._taken_identifiers(exclude=contributor.id)
        )

    def edit_contributor(
        self, contributor_id: str, data: Mapping[str, Any]
    ) -> str | None:
        """Apply submitted edit-form ``data`` to a contributor."""
        contributor = self.contributors.get(contributor_id)
        if not contributor:
            return NOT_FOUND_CONTRIBUTOR

        try:
            form = ContributorEditForm.submit(data)
        except ValidationError as exc:
            message = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            )
            log.warning("Rejected edit of %s: %s", contributor.id, message)
            return message

        if form.bind(contributor):
            self._refresh_identifier(contributor)
        self._commit(contributor)
        return None

    def delete_contributor(self, contributor_id: str) -> str | None:
        """Remove a contributor after detaching it from every relation."""
        contributor = self.contributors.get(contributor_id)
        if not contributor:
            return NOT_FOUND_CONTRIBUTOR

        for open_date_id in list(contributor.owned_open_dates):
            open_date = self.open_dates.get(open_date_id)
            if open_date is not None:
                relations.remove_owned_open_date(contributor, open_date)
        for open_date_id in list(contributor.invited_to_open_dates):
            open_date = self.open_dates.get(open_date_id)
            if open_date is not None:
                relations.remove_invited_to_open_date(contributor, open_date)
        for user_id in list(contributor.admins):
            if user_id in self.users:
                relations.remove_admin(contributor, self.users[user_id])
        for user_id in list(contributor.super_admins):
            if user_id in self.users:
                relations.remove_super_admin(contributor, self.users[user_id])

        affected: list[ContributorBase] = []
        match contributor.kind:
            case Kind.TROUPE:
                for team in self.teams_of(contributor.id):
                    relations.remove_team(contributor, team)
                    affected.append(team)
            case Kind.TEAM if contributor.troupe_id in self.contributors:
                troupe = self.contributors[contributor.troupe_id]
                relations.remove_team(troupe, contributor)
                affected.append(troupe)
            case _:
                pass

        del self.contributors[contributor.id]
        self._commit(*affected)
        log.info("Deleted contributor %s", contributor.identifier)
        return None

    # ------------------------------------------------------------------
    # Open dates
    # ------------------------------------------------------------------
    def create_open_date(
        self,
        title: str,
        owner_id: str,
        is_public: bool = False,
        date: datetime.datetime | None = None,
    ) -> OpenDate | None:
        owner = self.contributors.get(owner_id)
        if not owner:
            return None
        open_date = OpenDate(title=title, is_public=is_public, date=date)
        relations.add_owned_open_date(owner, open_date)
        self.open_dates[open_date.id] = open_date
        self._commit(owner)
        log.info("Created open date %s for %s", open_date.id, owner.identifier)
        return open_date

    def get_open_date(self, open_date_id: str) -> OpenDate | None:
        return self.open_dates.get(open_date_id)

    def set_open_date_visibility(self, open_date_id: str, is_public: bool) -> str | None:
        open_date = self.open_dates.get(open_date_id)
        if not open_date:
            return NOT_FOUND_OPEN_DATE
        open_date.is_public = is_public
        self.save()
        return None

    def transfer_open_date(self, open_date_id: str, new_owner_id: str) -> str | None:
        """Hand an open date over to another contributor."""
        open_date = self.open_dates.get(open_date_id)
        if not open_date:
            return NOT_FOUND_OPEN_DATE
        new_owner = self.contributors.get(new_owner_id)
        if not new_owner:
            return NOT_FOUND_CONTRIBUTOR

        previous = None
        if open_date.owner_id is not None:
            previous = self.contributors.get(open_date.owner_id)
            if previous is None:
                # owner no longer exists
                open_date.owner_id = None

        relations.add_owned_open_date(new_owner, open_date, previous_owner=previous)
        self._commit(*(c for c in (new_owner, previous) if c is not None))
        return None

    def release_open_date(self, open_date_id: str) -> str | None:
        open_date = self.open_dates.get(open_date_id)
        if not open_date:
            return NOT_FOUND_OPEN_DATE
        owner = self.contributors.get(open_date.owner_id or "")
        if owner is None:
            return "This open date has no owner."
        relations.remove_owned_open_date(owner, open_date)
        self._commit(owner)
        return None

    def invite(self, open_date_id: str, contributor_id: str) -> str | None:
        open_date = self.open_dates.get(open_date_id)
        if not open_date:
            return NOT_FOUND_OPEN_DATE
        contributor = self.contributors.get(contributor_id)
        if not contributor:
            return NOT_FOUND_CONTRIBUTOR
        relations.add_invited_to_open_date(contributor, open_date)
        self._commit(contributor)
        return None

    def uninvite(self, open_date_id: str, contributor_id: str) -> str | None:
        open_date = self.open_dates.get(open_date_id)
        if not open_date:
            return NOT_FOUND_OPEN_DATE
        contributor = self.contributors.get(contributor_id)
        if not contributor:
            return NOT_FOUND_CONTRIBUTOR
        relations.remove_invited_to_open_date(contributor, open_date)
        self._commit(contributor)
        return None

    # ------------------------------------------------------------------
    # Administrators
    # ------------------------------------------------------------------
    def _update_admins(
        self,
        action: Callable[[ContributorBase, User], ContributorBase],
        contributor_id: str,
        user_id: str,
    ) -> str | None:
        contributor = self.contributors.get(contributor_id)
        if not contributor:
            return NOT_FOUND_CONTRIBUTOR
        user = self.users.get(user_id)
        if not user:
            return NOT_FOUND_USER
        action(contributor, user)
        self._commit(contributor)
        return None

    def add_admin(self, contributor_id: str, user_id: str) -> str | None:
        return self._update_admins(relations.add_admin, contributor_id, user_id)

    def remove_admin(self, contributor_id: str, user_id: str) -> str | None:
        return self._update_admins(relations.remove_admin, contributor_id, user_id)

    def add_super_admin(self, contributor_id: str, user_id: str) -> str | None:
        return self._update_admins(relations.add_super_admin, contributor_id, user_id)

    def remove_super_admin(self, contributor_id: str, user_id: str) -> str | None:
        return self._update_admins(
            relations.remove_super_admin, contributor_id, user_id
        )

    # ------------------------------------------------------------------
    # Troupes and teams
    # ------------------------------------------------------------------
    def add_team(self, troupe_id: str, team_id: str) -> str | None:
        """Attach a team to a troupe, moving it out of its previous troupe."""
        troupe = self.contributors.get(troupe_id)
        team = self.contributors.get(team_id)
        if not troupe or not team:
            return NOT_FOUND_CONTRIBUTOR

        previous = None
        kinds_match = troupe.kind == Kind.TROUPE and team.kind == Kind.TEAM
        if kinds_match and team.troupe_id is not None:
            previous = self.contributors.get(team.troupe_id)
            if previous is None or previous.kind != Kind.TROUPE:
                # stale reference to a troupe that no longer exists
                previous = None
                team.troupe_id = None

        try:
            relations.add_team(troupe, team, previous_troupe=previous)
        except RelationError as exc:
            log.warning("Rejected team change: %s", exc)
            return str(exc)
        self._commit(*(c for c in (troupe, team, previous) if c is not None))
        return None

    def remove_team(self, troupe_id: str, team_id: str) -> str | None:
        troupe = self.contributors.get(troupe_id)
        team = self.contributors.get(team_id)
        if not troupe or not team:
            return NOT_FOUND_CONTRIBUTOR
        try:
            relations.remove_team(troupe, team)
        except RelationError as exc:
            log.warning("Rejected team change: %s", exc)
            return str(exc)
        self._commit(troupe, team)
        return None

    def teams_of(self, troupe_id: str) -> list[Team]:
        """Return the member teams of a troupe; empty for any other kind."""
        troupe = self.contributors.get(troupe_id)
        if troupe is None or troupe.kind != Kind.TROUPE:
            return []
        return [self.contributors[t] for t in troupe.teams if t in self.contributors]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def public_owned_open_dates(self, contributor_id: str) -> list[OpenDate]:
        """Public agenda of a contributor, including its teams for a troupe."""
        contributor = self.contributors.get(contributor_id)
        if contributor is None:
            return []
        return public_owned_open_dates(
            contributor, self.open_dates, self.teams_of(contributor.id)
        )
