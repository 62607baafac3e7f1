"""Tests for the contributor edit form."""

import pytest
from pydantic import ValidationError

from improv_agenda.core.models import Troupe
from improv_agenda.forms import EDITABLE_FIELDS, SUBMIT_LABEL, ContributorEditForm


def make_troupe() -> Troupe:
    return Troupe(
        name="Les Fous",
        short_name="fous",
        created_by="u1",
        identifier="fous",
        admins={"u2"},
    )


def test_form_lists_editable_fields() -> None:
    assert EDITABLE_FIELDS == (
        "name",
        "description",
        "short_name",
        "location",
        "banner_pic_url",
        "profile_pic_url",
    )
    assert SUBMIT_LABEL == "Save"


def test_submit_accepts_html_field_names() -> None:
    form = ContributorEditForm.submit(
        {
            "name": " Les Fous Rires ",
            "shortName": "fous-rires",
            "location": "Lyon",
            "bannerPicUrl": "",
            "profilePicUrl": "https://example.org/p.png",
        }
    )
    assert form.name == "Les Fous Rires"
    assert form.short_name == "fous-rires"
    assert form.description == ""
    assert form.banner_pic_url is None
    assert form.profile_pic_url == "https://example.org/p.png"


def test_submit_ignores_administrative_fields() -> None:
    form = ContributorEditForm.submit(
        {
            "name": "A",
            "shortName": "a",
            "createdBy": "intruder",
            "admins": ["intruder"],
            "identifier": "hijacked",
        }
    )
    assert set(form.model_dump()) == set(EDITABLE_FIELDS)


@pytest.mark.parametrize(
    "data",
    [
        {"shortName": "a"},
        {"name": "", "shortName": "a"},
        {"name": "A", "shortName": "a" * 71},
        {"name": "A", "shortName": "a", "description": "d" * 256},
    ],
)
def test_submit_rejects_invalid_data(data) -> None:
    with pytest.raises(ValidationError):
        ContributorEditForm.submit(data)


def test_from_contributor_prefills() -> None:
    troupe = make_troupe()
    form = ContributorEditForm.from_contributor(troupe)
    assert form.name == "Les Fous"
    assert form.short_name == "fous"
    assert form.banner_pic_url is None


def test_bind_updates_only_editable_fields() -> None:
    troupe = make_troupe()
    form = ContributorEditForm.submit(
        {"name": "Les Fous", "shortName": "fous", "location": "Lyon"}
    )

    assert form.bind(troupe) is False
    assert troupe.location == "Lyon"
    assert troupe.identifier == "fous"
    assert troupe.admins == {"u2"}
    assert troupe.created_by == "u1"


def test_bind_reports_short_name_change() -> None:
    troupe = make_troupe()
    form = ContributorEditForm.submit({"name": "Les Fous", "shortName": "folie"})
    assert form.bind(troupe) is True
    assert troupe.short_name == "folie"
