from .contributor_edit import EDITABLE_FIELDS, SUBMIT_LABEL, ContributorEditForm

__all__ = ["ContributorEditForm", "EDITABLE_FIELDS", "SUBMIT_LABEL"]
