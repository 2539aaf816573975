from types import SimpleNamespace

from models.profile_change_request import ProfileChangeRequest
from profile_change.services import ProposedChanges, build_student_patch, compute_delta, summarize

CURRENT = SimpleNamespace(parent_email="a@x.com", parent_phone="0700")


def test_unchanged_email_is_not_a_change():
    delta = compute_delta(CURRENT, ProposedChanges.from_form({"parent_email": "a@x.com"}))
    assert delta.is_empty()


def test_form_defaults_equal_to_current_values_are_dropped():
    form = {"parent_name": "", "parent_email": "a@x.com", "parent_phone": "0700", "new_password": ""}
    assert compute_delta(CURRENT, ProposedChanges.from_form(form)).is_empty()


def test_changed_email_is_kept_and_rest_null():
    delta = compute_delta(CURRENT, ProposedChanges.from_form({"parent_email": "new@x.com", "parent_phone": "0700"}))
    assert delta.as_dict() == {
        "parent_name": None,
        "parent_email": "new@x.com",
        "parent_phone": None,
        "new_password": None,
    }


def test_whitespace_only_values_mean_no_change():
    delta = compute_delta(CURRENT, ProposedChanges.from_form({"parent_name": "   ", "parent_phone": " 0700 "}))
    assert delta.is_empty()


def test_name_and_password_have_no_baseline():
    delta = compute_delta(CURRENT, ProposedChanges.from_form({"parent_name": "Jane", "new_password": "hunter22"}))
    assert delta.parent_name == "Jane"
    assert delta.new_password == "hunter22"


def test_student_patch_maps_password_and_skips_name():
    req = ProfileChangeRequest(parent_name="Jane", parent_phone="0711", new_password="hunter22")
    assert build_student_patch(req) == {"parent_phone": "0711", "parent_password": "hunter22"}


def test_summarize_counts_per_status():
    rows = [{"status": "pending"}, {"status": "approved"}, {"status": "approved"}, {"status": "rejected"}]
    assert summarize(rows) == {"pending": 1, "approved": 2, "rejected": 1, "total": 4}
