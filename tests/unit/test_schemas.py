import pytest
from pydantic import ValidationError

from app.schemas import (
    AssetCreate,
    AssetUpdate,
    ChangeEvent,
    ContactForm,
    IssueReport,
    IssueUpdate,
    UserCreate,
)


def test_asset_create_at_course():
    asset = AssetCreate(name="  Trike 1 ", course_id="C1")
    assert asset.name == "Trike 1"
    assert asset.asset_type.value == "trike"
    assert asset.status.value == "available"


def test_asset_create_needs_exactly_one_placement():
    with pytest.raises(ValidationError):
        AssetCreate(name="Trike 1")
    with pytest.raises(ValidationError):
        AssetCreate(name="Trike 1", course_id="C1", location="Wangara")


def test_asset_create_rejects_blank_name_and_unknown_type():
    with pytest.raises(ValidationError):
        AssetCreate(name="   ", course_id="C1")
    with pytest.raises(ValidationError):
        AssetCreate(name="Cart", asset_type="golf_cart", course_id="C1")


def test_asset_update_rejects_both_placements():
    with pytest.raises(ValidationError):
        AssetUpdate(course_id="C1", location="Wangara")
    assert AssetUpdate(notes="Serviced").model_dump(exclude_unset=True) == {"notes": "Serviced"}


def test_asset_blank_optional_text_becomes_null():
    asset = AssetCreate(name="Trike 1", course_id="C1", asset_tag="  ", notes="")
    assert asset.asset_tag is None
    assert asset.notes is None
    assert AssetUpdate(asset_tag=" ", notes=" Serviced ").model_dump(exclude_unset=True) == {
        "asset_tag": None,
        "notes": "Serviced",
    }


def test_issue_report_valid():
    report = IssueReport(asset_id="A1", issue_type="brakes", severity="medium", description="Spongy brakes")
    assert report.issue_type.value == "brakes"
    assert report.severity.value == "medium"


def test_issue_report_requires_description():
    with pytest.raises(ValidationError) as exc:
        IssueReport(asset_id="A1", issue_type="brakes", severity="medium", description="   ")
    assert exc.value.errors()[0]["loc"] == ("description",)


def test_issue_report_rejects_unknown_severity():
    with pytest.raises(ValidationError):
        IssueReport(asset_id="A1", issue_type="brakes", severity="critical", description="x")


def test_issue_update_costs_non_negative():
    assert IssueUpdate(cost_estimate=120.5).cost_estimate == 120.5
    with pytest.raises(ValidationError):
        IssueUpdate(cost_final=-1)


def test_issue_update_description_not_nullable():
    with pytest.raises(ValidationError):
        IssueUpdate(description=None)


def _contact(**overrides):
    data = {
        "name": "Sam Player",
        "email": "sam@golfclub.com.au",
        "inquiry_type": "quote",
        "message": "Interested in six trikes for our course.",
    }
    data.update(overrides)
    return data


def test_contact_form_valid():
    form = ContactForm(**_contact(phone="  "))
    assert form.phone is None
    assert form.inquiry_type.value == "quote"


@pytest.mark.parametrize("overrides", [
    {"name": "S"},
    {"name": "x" * 101},
    {"email": "not-an-email"},
    {"inquiry_type": "complaint"},
    {"message": "Too short"},
    {"message": "x" * 2001},
])
def test_contact_form_rejects(overrides):
    with pytest.raises(ValidationError):
        ContactForm(**_contact(**overrides))


def test_user_create_password_minimum():
    with pytest.raises(ValidationError):
        UserCreate(email="a@chariots.com.au", password="12345")
    assert UserCreate(email="a@chariots.com.au", password="123456").role.value == "course_user"


def test_change_event_defaults():
    event = ChangeEvent(event="invalidate", keys=["assets"])
    assert event.course_id is None
    assert event.data == {}
