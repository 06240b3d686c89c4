"""Issue reporting and lifecycle through the HTTP API."""

from __future__ import annotations

import io

import pytest
from PIL import Image

from app.services import issue_workflow
from app.services.events import change_hub


def _form(asset_id, severity="low", issue_type="tyres", description="Front tyre is flat"):
    return {
        "asset_id": asset_id,
        "severity": severity,
        "issue_type": issue_type,
        "description": description,
    }


def _jpeg():
    buf = io.BytesIO()
    Image.new("RGB", (64, 48), color=(200, 30, 30)).save(buf, format="JPEG")
    return buf.getvalue()


async def test_low_severity_report_keeps_asset_available(world, admin_client):
    a = world.ids["asset_a"]
    resp = await admin_client.post("/api/issues", data=_form(a, "low", "tyres"))
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "reported"
    assert body["resolved_at"] is None
    assert body["course_id"] == world.ids["course_x"]
    assert await world.asset_status(a) == "available"


async def test_high_severity_report_takes_asset_out_of_service(world, admin_client):
    a = world.ids["asset_a"]
    resp = await admin_client.post("/api/issues", data=_form(a, "high", "damage"))
    assert resp.status_code == 201
    assert resp.json()["asset_status"] == "out_of_service"
    assert await world.asset_status(a) == "out_of_service"


async def test_breakdown_report_takes_asset_out_of_service(world, user_client):
    a = world.ids["asset_a"]
    resp = await user_client.post("/api/issues", data=_form(a, "medium", "breakdown"))
    assert resp.status_code == 201
    assert await world.asset_status(a) == "out_of_service"


async def test_resolving_sets_resolved_at_and_frees_asset(world, admin_client):
    b = world.ids["asset_b"]
    created = (await admin_client.post("/api/issues", data=_form(b, "high", "damage"))).json()

    resp = await admin_client.put(f"/api/issues/{created['id']}/status", json={"status": "resolved"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "resolved"
    assert body["resolved_at"] is not None
    assert await world.asset_status(b) == "available"


async def test_non_resolved_statuses_keep_resolved_at_null(world, admin_client):
    a = world.ids["asset_a"]
    created = (await admin_client.post("/api/issues", data=_form(a))).json()
    for status in ("acknowledged", "in_repair", "reported"):
        resp = await admin_client.put(f"/api/issues/{created['id']}/status", json={"status": status})
        assert resp.status_code == 200
        assert resp.json()["resolved_at"] is None


async def test_reopening_clears_resolved_at(world, admin_client):
    a = world.ids["asset_a"]
    created = (await admin_client.post("/api/issues", data=_form(a))).json()
    await admin_client.put(f"/api/issues/{created['id']}/status", json={"status": "resolved"})
    resp = await admin_client.put(f"/api/issues/{created['id']}/status", json={"status": "acknowledged"})
    assert resp.json()["resolved_at"] is None


async def test_resolve_ignores_other_open_issues_on_asset(world, admin_client):
    a = world.ids["asset_a"]
    first = (await admin_client.post("/api/issues", data=_form(a, "high", "damage"))).json()
    await admin_client.post("/api/issues", data=_form(a, "high", "brakes"))
    await admin_client.put(f"/api/issues/{first['id']}/status", json={"status": "resolved"})
    assert await world.asset_status(a) == "available"


async def test_course_user_cannot_change_status_or_costs(world, user_client):
    a = world.ids["asset_a"]
    created = (await user_client.post("/api/issues", data=_form(a))).json()

    resp = await user_client.put(f"/api/issues/{created['id']}/status", json={"status": "resolved"})
    assert resp.status_code == 403
    resp = await user_client.patch(f"/api/issues/{created['id']}", json={"cost_estimate": 50})
    assert resp.status_code == 403
    resp = await user_client.patch(f"/api/issues/{created['id']}", json={"admin_notes": "ok"})
    assert resp.status_code == 403

    resp = await user_client.patch(f"/api/issues/{created['id']}", json={"description": "Both tyres flat"})
    assert resp.status_code == 200
    assert resp.json()["description"] == "Both tyres flat"


async def test_issues_follow_asset_to_new_course(world, admin_client, user_client):
    a = world.ids["asset_a"]
    created = (await user_client.post("/api/issues", data=_form(a))).json()

    resp = await admin_client.patch(f"/api/assets/{a}", json={"course_id": world.ids["course_y"]})
    assert resp.status_code == 200

    assert (await user_client.get(f"/api/assets/{a}")).status_code == 404
    assert (await user_client.get(f"/api/issues/{created['id']}")).status_code == 404
    resp = await user_client.patch(f"/api/issues/{created['id']}", json={"description": "Still flat"})
    assert resp.status_code == 404
    assert (await user_client.get("/api/issues")).json() == []

    at_y = (await admin_client.get("/api/issues", params={"course_id": world.ids["course_y"]})).json()
    assert [i["id"] for i in at_y] == [created["id"]]
    assert at_y[0]["course_name"] == "Course Y"


async def test_issues_of_asset_moved_off_site_leave_course_scope(world, admin_client, user_client):
    a = world.ids["asset_a"]
    created = (await user_client.post("/api/issues", data=_form(a))).json()

    await admin_client.patch(f"/api/assets/{a}", json={"location": "Wangara"})

    assert (await user_client.get(f"/api/issues/{created['id']}")).status_code == 404
    issue = (await admin_client.get(f"/api/issues/{created['id']}")).json()
    assert issue["course_id"] is None


async def test_admin_details_blank_notes_become_null(world, admin_client):
    a = world.ids["asset_a"]
    created = (await admin_client.post("/api/issues", data=_form(a))).json()
    resp = await admin_client.patch(
        f"/api/issues/{created['id']}",
        json={"admin_notes": "   ", "cost_estimate": 85.5, "cost_final": 90},
    )
    body = resp.json()
    assert body["admin_notes"] is None
    assert body["cost_estimate"] == 85.5
    assert body["cost_final"] == 90


async def test_course_user_sees_only_own_course_issues(world, admin_client, user_client):
    await admin_client.post("/api/issues", data=_form(world.ids["asset_a"]))
    other = (await admin_client.post("/api/issues", data=_form(world.ids["asset_b"]))).json()
    await admin_client.post("/api/issues", data=_form(world.ids["asset_c"]))

    resp = await user_client.get("/api/issues")
    issues = resp.json()
    assert len(issues) == 1
    assert all(i["course_id"] == world.ids["course_x"] for i in issues)

    resp = await user_client.get(f"/api/issues/{other['id']}")
    assert resp.status_code == 404

    assert len((await admin_client.get("/api/issues")).json()) == 3


async def test_course_user_cannot_report_on_other_course(world, user_client):
    resp = await user_client.post("/api/issues", data=_form(world.ids["asset_b"]))
    assert resp.status_code == 404
    assert await world.asset_status(world.ids["asset_b"]) == "out_of_service"


@pytest.mark.parametrize("field,value", [
    ("description", "   "),
    ("severity", "critical"),
    ("issue_type", "flat"),
    ("asset_id", ""),
])
async def test_invalid_report_is_422_with_field(world, admin_client, field, value):
    form = _form(world.ids["asset_a"])
    form[field] = value
    resp = await admin_client.post("/api/issues", data=form)
    assert resp.status_code == 422
    assert resp.json()["detail"][0]["loc"][-1] == field


async def test_report_with_photos(world, admin_client):
    a = world.ids["asset_a"]
    files = [("photos", (f"p{i}.jpg", _jpeg(), "image/jpeg")) for i in range(2)]
    resp = await admin_client.post("/api/issues", data=_form(a), files=files)
    assert resp.status_code == 201
    photos = resp.json()["photos"]
    assert len(photos) == 2
    assert all("/issue-photos/" in url for url in photos)


async def test_too_many_photos_rejected_before_upload(world, admin_client, tmp_path):
    a = world.ids["asset_a"]
    files = [("photos", (f"p{i}.jpg", _jpeg(), "image/jpeg")) for i in range(6)]
    resp = await admin_client.post("/api/issues", data=_form(a), files=files)
    assert resp.status_code == 400
    assert not (tmp_path / "storage").exists()
    assert (await admin_client.get("/api/issues")).json() == []


async def test_failed_insert_leaves_photos_and_asset_untouched(world, admin_client, monkeypatch, tmp_path, caplog):
    async def broken_create_issue(*args, **kwargs):
        raise RuntimeError("insert failed")

    monkeypatch.setattr(issue_workflow.crud, "create_issue", broken_create_issue)
    a = world.ids["asset_a"]
    files = [("photos", ("p.jpg", _jpeg(), "image/jpeg"))]
    with pytest.raises(RuntimeError, match="insert failed"):
        await admin_client.post("/api/issues", data=_form(a, "high", "damage"), files=files)

    assert await world.asset_status(a) == "available"
    stored = list((tmp_path / "storage" / "issue-photos").iterdir())
    assert len(stored) == 1
    orphaned = [r for r in caplog.records if r.getMessage().startswith("Issue insert failed")]
    assert orphaned[0].asset_id == a
    assert orphaned[0].keys == [stored[0].name]


async def test_list_filters_and_order(world, admin_client):
    a = world.ids["asset_a"]
    first = (await admin_client.post("/api/issues", data=_form(a, "low"))).json()
    second = (await admin_client.post("/api/issues", data=_form(a, "high", "damage", "Cracked frame"))).json()

    listed = (await admin_client.get("/api/issues")).json()
    assert [i["id"] for i in listed] == [second["id"], first["id"]]

    high = (await admin_client.get("/api/issues", params={"severity": "high"})).json()
    assert [i["id"] for i in high] == [second["id"]]

    found = (await admin_client.get("/api/issues", params={"search": "cracked"})).json()
    assert [i["id"] for i in found] == [second["id"]]

    await admin_client.put(f"/api/issues/{first['id']}/status", json={"status": "resolved"})
    resolved = (await admin_client.get("/api/issues", params={"status": "resolved"})).json()
    assert [i["id"] for i in resolved] == [first["id"]]

    open_for_asset = (await admin_client.get(f"/api/assets/{a}/issues", params={"open_only": True})).json()
    assert [i["id"] for i in open_for_asset] == [second["id"]]


async def test_report_publishes_change_event(world, admin_client):
    events = []
    unsubscribe = change_hub.subscribe(events.append)
    try:
        await admin_client.post("/api/issues", data=_form(world.ids["asset_a"], "high", "damage"))
    finally:
        unsubscribe()
    assert events[-1].keys == ["issues", "assets"]
    assert events[-1].course_id == world.ids["course_x"]


async def test_reporter_name_recorded(world, user_client):
    resp = await user_client.post("/api/issues", data=_form(world.ids["asset_a"]))
    body = resp.json()
    assert body["reported_by"] == world.ids["member"]
    assert body["reported_by_name"] == "Pro"
