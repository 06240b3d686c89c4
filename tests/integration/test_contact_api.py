"""Public contact form: stored first, email is best effort."""

from __future__ import annotations

import resend
from sqlalchemy import select

from app.models import ContactSubmission
from app.services import email

FORM = {
    "name": "Sam Player",
    "email": "sam@golfclub.com.au",
    "phone": "0400 000 000",
    "inquiry_type": "leasing",
    "message": "We'd like to lease eight trikes for summer.",
}


async def _submissions(world):
    async with world.factory() as db:
        return list((await db.execute(select(ContactSubmission))).scalars().all())


async def test_submission_stored_and_emails_sent(world, anon_client, monkeypatch):
    sent = []
    monkeypatch.setattr(email._settings, "resend_api_key", "re_test_key")
    monkeypatch.setattr(resend.Emails, "send", lambda params: sent.append(params) or {"id": "e"})

    resp = await anon_client.post("/api/public/contact", json=FORM)
    assert resp.status_code == 201
    assert resp.json()["status"] == "received"

    rows = await _submissions(world)
    assert len(rows) == 1
    assert rows[0].inquiry_type == "leasing"
    assert [p["to"] for p in sent] == [["sam@golfclub.com.au"], [email._settings.email.operator_address]]


async def test_email_failure_does_not_fail_submission(world, anon_client, monkeypatch):
    def boom(params):
        raise RuntimeError("resend down")

    monkeypatch.setattr(email._settings, "resend_api_key", "re_test_key")
    monkeypatch.setattr(resend.Emails, "send", boom)

    resp = await anon_client.post("/api/public/contact", json=FORM)
    assert resp.status_code == 201
    assert len(await _submissions(world)) == 1


async def test_invalid_form_stores_nothing(world, anon_client):
    resp = await anon_client.post("/api/public/contact", json={**FORM, "message": "short"})
    assert resp.status_code == 422
    assert resp.json()["detail"][0]["loc"] == ["body", "message"]
    assert await _submissions(world) == []
