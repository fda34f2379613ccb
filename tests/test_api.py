"""Tests for the HTTP API."""

import json
import uuid

from api.services import get_services
from channels.email import LogOnlyEmail
from llm.form_generator import FormGenerator
from submission_quality.auto_responder import AutoResponseConfig, AutoResponder

CONTACT_FIELDS = [
    {"name": "full_name", "type": "text", "required": True},
    {"name": "email", "type": "email", "required": True},
    {"name": "message", "type": "textarea", "required": True},
    {"name": "phone", "type": "tel"},
]


def create_form(client, fields=None):
    response = client.post("/api/v1/forms", json={
        "name": f"Contact {uuid.uuid4().hex[:8]}",
        "fields": fields or CONTACT_FIELDS,
    })
    assert response.status_code == 201
    return response.json()["id"]


def submit(client, form_id, data, ip=None):
    headers = {"X-Forwarded-For": ip} if ip else None
    return client.post(f"/api/v1/forms/{form_id}/submissions", json={"data": data}, headers=headers)


def fresh_ip():
    n = uuid.uuid4().int
    return f"10.{n % 250}.{(n >> 8) % 250}.{(n >> 16) % 250}"


GOOD_DATA = {
    "full_name": "Jane Doe",
    "email": "jane@gmail.com",
    "message": "Hi, I'd like a quote for your services please, thanks",
}


class TestHealth:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "operational"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["services"]["ai_provider"] is False
        assert response.json()["services"]["email_channel"] is True

    def test_health_degraded_when_channel_down(self, client, monkeypatch):
        class DownChannel(LogOnlyEmail):
            async def health_check(self):
                return False

        monkeypatch.setattr(get_services(), "email_channel", DownChannel())
        body = client.get("/health").json()
        assert body["status"] == "degraded"
        assert body["services"]["email_channel"] is False


class TestForms:
    def test_create_and_get(self, client):
        form_id = create_form(client)
        response = client.get(f"/api/v1/forms/{form_id}")
        assert response.status_code == 200
        assert [f["name"] for f in response.json()["fields"]] == [f["name"] for f in CONTACT_FIELDS]

    def test_missing_form(self, client):
        assert client.get("/api/v1/forms/999999").status_code == 404

    def test_form_needs_fields(self, client):
        response = client.post("/api/v1/forms", json={"name": "Empty", "fields": []})
        assert response.status_code == 422


GENERATED_REPLY = json.dumps({
    "form_title": "Newsletter Signup",
    "fields": [
        {"type": "email", "label": "Email", "required": True},
        {"type": "radio", "label": "Frequency", "options": ["Weekly", "Monthly"]},
    ],
})
GENERATE_REQUEST = {"description": "Newsletter signup for a small bakery", "complexity": "simple"}


class TestFormGeneration:
    def test_unavailable_without_ai(self, client):
        response = client.post("/api/v1/forms/generate", json=GENERATE_REQUEST)
        assert response.status_code == 503
        assert response.json()["detail"]["code"] == "missing_api_key"

    def test_generate_and_save(self, client, monkeypatch, fake_provider):
        monkeypatch.setattr(get_services(), "form_generator", FormGenerator(fake_provider(reply=GENERATED_REPLY)))

        preview = client.post("/api/v1/forms/generate", json=GENERATE_REQUEST)
        assert preview.status_code == 200
        assert preview.json()["saved"] is False
        assert [f["name"] for f in preview.json()["form"]["fields"]] == ["email", "frequency"]

        saved = client.post("/api/v1/forms/generate", json={**GENERATE_REQUEST, "save": True}).json()
        assert saved["saved"] is True
        stored = client.get(f"/api/v1/forms/{saved['form']['id']}").json()
        assert stored["name"] == "Newsletter Signup"
        assert stored["fields"][1]["options"] == ["Weekly", "Monthly"]

        submit_ok = submit(client, saved["form"]["id"], {"email": "baker@gmail.com", "frequency": "Weekly"})
        assert submit_ok.status_code == 201

    def test_bad_reply_and_input(self, client, monkeypatch, fake_provider):
        monkeypatch.setattr(get_services(), "form_generator", FormGenerator(fake_provider(reply="sorry")))

        bad_reply = client.post("/api/v1/forms/generate", json=GENERATE_REQUEST)
        assert bad_reply.status_code == 502
        assert bad_reply.json()["detail"]["code"] == "invalid_json"

        short = client.post("/api/v1/forms/generate", json={"description": "form"})
        assert short.status_code == 422
        assert short.json()["detail"]["code"] == "invalid_description"

        unknown = client.post("/api/v1/forms/generate", json={**GENERATE_REQUEST, "complexity": "extreme"})
        assert unknown.status_code == 422


class TestSubmissions:
    def test_submission_scored_and_stored(self, client):
        form_id = create_form(client)
        response = submit(client, form_id, GOOD_DATA)
        assert response.status_code == 201
        body = response.json()
        assert body["lead_score"]["score"] == 50
        assert body["lead_score"]["category"] == "medium"
        assert body["spam"]["is_spam"] is False
        assert body["auto_response"]["reason"] == "disabled"

        stored = client.get(f"/api/v1/submissions/{body['id']}").json()
        assert stored["data"] == GOOD_DATA
        assert stored["lead_score"] == 50
        assert stored["lead_color"] == "medium"
        assert stored["auto_response_sent"] is False

    def test_required_fields_enforced(self, client):
        form_id = create_form(client)
        response = submit(client, form_id, {"full_name": "Jane Doe", "email": "", "message": "Hello"})
        assert response.status_code == 422
        assert response.json()["detail"]["fields"] == ["email"]

    def test_submit_to_missing_form(self, client):
        assert submit(client, 999999, GOOD_DATA).status_code == 404

    def test_list_filters(self, client):
        form_id = create_form(client)
        submit(client, form_id, GOOD_DATA)
        submit(client, form_id, {
            "full_name": "X",
            "email": "temp123@mailinator.com",
            "message": "BUY NOW!!! CLICK HERE!!! zzzzzz http://a.ru http://b.ru http://c.ru http://d.ru",
        })

        everything = client.get("/api/v1/submissions", params={"form_id": form_id}).json()
        assert everything["total"] == 2

        spam = client.get("/api/v1/submissions", params={"form_id": form_id, "spam_status": "spam"}).json()
        assert spam["total"] == 1
        assert spam["items"][0]["data"]["full_name"] == "X"
        assert spam["items"][0]["is_spam"] is True

        medium = client.get("/api/v1/submissions", params={"form_id": form_id, "score_range": "medium"}).json()
        assert [item["data"]["full_name"] for item in medium["items"]] == ["Jane Doe"]

    def test_invalid_filter_rejected(self, client):
        response = client.get("/api/v1/submissions", params={"spam_status": "maybe"})
        assert response.status_code == 422

    def test_pagination(self, client):
        form_id = create_form(client)
        for _ in range(3):
            submit(client, form_id, GOOD_DATA)
        page = client.get("/api/v1/submissions", params={"form_id": form_id, "page": 2, "page_size": 2}).json()
        assert page["total"] == 3
        assert page["pages"] == 2
        assert len(page["items"]) == 1

    def test_manual_spam_flag(self, client):
        form_id = create_form(client)
        submission_id = submit(client, form_id, GOOD_DATA).json()["id"]

        flagged = client.post(f"/api/v1/submissions/{submission_id}/spam", json={"marked_spam": True})
        assert flagged.status_code == 200
        assert flagged.json()["is_spam"] is True

        spam = client.get("/api/v1/submissions", params={"form_id": form_id, "spam_status": "spam"}).json()
        assert spam["total"] == 1

    def test_flag_missing_submission(self, client):
        response = client.post("/api/v1/submissions/999999/spam", json={"marked_spam": True})
        assert response.status_code == 404

    def test_stats_summary(self, client):
        form_id = create_form(client)
        submit(client, form_id, GOOD_DATA)
        submit(client, form_id, {**GOOD_DATA, "phone": "555-123-4567"})

        stats = client.get("/api/v1/submissions/stats/summary", params={"form_id": form_id}).json()
        assert stats["total"] == 2
        assert stats["average_lead_score"] == 55
        assert stats["medium_quality"] == 2
        assert stats["high_quality"] == 0
        assert stats["spam_threshold"] == 60

    def test_repeat_submissions_from_one_ip(self, client):
        form_id = create_form(client)
        ip = fresh_ip()
        points = [
            submit(client, form_id, GOOD_DATA, ip=ip).json()["spam"]["score_breakdown"]["submission_behavior"]
            for _ in range(6)
        ]
        assert points == [0, 0, 0, 5, 5, 10]

    def test_client_ip_header_stored(self, client):
        form_id = create_form(client)
        response = client.post(
            f"/api/v1/forms/{form_id}/submissions",
            json={"data": GOOD_DATA},
            headers={"Client-IP": "203.0.113.77", "X-Forwarded-For": "198.51.100.1"},
        )
        stored = client.get(f"/api/v1/submissions/{response.json()['id']}").json()
        assert stored["ip_address"] == "203.0.113.77"

    def test_auto_response_marks_submission(self, client, monkeypatch):
        channel = LogOnlyEmail()
        services = get_services()
        monkeypatch.setattr(
            services, "auto_responder", AutoResponder(AutoResponseConfig(enabled=True), channel),
        )

        form_id = create_form(client)
        body = submit(client, form_id, GOOD_DATA).json()
        assert body["auto_response"]["sent"] is True
        assert channel.sent[0].to == "jane@gmail.com"
        assert client.get(f"/api/v1/submissions/{body['id']}").json()["auto_response_sent"] is True


class TestScoring:
    def test_score_without_storing(self, client):
        response = client.post("/api/v1/score", json={
            "data": {"email": "temp123@mailinator.com", "comment": "BUY NOW!!! CLICK HERE!!!"},
        })
        assert response.status_code == 200
        body = response.json()
        assert body["spam"]["spam_score"] == 45
        assert body["spam"]["is_spam"] is False

    def test_list_values_accepted(self, client):
        response = client.post("/api/v1/score", json={"data": {"services": ["SEO", "Hosting"]}})
        assert response.json()["lead_score"]["score"] == 10

    def test_ip_address_uses_stored_submissions(self, client):
        form_id = create_form(client)
        ip = fresh_ip()
        payload = {"data": GOOD_DATA, "ip_address": ip}

        first = client.post("/api/v1/score", json=payload).json()
        assert first["spam"]["score_breakdown"]["submission_behavior"] == 0

        for _ in range(4):
            submit(client, form_id, GOOD_DATA, ip=ip)
        after = client.post("/api/v1/score", json=payload).json()
        assert after["spam"]["score_breakdown"]["submission_behavior"] == 5

        anonymous = client.post("/api/v1/score", json={"data": GOOD_DATA}).json()
        assert anonymous["spam"]["score_breakdown"]["submission_behavior"] == 0


class TestTemplates:
    def test_list_templates(self, client):
        body = client.get("/api/v1/templates").json()
        assert body["count"] == 4
        assert "contact-form" in body["recommended"]
        assert "business" in body["categories"]

    def test_get_template(self, client):
        assert client.get("/api/v1/templates/quote-request").json()["name"] == "Quote Request"
        assert client.get("/api/v1/templates/nope").status_code == 404

    def test_install_with_samples_then_clean_up(self, client):
        response = client.post("/api/v1/templates/contact-form/install", json={"submissions_count": 12})
        assert response.status_code == 201
        body = response.json()
        assert body["submissions_created"] == 12
        form_id = body["form"]["id"]
        assert body["form"]["template_id"] == "contact-form"

        listed = client.get("/api/v1/submissions", params={"form_id": form_id}).json()
        assert listed["total"] == 12

        stats = client.get("/api/v1/samples/stats").json()
        assert stats["has_sample_data"] is True

        deleted = client.delete("/api/v1/samples").json()
        assert deleted["forms_deleted"] >= 1
        assert deleted["submissions_deleted"] >= 12
        assert client.get(f"/api/v1/forms/{form_id}").status_code == 404
        assert client.get("/api/v1/samples/stats").json()["has_sample_data"] is False

    def test_install_rejects_unknown_tier(self, client):
        response = client.post(
            "/api/v1/templates/contact-form/install",
            json={"score_distribution": {"legendary": 100}},
        )
        assert response.status_code == 422
