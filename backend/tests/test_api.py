"""
HTTP API tests against the in-memory gateway.

Run with: pytest tests/test_api.py -v
"""

import io

import openpyxl
import pytest

from emailbots.infrastructure.auth import issue_session_token

from conftest import OTHER_USER_ID


def _create_bot(client, auth_headers, email="support@x.com"):
    return client.post(
        "/bots",
        headers=auth_headers,
        json={"name": "Support", "email_address": email, "description": "Answers support mail"},
    )


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer garbage"}])
def test_requests_need_a_valid_token(client, headers):
    res = client.get("/dashboard/snapshot", headers=headers)

    assert res.status_code == 401, f"Expected 401 Unauthorized, got {res.status_code}"
    assert "error" in res.json()


def test_initialize_and_snapshot(client, auth_headers, gateway):
    _create_bot(client, auth_headers)

    res = client.post("/dashboard/initialize", headers=auth_headers)

    assert res.status_code == 200
    body = res.json()
    assert len(body["bots"]) == 1
    assert body["bots"][0]["status"] == "active"
    assert body["settings"]["general"]["company_name"]
    assert body["is_loading"] is False


def test_initialize_failure_is_bad_gateway(client, auth_headers, gateway):
    gateway.conversations.fail_on("list_for_bot_owner")

    res = client.post("/dashboard/initialize", headers=auth_headers)

    assert res.status_code == 502
    assert res.json() == {"error": "connection reset by peer", "code": "gateway_error"}


def test_sign_out_drops_cached_store(client, auth_headers):
    _create_bot(client, auth_headers)

    first = client.post("/dashboard/sign-out", headers=auth_headers)
    second = client.post("/dashboard/sign-out", headers=auth_headers)
    bots = client.get("/bots", headers=auth_headers).json()["bots"]

    assert first.json() == {"success": True, "dropped": True}
    assert second.json() == {"success": True, "dropped": False}
    # A fresh store starts empty until it is initialized again
    assert bots == []


class TestBots:
    def test_create_bot(self, client, auth_headers):
        res = _create_bot(client, auth_headers)

        assert res.status_code == 201
        assert res.json()["total_emails"] == 0
        assert res.json()["assistant_status"] == "pending"

    def test_duplicate_email_is_conflict(self, client, auth_headers):
        _create_bot(client, auth_headers)

        res = _create_bot(client, auth_headers)

        assert res.status_code == 409
        assert res.json()["code"] == "duplicate_email"
        assert len(client.get("/bots", headers=auth_headers).json()["bots"]) == 1

    def test_invalid_email_is_unprocessable(self, client, auth_headers):
        res = _create_bot(client, auth_headers, email="not-an-email")

        assert res.status_code == 422
        assert res.json()["code"] == "validation_error"

    def test_update_and_delete(self, client, auth_headers):
        bot_id = _create_bot(client, auth_headers).json()["id"]

        patched = client.patch(f"/bots/{bot_id}", headers=auth_headers, json={"name": "Helpdesk"})
        deleted = client.delete(f"/bots/{bot_id}", headers=auth_headers)
        missing = client.delete(f"/bots/{bot_id}", headers=auth_headers)

        assert patched.json()["name"] == "Helpdesk"
        assert deleted.json() == {"success": True}
        assert missing.status_code == 404

    def test_api_key_unlocks_assistant_lookup(self, client, auth_headers):
        bot_id = _create_bot(client, auth_headers).json()["id"]

        issued = client.post(f"/bots/{bot_id}/api-key", headers=auth_headers)
        api_key = issued.json()["api_key"]
        ok = client.get(f"/bots/{bot_id}/assistant", headers={"X-Bot-Api-Key": api_key})
        wrong = client.get(f"/bots/{bot_id}/assistant", headers={"X-Bot-Api-Key": "agc-wrong"})

        assert issued.status_code == 201
        assert api_key.startswith("agc-")
        assert ok.status_code == 200
        assert ok.json()["bot_id"] == bot_id
        assert wrong.status_code == 401
        assert wrong.json()["code"] == "unauthenticated"

    def test_api_key_for_unknown_bot_is_not_found(self, client, auth_headers):
        res = client.post("/bots/nope/api-key", headers=auth_headers)

        assert res.status_code == 404

    def test_bots_are_per_identity(self, client, auth_headers):
        _create_bot(client, auth_headers)
        other = {"Authorization": f"Bearer {issue_session_token(OTHER_USER_ID)}"}

        client.post("/dashboard/initialize", headers=other)
        res = client.get("/bots", headers=other)

        assert res.json()["bots"] == []


def test_knowledge_base_invalid_url(client, auth_headers):
    res = client.post(
        "/knowledge-base",
        headers=auth_headers,
        json={"name": "FAQ", "type": "website", "source": "acme .com"},
    )

    assert res.status_code == 422
    assert res.json()["code"] == "invalid_url"


def test_template_crud(client, auth_headers):
    created = client.post(
        "/templates",
        headers=auth_headers,
        json={"name": "Welcome", "category": "onboarding", "subject": "Hi", "content": "Hello"},
    )
    template_id = created.json()["id"]

    patched = client.patch(f"/templates/{template_id}", headers=auth_headers, json={"is_active": False})
    listed = client.get("/templates", headers=auth_headers)

    assert created.status_code == 201
    assert patched.json()["is_active"] is False
    assert [t["id"] for t in listed.json()["templates"]] == [template_id]


class TestFineTuning:
    def _question(self, client, auth_headers, text):
        return client.post(
            "/fine-tuning/questions",
            headers=auth_headers,
            json={
                "question": text,
                "expected_answer": "See the FAQ.",
                "category": "general",
                "difficulty": "medium",
                "bot_ids": ["bot-a"],
            },
        ).json()

    def test_bulk_delete_partial_failure(self, client, auth_headers, gateway):
        ids = [self._question(client, auth_headers, f"Q{i}")["id"] for i in range(3)]
        gateway.questions.fail_on("delete", ids=[ids[1]])

        res = client.post("/fine-tuning/bulk-delete", headers=auth_headers, json={"ids": ids})

        assert res.status_code == 207
        body = res.json()
        assert body["success"] is False
        assert body["deleted"] == [ids[0], ids[2]]
        assert [item["success"] for item in body["items"]] == [True, False, True]
        remaining = client.get("/fine-tuning/questions", headers=auth_headers).json()
        assert [q["id"] for q in remaining["questions"]] == [ids[1]]

    def test_bulk_delete_success(self, client, auth_headers):
        ids = [self._question(client, auth_headers, f"Q{i}")["id"] for i in range(2)]

        res = client.post("/fine-tuning/bulk-delete", headers=auth_headers, json={"ids": ids})

        assert res.status_code == 200
        assert res.json()["success"] is True

    def test_import_xlsx(self, client, auth_headers):
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.append(["Question", "Expected_Answer", "Category", "Difficulty"])
        ws.append(["Refund window?", "30 days.", "billing", "easy"])
        ws.append(["Bad row", "x", "billing", "impossible"])
        buffer = io.BytesIO()
        wb.save(buffer)

        res = client.post(
            "/fine-tuning/import",
            headers=auth_headers,
            files={"file": ("questions.xlsx", buffer.getvalue(), "application/octet-stream")},
        )

        assert res.status_code == 200
        assert res.json()["imported"] == 1
        assert res.json()["failed"] == 1

    def test_import_rejects_unknown_file_type(self, client, auth_headers):
        res = client.post(
            "/fine-tuning/import",
            headers=auth_headers,
            files={"file": ("questions.txt", b"hello", "text/plain")},
        )

        assert res.status_code == 422
        assert res.json()["code"] == "invalid_import"


def test_conversation_export(client, auth_headers):
    res = client.get("/conversations/export", headers=auth_headers)

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert 'filename="all-conversations.csv"' in res.headers["content-disposition"]
    assert res.text.splitlines()[0].startswith("Conversation ID,Customer Email")


class TestSettings:
    def test_patch_settings(self, client, auth_headers):
        res = client.patch(
            "/settings", headers=auth_headers, json={"general": {"company_name": "Acme"}}
        )

        assert res.status_code == 200
        assert res.json()["general"]["company_name"] == "Acme"

    def test_invalid_settings_are_not_stored(self, client, auth_headers):
        res = client.patch(
            "/settings",
            headers=auth_headers,
            json={"email": {"default_from_email": "not-an-email"}},
        )
        current = client.get("/settings", headers=auth_headers).json()

        assert res.status_code == 422
        assert res.json()["details"]
        assert current["email"]["default_from_email"] != "not-an-email"

    def test_save_settings(self, client, auth_headers):
        res = client.post("/settings/save", headers=auth_headers)

        assert res.status_code == 200
        assert res.json()["api"]["api_key"]


def test_correlation_id_is_echoed(client, auth_headers):
    res = client.get("/health", headers={"X-Correlation-ID": "abc-123"})

    assert res.headers["X-Correlation-ID"] == "abc-123"
