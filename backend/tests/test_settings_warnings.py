"""
Settings and warning banner tests.
"""

from pixstore.models import SystemSetting


class TestSettings:
    def test_missing_setting_is_null(self, client, db_session):
        resp = client.get("/api/settings/pixKey")
        assert resp.status_code == 200
        assert resp.json == {"setting": None}

    def test_upsert_and_public_read(self, client, db_session, admin, admin_headers, logged):
        resp = client.post("/api/settings", json={"key": "pixKey", "value": "store@pix.example"}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json["setting"]["value"] == "store@pix.example"
        assert resp.json["setting"]["updated_by"] == admin.id

        resp = client.post("/api/settings", json={"key": "pixKey", "value": "new@pix.example"}, headers=admin_headers)
        assert resp.status_code == 200
        assert db_session.query(SystemSetting).filter_by(key="pixKey").count() == 1

        public = client.get("/api/settings/pixKey")
        assert public.json["setting"]["value"] == "new@pix.example"

        entries = logged("SETTING_UPDATED")
        assert [e.details["key"] for e in entries] == ["pixKey", "pixKey"]

    def test_json_values(self, client, db_session, admin_headers):
        value = {"bank": "Example", "holder": "Store LTDA"}
        client.post("/api/settings", json={"key": "pixInfo", "value": value}, headers=admin_headers)

        resp = client.get("/api/settings/pixInfo")
        assert resp.json["setting"]["value"] == value

    def test_list_settings_requires_staff(self, client, db_session, customer_headers, admin_headers):
        client.post("/api/settings", json={"key": "b", "value": 1}, headers=admin_headers)
        client.post("/api/settings", json={"key": "a", "value": 2}, headers=admin_headers)

        assert client.get("/api/settings", headers=customer_headers).status_code == 403

        resp = client.get("/api/settings", headers=admin_headers)
        assert [s["key"] for s in resp.json["settings"]] == ["a", "b"]

    def test_blank_key_rejected(self, client, db_session, admin_headers):
        resp = client.post("/api/settings", json={"key": "  ", "value": 1}, headers=admin_headers)
        assert resp.status_code == 400

    def test_value_required(self, client, db_session, admin_headers):
        resp = client.post("/api/settings", json={"key": "pixKey"}, headers=admin_headers)
        assert resp.status_code == 400

    def test_customer_cannot_write(self, client, db_session, customer_headers):
        resp = client.post("/api/settings", json={"key": "pixKey", "value": "mine"}, headers=customer_headers)
        assert resp.status_code == 403
        assert db_session.query(SystemSetting).count() == 0


class TestWarnings:
    def test_create_and_list(self, client, db_session, admin, admin_headers, logged):
        resp = client.post("/api/warnings", json={"message": "  Maintenance tonight  "}, headers=admin_headers)
        assert resp.status_code == 201
        warning = resp.json["warning"]
        assert warning["message"] == "Maintenance tonight"
        assert warning["is_active"] is True
        assert warning["created_by"] == admin.id
        assert len(logged("WARNING_CREATED")) == 1

        public = client.get("/api/warnings")
        assert public.status_code == 200
        assert [w["id"] for w in public.json["warnings"]] == [warning["id"]]

    def test_deactivated_warning_hidden(self, client, db_session, admin_headers, logged):
        created = client.post("/api/warnings", json={"message": "Old news"}, headers=admin_headers).json["warning"]

        resp = client.put(f"/api/warnings/{created['id']}", json={"isActive": False}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json["warning"]["is_active"] is False
        assert resp.json["warning"]["message"] == "Old news"
        assert logged("WARNING_UPDATED")[0].details["is_active"] is False

        assert client.get("/api/warnings").json["warnings"] == []

    def test_edit_message(self, client, db_session, admin_headers):
        created = client.post("/api/warnings", json={"message": "Typo"}, headers=admin_headers).json["warning"]

        resp = client.put(f"/api/warnings/{created['id']}", json={"message": "Fixed"}, headers=admin_headers)
        assert resp.json["warning"]["message"] == "Fixed"
        assert resp.json["warning"]["is_active"] is True

    def test_empty_message_rejected(self, client, db_session, admin_headers):
        resp = client.post("/api/warnings", json={"message": ""}, headers=admin_headers)
        assert resp.status_code == 400

    def test_update_unknown_is_404(self, client, db_session, admin_headers):
        resp = client.put("/api/warnings/424242", json={"message": "x"}, headers=admin_headers)
        assert resp.status_code == 404

    def test_customer_cannot_create(self, client, db_session, customer_headers):
        resp = client.post("/api/warnings", json={"message": "spam"}, headers=customer_headers)
        assert resp.status_code == 403


class TestMalformedBodies:
    def test_setting_array_body(self, client, db_session, admin_headers):
        resp = client.post("/api/settings", json=["pixKey", "x"], headers=admin_headers)
        assert resp.status_code == 400
        assert resp.json["error"] == "Invalid JSON payload"

    def test_warning_scalar_body(self, client, db_session, admin_headers):
        resp = client.post("/api/warnings", json=42, headers=admin_headers)
        assert resp.status_code == 400
        assert resp.json["error"] == "Invalid JSON payload"
