"""
Payment workflow tests.

FLOW: customer creates a pending payment -> uploads proof -> staff approves
or rejects. Approval is not idempotent: a second approval overwrites the
approver and processed_at.
"""

import io
import os
from datetime import timedelta

from pixstore.models import Payment
from pixstore.services import payment_service
from pixstore.time_utils import utcnow


def _create_payment(client, headers, product_id):
    resp = client.post("/api/payments", json={"product_id": product_id}, headers=headers)
    assert resp.status_code == 201, resp.json
    return resp.json["payment"]


def _png(name="receipt.png"):
    return {"proof": (io.BytesIO(b"\x89PNG\r\n\x1a\n fake image"), name, "image/png")}


class TestCreatePayment:
    def test_amount_comes_from_product(self, client, customer, product, customer_headers, logged):
        payment = _create_payment(client, customer_headers, product.id)
        assert payment["status"] == "pending"
        assert payment["amount"] == "49.90"
        assert payment["user_id"] == customer.id
        assert payment["processed_at"] is None

        entries = logged("PAYMENT_CREATED")
        assert entries[0].details["payment_id"] == payment["id"]

    def test_camel_case_product_id(self, client, product, customer_headers):
        resp = client.post("/api/payments", json={"productId": product.id}, headers=customer_headers)
        assert resp.status_code == 201

    def test_unknown_product_is_404(self, client, db_session, customer_headers):
        resp = client.post("/api/payments", json={"product_id": 424242}, headers=customer_headers)
        assert resp.status_code == 404

    def test_inactive_product_is_400(self, client, inactive_product, customer_headers):
        resp = client.post("/api/payments", json={"product_id": inactive_product.id}, headers=customer_headers)
        assert resp.status_code == 400
        assert resp.json["error"] == "Product is not available"

    def test_missing_product_id(self, client, db_session, customer_headers):
        resp = client.post("/api/payments", json={}, headers=customer_headers)
        assert resp.status_code == 400

    def test_requires_auth(self, client, product):
        resp = client.post("/api/payments", json={"product_id": product.id})
        assert resp.status_code == 401

    def test_list_only_own_payments(self, client, product, customer_headers, other_customer_headers):
        mine = _create_payment(client, customer_headers, product.id)
        _create_payment(client, other_customer_headers, product.id)

        resp = client.get("/api/payments", headers=customer_headers)
        assert resp.status_code == 200
        payments = resp.json["payments"]
        assert [p["id"] for p in payments] == [mine["id"]]
        assert payments[0]["product"]["name"] == "Preset Pack"


class TestUploadProof:
    def test_upload_stores_url_and_keeps_status(self, app, client, db_session, product, customer_headers, logged):
        payment = _create_payment(client, customer_headers, product.id)

        resp = client.post(
            f"/api/payments/{payment['id']}/upload-proof",
            data=_png(),
            content_type="multipart/form-data",
            headers=customer_headers,
        )
        assert resp.status_code == 200
        url = resp.json["proof_image_url"]
        assert url.startswith("/uploads/")
        assert url.endswith(".png")
        assert resp.json["payment"]["proof_image_url"] == url
        assert resp.json["payment"]["status"] == "pending"
        assert resp.json["payment"]["processed_at"] is None

        stored_name = url.rsplit("/", 1)[1]
        assert os.path.exists(os.path.join(app.config["UPLOAD_FOLDER"], stored_name))

        entries = logged("PAYMENT_PROOF_UPLOADED")
        assert entries[0].details["filename"] == "receipt.png"
        assert entries[0].details["stored_as"] == stored_name

    def test_uploaded_file_is_served(self, client, product, customer_headers):
        payment = _create_payment(client, customer_headers, product.id)
        resp = client.post(
            f"/api/payments/{payment['id']}/upload-proof",
            data=_png(),
            content_type="multipart/form-data",
            headers=customer_headers,
        )
        url = resp.json["proof_image_url"]

        served = client.get(url)
        assert served.status_code == 200
        assert served.data.startswith(b"\x89PNG")

    def test_rejects_other_file_types(self, client, product, customer_headers):
        payment = _create_payment(client, customer_headers, product.id)
        resp = client.post(
            f"/api/payments/{payment['id']}/upload-proof",
            data={"proof": (io.BytesIO(b"MZ"), "tool.exe", "application/octet-stream")},
            content_type="multipart/form-data",
            headers=customer_headers,
        )
        assert resp.status_code == 400

    def test_no_file(self, client, product, customer_headers):
        payment = _create_payment(client, customer_headers, product.id)
        resp = client.post(
            f"/api/payments/{payment['id']}/upload-proof",
            data={},
            content_type="multipart/form-data",
            headers=customer_headers,
        )
        assert resp.status_code == 400
        assert resp.json["error"] == "No file uploaded"

    def test_other_customer_forbidden(self, client, product, customer_headers, other_customer_headers):
        payment = _create_payment(client, customer_headers, product.id)
        resp = client.post(
            f"/api/payments/{payment['id']}/upload-proof",
            data=_png(),
            content_type="multipart/form-data",
            headers=other_customer_headers,
        )
        assert resp.status_code == 403

    def test_unknown_payment(self, client, db_session, customer_headers):
        resp = client.post(
            "/api/payments/424242/upload-proof",
            data=_png(),
            content_type="multipart/form-data",
            headers=customer_headers,
        )
        assert resp.status_code == 404

    def test_oversized_upload_is_413(self, app, client, product, customer_headers):
        payment = _create_payment(client, customer_headers, product.id)
        big = b"\x89PNG" + b"0" * app.config["MAX_CONTENT_LENGTH"]
        resp = client.post(
            f"/api/payments/{payment['id']}/upload-proof",
            data={"proof": (io.BytesIO(big), "big.png", "image/png")},
            content_type="multipart/form-data",
            headers=customer_headers,
        )
        assert resp.status_code == 413


class TestReviewPayments:
    def test_pending_list_includes_user_and_product(self, client, customer, product, customer_headers, admin_headers):
        payment = _create_payment(client, customer_headers, product.id)

        resp = client.get("/api/admin/payments/pending", headers=admin_headers)
        assert resp.status_code == 200
        rows = resp.json["payments"]
        assert [p["id"] for p in rows] == [payment["id"]]
        assert rows[0]["user"]["username"] == customer.username
        assert rows[0]["product"]["id"] == product.id

    def test_approve(self, client, admin, product, customer_headers, admin_headers, logged):
        payment = _create_payment(client, customer_headers, product.id)

        resp = client.put(f"/api/admin/payments/{payment['id']}/approve", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json["payment"]["status"] == "approved"
        assert resp.json["payment"]["approved_by"] == admin.id
        assert resp.json["payment"]["processed_at"] is not None

        assert logged("PAYMENT_APPROVED")[0].details == {"payment_id": payment["id"]}

        pending = client.get("/api/admin/payments/pending", headers=admin_headers).json["payments"]
        history = client.get("/api/admin/payments/history", headers=admin_headers).json["payments"]
        assert pending == []
        assert [p["id"] for p in history] == [payment["id"]]

    def test_approving_twice_overwrites(self, client, db_session, admin, owner, product, customer_headers, admin_headers, owner_headers):
        payment = _create_payment(client, customer_headers, product.id)

        first = client.put(f"/api/admin/payments/{payment['id']}/approve", headers=admin_headers)
        assert first.status_code == 200
        assert first.json["payment"]["approved_by"] == admin.id

        # Push the first stamp into the past so the overwrite is observable
        row = db_session.get(Payment, payment["id"])
        row.processed_at = utcnow() - timedelta(days=1)
        db_session.commit()
        first_processed = row.processed_at

        second = client.put(f"/api/admin/payments/{payment['id']}/approve", headers=owner_headers)
        assert second.status_code == 200
        assert second.json["payment"]["status"] == "approved"
        assert second.json["payment"]["approved_by"] == owner.id

        db_session.expire_all()
        row = db_session.get(Payment, payment["id"])
        assert row.approved_by == owner.id
        assert row.processed_at > first_processed

    def test_reject_with_reason(self, client, admin, product, customer_headers, admin_headers, logged):
        payment = _create_payment(client, customer_headers, product.id)

        resp = client.put(
            f"/api/admin/payments/{payment['id']}/reject",
            json={"rejectionReason": "Receipt unreadable"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json["payment"]["status"] == "rejected"
        assert resp.json["payment"]["rejection_reason"] == "Receipt unreadable"
        assert resp.json["payment"]["approved_by"] == admin.id

        assert logged("PAYMENT_REJECTED")[0].details["reason"] == "Receipt unreadable"

    def test_approve_unknown_is_404(self, client, db_session, admin_headers):
        resp = client.put("/api/admin/payments/424242/approve", headers=admin_headers)
        assert resp.status_code == 404

    def test_customer_cannot_approve(self, client, product, customer_headers):
        payment = _create_payment(client, customer_headers, product.id)
        resp = client.put(f"/api/admin/payments/{payment['id']}/approve", headers=customer_headers)
        assert resp.status_code == 403
        assert resp.json["required_role"] == ["admin", "owner"]


class TestPaymentInput:
    def test_product_id_out_of_range(self, client, db_session, customer_headers):
        resp = client.post("/api/payments", json={"product_id": 2**70}, headers=customer_headers)
        assert resp.status_code == 400
        assert resp.json["error"] == "product_id is out of range"
        assert db_session.query(Payment).count() == 0

    def test_product_id_must_be_positive(self, client, db_session, customer_headers):
        resp = client.post("/api/payments", json={"product_id": 0}, headers=customer_headers)
        assert resp.status_code == 400

    def test_product_id_as_string(self, client, product, customer_headers):
        resp = client.post("/api/payments", json={"product_id": str(product.id)}, headers=customer_headers)
        assert resp.status_code == 201

    def test_product_id_boolean_rejected(self, client, db_session, customer_headers):
        resp = client.post("/api/payments", json={"product_id": True}, headers=customer_headers)
        assert resp.status_code == 400
        assert resp.json["error"] == "product_id must be an integer"

    def test_array_body(self, client, db_session, customer_headers):
        resp = client.post("/api/payments", json=[1], headers=customer_headers)
        assert resp.status_code == 400
        assert resp.json["error"] == "Invalid JSON payload"


class TestProofCleanup:
    def test_failed_attach_removes_stored_file(self, app, client, db_session, product, customer_headers, monkeypatch):
        payment = _create_payment(client, customer_headers, product.id)
        folder = app.config["UPLOAD_FOLDER"]
        before = set(os.listdir(folder)) if os.path.isdir(folder) else set()

        def broken_attach(payment, proof_image_url):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(payment_service, "attach_proof", broken_attach)

        resp = client.post(
            f"/api/payments/{payment['id']}/upload-proof",
            data=_png(),
            content_type="multipart/form-data",
            headers=customer_headers,
        )
        assert resp.status_code == 500
        assert resp.json["error"] == "Failed to upload proof"
        assert set(os.listdir(folder)) == before
        assert db_session.get(Payment, payment["id"]).proof_image_url is None
