"""Credential document upload, verification and retrieval."""
import io

import pytest

from nightguard.models.enums import UserRole
from nightguard.services.documents import DocumentStore
from nightguard.services.errors import NotFound, ValidationError
from nightguard.services.workflow import Workflow

PDF = ("licence.pdf", b"%PDF-1.4 security licence", "application/pdf")


def _upload(client, document_type, file=PDF):
    return client.post(
        "/api/documents/upload",
        files={"document": file},
        data={"document_type": document_type}
    )


class TestUpload:

    def test_guard_uploads_security_licence(self, security_client, upload_dir):
        response = _upload(security_client, "security_license")

        assert response.status_code == 200, response.text
        user = response.json()["user"]
        assert user["document_type"] == "security_license"
        assert user["document_verified"] is False
        assert user["document_path"].startswith("/uploads/document-")
        assert user["document_path"].endswith(".pdf")
        assert "password" not in user

        stored = list(upload_dir.iterdir())
        assert len(stored) == 1
        assert stored[0].read_bytes() == PDF[1]

    def test_wrong_type_for_role_writes_nothing(self, security_client, upload_dir):
        """A mismatched document type is refused before any bytes are written."""
        response = _upload(security_client, "rsa_certificate")

        assert response.status_code == 400
        assert not upload_dir.exists() or list(upload_dir.iterdir()) == []

    def test_staff_uploads_rsa_certificate(self, staff_client):
        response = _upload(staff_client, "rsa_certificate", ("rsa.JPG", b"\xff\xd8\xff", "image/jpeg"))

        assert response.status_code == 200
        assert response.json()["user"]["document_path"].endswith(".jpg")

    def test_extension_is_checked(self, security_client):
        response = _upload(security_client, "security_license", ("licence.exe", b"MZ", "application/octet-stream"))

        assert response.status_code == 400
        assert "Invalid file type" in response.json()["message"]

    def test_size_limit(self, security_client, document_store, upload_dir):
        too_big = b"0" * (document_store.max_bytes + 1)

        response = _upload(security_client, "security_license", ("licence.pdf", too_big, "application/pdf"))

        assert response.status_code == 400
        assert "File too large" in response.json()["message"]
        assert not upload_dir.exists() or list(upload_dir.iterdir()) == []

    def test_failed_attach_removes_saved_file(self, security_client, upload_dir, monkeypatch):
        """A user deleted mid-upload leaves no orphan file behind."""
        def user_gone(self, user, document_type, document_path):
            raise NotFound("User not found")

        monkeypatch.setattr(Workflow, "attach_document", user_gone)

        response = _upload(security_client, "security_license")

        assert response.status_code == 404
        assert list(upload_dir.iterdir()) == []

    def test_no_file(self, security_client):
        response = security_client.post("/api/documents/upload", data={"document_type": "security_license"})

        assert response.status_code == 400
        assert response.json()["message"] == "No file uploaded"


class TestVerify:

    def test_admin_verifies_and_revokes(self, login_as, admin_client):
        guard_client, guard = login_as(UserRole.SECURITY)
        _upload(guard_client, "security_license")

        verified = admin_client.post(f"/api/documents/verify/{guard.id}", json={"verified": True})
        assert verified.status_code == 200
        assert verified.json()["user"]["document_verified"] is True

        revoked = admin_client.post(f"/api/documents/verify/{guard.id}", json={"verified": False})
        assert revoked.json()["user"]["document_verified"] is False

    def test_verified_must_be_boolean(self, admin_client, login_as):
        _, guard = login_as(UserRole.SECURITY)

        response = admin_client.post(f"/api/documents/verify/{guard.id}", json={"verified": "yes"})

        assert response.status_code == 400

    def test_manager_cannot_verify(self, manager_client, login_as):
        _, guard = login_as(UserRole.SECURITY)

        response = manager_client.post(f"/api/documents/verify/{guard.id}", json={"verified": True})

        assert response.status_code == 403

    def test_reupload_resets_verification(self, login_as, admin_client):
        guard_client, guard = login_as(UserRole.SECURITY)
        _upload(guard_client, "security_license")
        admin_client.post(f"/api/documents/verify/{guard.id}", json={"verified": True})

        response = _upload(guard_client, "security_license")

        assert response.json()["user"]["document_verified"] is False


class TestRetrieve:

    def test_owner_reads_document(self, security_client):
        path = _upload(security_client, "security_license").json()["user"]["document_path"]
        filename = path.rsplit("/", 1)[1]

        response = security_client.get(f"/api/documents/{filename}")

        assert response.status_code == 200
        assert response.content == PDF[1]

    def test_any_signed_in_user_reads_any_document(self, security_client, staff_client):
        """
        KNOWN GAP: documents are served by filename without an ownership
        check. A staff user can read a guard's licence.
        """
        path = _upload(security_client, "security_license").json()["user"]["document_path"]
        filename = path.rsplit("/", 1)[1]

        response = staff_client.get(f"/api/documents/{filename}")

        assert response.status_code == 200

    def test_anonymous_cannot_read(self, security_client, anon_client):
        path = _upload(security_client, "security_license").json()["user"]["document_path"]

        assert anon_client.get(f"/api/documents/{path.rsplit('/', 1)[1]}").status_code == 401

    def test_unknown_file(self, staff_client):
        assert staff_client.get("/api/documents/document-1-1.pdf").status_code == 404


class TestDocumentStore:
    """Filesystem rules, independent of HTTP."""

    def test_path_traversal_is_not_found(self, tmp_path):
        store = DocumentStore(root=str(tmp_path / "uploads"))
        (tmp_path / "secret.txt").write_text("x")

        with pytest.raises(NotFound):
            store.path_for("../secret.txt")

        with pytest.raises(NotFound):
            store.path_for(".hidden")

    def test_generated_name_keeps_only_extension(self, tmp_path):
        store = DocumentStore(root=str(tmp_path))

        filename = store.save("My Licence.PDF", b"data")

        assert filename.startswith("document-")
        assert filename.endswith(".pdf")
        assert "Licence" not in filename
        assert store.path_for(filename).read_bytes() == b"data"

    def test_missing_extension(self, tmp_path):
        with pytest.raises(ValidationError):
            DocumentStore(root=str(tmp_path)).check_upload("licence", 10)

    def test_read_upload_stops_one_byte_past_limit(self, tmp_path):
        store = DocumentStore(root=str(tmp_path), max_bytes=1024)
        stream = io.BytesIO(b"0" * 10 * 1024)

        content = store.read_upload(stream)

        assert len(content) == 1025
        assert stream.tell() == 1025
        with pytest.raises(ValidationError):
            store.save("licence.pdf", content)

    def test_read_upload_within_limit(self, tmp_path):
        store = DocumentStore(root=str(tmp_path), max_bytes=1024)

        assert store.read_upload(io.BytesIO(b"data")) == b"data"

    def test_discard(self, tmp_path):
        store = DocumentStore(root=str(tmp_path))
        filename = store.save("licence.pdf", b"data")

        store.discard(filename)

        with pytest.raises(NotFound):
            store.path_for(filename)
        store.discard(filename)

    def test_public_path(self):
        assert DocumentStore.public_path("document-1-2.png") == "/uploads/document-1-2.png"
