import pytest
from django.core.files.storage import InMemoryStorage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import IntegrityError
from rest_framework.exceptions import PermissionDenied, ValidationError

from memorial.exceptions import Conflict
from notifications.models import Notification
from uploads.models import File
from uploads.storage import BlobStore
from veterans.models import NextOfKin, Status
from veterans.policy import can_manage, managed_veteran_ids
from veterans.services import NextOfKinService, next_of_kin_service


def proof(name="discharge.pdf"):
    return SimpleUploadedFile(name, b"%PDF-1.4", content_type="application/pdf")


def request_rights(user, veteran, **extra):
    data = {"veteran": veteran, "full_name": "Jane Doe", "email": "jane@example.com"}
    data.update(extra)
    return next_of_kin_service.create(data, [proof()], user)


@pytest.mark.django_db
class TestPolicy:
    def test_admin_manages_every_veteran(self, admin_user, veteran):
        assert can_manage(admin_user, veteran.id)

    def test_approved_next_of_kin(self, kin_user, user, veteran):
        assert can_manage(kin_user, veteran.id)
        assert not can_manage(user, veteran.id)
        assert managed_veteran_ids(kin_user) == [veteran.id]


@pytest.mark.django_db
class TestNextOfKinService:
    def test_create_requires_proof(self, user, veteran):
        with pytest.raises(ValidationError):
            next_of_kin_service.create({"veteran": veteran, "full_name": "J", "email": "j@example.com"}, [], user)

    def test_create_stores_proofs(self, user, veteran):
        kin = request_rights(user, veteran)

        assert kin.status == Status.PENDING
        assert [p.name for p in kin.proofs.all()] == ["discharge.pdf"]
        assert kin.proofs.get().mime_type == "application/pdf"

    def test_approve_notifies_requester(self, user, admin_user, veteran, django_capture_on_commit_callbacks):
        kin = request_rights(user, veteran)
        with django_capture_on_commit_callbacks(execute=True):
            approved = next_of_kin_service.approve(kin.id, admin_user)

        assert approved.status == Status.APPROVED
        notification = Notification.objects.get(user=user)
        assert notification.type == Notification.Type.NOK
        assert notification.content["text"] == "Your NOK request approved"

    def test_second_approval_conflicts(self, user, make_user, admin_user, veteran):
        first = request_rights(user, veteran)
        second = request_rights(make_user("cousin"), veteran)
        next_of_kin_service.approve(first.id, admin_user)

        with pytest.raises(Conflict):
            next_of_kin_service.approve(second.id, admin_user)
        assert NextOfKin.objects.filter(veteran=veteran, status=Status.APPROVED).count() == 1

    def test_request_after_approval_conflicts(self, kin_user, user, veteran):
        with pytest.raises(Conflict):
            request_rights(user, veteran)

    def test_only_admins_decide(self, user, veteran):
        kin = request_rights(user, veteran)
        with pytest.raises(PermissionDenied):
            next_of_kin_service.approve(kin.id, user)

    def test_reject(self, user, admin_user, veteran, django_capture_on_commit_callbacks):
        kin = request_rights(user, veteran)
        with django_capture_on_commit_callbacks(execute=True):
            rejected = next_of_kin_service.reject(kin.id, "Proof is unreadable", admin_user)

        assert rejected.response == "Proof is unreadable"
        assert Notification.objects.get(user=user).content["text"] == "Your NOK request rejected by admin"

    def test_remove_deletes_proofs(self, user, veteran):
        kin = request_rights(user, veteran)
        next_of_kin_service.remove(kin.id, user)

        assert not NextOfKin.objects.exists()
        assert not File.objects.exists()

    def test_search_is_scoped_to_requester(self, user, make_user, admin_user, veteran):
        request_rights(user, veteran)
        request_rights(make_user("cousin"), veteran)

        assert next_of_kin_service.search({}, user).count() == 1
        assert next_of_kin_service.search({}, admin_user).count() == 2


@pytest.mark.django_db
class TestNextOfKinEndpoints:
    def test_request_and_approve(self, api_client, user, admin_user, veteran):
        api_client.force_authenticate(user)
        created = api_client.post(
            "/api/next-of-kins/",
            {"veteran": veteran.id, "full_name": "Jane Doe", "email": "jane@example.com", "files": [proof()]},
            format="multipart",
        )
        assert created.status_code == 201
        kin_id = created.json()["data"]["id"]

        api_client.force_authenticate(admin_user)
        approved = api_client.put(f"/api/next-of-kins/{kin_id}/approve/")
        assert approved.json()["data"]["status"] == Status.APPROVED

    def test_conflict_is_409(self, api_client, user, make_user, admin_user, veteran):
        first = request_rights(user, veteran)
        second = request_rights(make_user("cousin"), veteran)
        next_of_kin_service.approve(first.id, admin_user)
        api_client.force_authenticate(admin_user)

        response = api_client.put(f"/api/next-of-kins/{second.id}/approve/")

        assert response.status_code == 409
        assert response.json()["success"] is False

    def test_others_cannot_read_request(self, api_client, user, make_user, veteran):
        kin = request_rights(user, veteran)
        api_client.force_authenticate(make_user("stranger"))
        assert api_client.get(f"/api/next-of-kins/{kin.id}/").status_code == 403


@pytest.mark.django_db
class TestVeteranEndpoints:
    def test_public_read(self, api_client, veteran):
        response = api_client.get("/api/veterans/")
        assert response.json()["data"]["results"][0]["last_name"] == "Doe"

    def test_only_admins_write(self, api_client, user, admin_user):
        payload = {"first_name": "Mary", "last_name": "Major"}
        api_client.force_authenticate(user)
        assert api_client.post("/api/veterans/", payload).status_code == 403

        api_client.force_authenticate(admin_user)
        assert api_client.post("/api/veterans/", payload).status_code == 201

    def test_death_before_birth(self, api_client, admin_user):
        api_client.force_authenticate(admin_user)
        response = api_client.post(
            "/api/veterans/",
            {"first_name": "Mary", "last_name": "Major", "birth_date": "1920-01-01", "death_date": "1919-01-01"},
        )
        assert response.status_code == 400


@pytest.mark.django_db
def test_failed_request_leaves_no_proofs_or_blobs(user, veteran, monkeypatch):
    storage = InMemoryStorage()
    service = NextOfKinService(BlobStore(storage))

    def fail(**kwargs):
        raise IntegrityError("next of kin insert failed")

    monkeypatch.setattr(NextOfKin.objects, "create", fail)
    data = {"veteran": veteran, "full_name": "Jane Doe", "email": "jane@example.com"}

    with pytest.raises(IntegrityError):
        service.create(data, [proof("a.pdf"), proof("b.pdf")], user)

    assert not File.objects.exists()
    assert not NextOfKin.proofs.through.objects.exists()
    assert storage.listdir("uploads")[1] == []
