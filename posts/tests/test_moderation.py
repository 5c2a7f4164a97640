import pytest
from django.contrib.auth.models import AnonymousUser
from django.core.files.storage import InMemoryStorage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from memorial.exceptions import BadRequest
from notifications import resolver
from notifications.models import Notification
from posts.models import Photo, PostSalute, PostType, Story
from posts.moderation import PHOTO, ModerationService, photo_service, story_service, testimonial_service
from uploads.models import File
from uploads.storage import BlobStore
from veterans.models import Status


def make_story(veteran, creator, status=Status.PENDING, **extra):
    values = {"title": "Letters home", "text": "He wrote every week."}
    values.update(extra)
    return Story.objects.create(veteran=veteran, created_by=creator, status=status, **values)


@pytest.mark.django_db
class TestCreate:
    def test_regular_user_cannot_publish_directly(self, user, veteran):
        story = story_service.create(
            {"veteran": veteran, "title": "t", "text": "x", "status": Status.APPROVED}, [], user
        )
        assert story.status == Status.PENDING
        assert story.created_by == user

    def test_next_of_kin_can_publish_directly(self, kin_user, veteran):
        story = story_service.create(
            {"veteran": veteran, "title": "t", "text": "x", "status": Status.APPROVED}, [], kin_user
        )
        assert story.status == Status.APPROVED

    def test_new_content_notifies_next_of_kin(self, user, kin_user, veteran, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            testimonial_service.create({"veteran": veteran, "text": "A good man."}, [], user)

        notification = Notification.objects.get(user=kin_user)
        assert notification.type == Notification.Type.POST
        assert notification.sub_type == PostType.TESTIMONIAL
        assert notification.content == {"veteran_id": veteran.id}
        assert notification.created_by == user

    def test_photo_requires_exactly_one_file(self, user, veteran):
        with pytest.raises(ValidationError):
            photo_service.create({"veteran": veteran, "title": "Uniform"}, [], user)

    def test_photo_stores_file(self, user, veteran):
        upload = SimpleUploadedFile("uniform.JPG", b"\xff\xd8\xff", content_type="image/jpeg")
        photo = photo_service.create({"veteran": veteran, "title": "Uniform"}, [upload], user)

        assert photo.photo_file.mime_type == "image/jpeg"
        assert photo.photo_file.file_url.endswith(".jpg")
        assert photo.photo_file.name == photo.photo_file.file_url.rsplit("/", 1)[-1]
        assert photo_service.blob_store.storage.exists(f"uploads/{photo.photo_file.name}")

    def test_removing_photo_drops_file(self, user, veteran):
        upload = SimpleUploadedFile("medal.png", b"\x89PNG", content_type="image/png")
        photo = photo_service.create({"veteran": veteran, "title": "Medal"}, [upload], user)
        key = f"uploads/{photo.photo_file.name}"

        photo_service.remove(photo.id, user)

        assert not File.objects.exists()
        assert not photo_service.blob_store.storage.exists(key)


@pytest.mark.django_db
class TestModeration:
    def test_approve_requires_manage_rights(self, user, make_user, veteran):
        story = make_story(veteran, make_user("author"))
        with pytest.raises(PermissionDenied):
            story_service.approve(story.id, user)

    def test_approve_notifies_creator(self, user, kin_user, veteran, django_capture_on_commit_callbacks):
        story = make_story(veteran, user)
        with django_capture_on_commit_callbacks(execute=True):
            approved = story_service.approve(story.id, kin_user)

        assert approved.status == Status.APPROVED
        assert approved.updated_by == kin_user
        notification = Notification.objects.get(user=user)
        assert notification.content == {"veteran_id": veteran.id, "text": "Your story approved."}

    def test_approving_twice_is_a_no_op(self, user, admin_user, veteran, django_capture_on_commit_callbacks):
        story = make_story(veteran, user)
        with django_capture_on_commit_callbacks(execute=True):
            story_service.approve(story.id, admin_user)
            story_service.approve(story.id, admin_user)
        assert Notification.objects.filter(user=user).count() == 1

    def test_rejected_cannot_be_approved(self, user, admin_user, veteran):
        story = make_story(veteran, user)
        rejected = story_service.reject(story.id, admin_user, "Not about this veteran")
        assert rejected.response == "Not about this veteran"
        with pytest.raises(BadRequest):
            story_service.approve(story.id, admin_user)

    def test_approved_cannot_be_rejected(self, user, admin_user, veteran):
        story = make_story(veteran, user, status=Status.APPROVED)
        with pytest.raises(BadRequest):
            story_service.reject(story.id, admin_user, "")

    def test_unknown_item(self, admin_user):
        with pytest.raises(NotFound):
            story_service.approve(999, admin_user)


@pytest.mark.django_db
class TestEditing:
    def test_creator_can_edit_pending(self, user, veteran):
        story = make_story(veteran, user)
        updated = story_service.update(story.id, {"title": "New title"}, [], user)
        assert updated.title == "New title"
        assert updated.updated_by == user

    def test_creator_cannot_edit_after_approval(self, user, veteran):
        story = make_story(veteran, user, status=Status.APPROVED)
        with pytest.raises(BadRequest):
            story_service.update(story.id, {"title": "New title"}, [], user)

    def test_stranger_cannot_remove(self, user, make_user, veteran):
        story = make_story(veteran, make_user("author"))
        with pytest.raises(PermissionDenied):
            story_service.remove(story.id, user)
        assert Story.objects.filter(id=story.id).exists()


@pytest.mark.django_db
class TestCounters:
    def test_each_read_counts_a_view(self, user, veteran):
        story = make_story(veteran, user, status=Status.APPROVED)
        story_service.get_single(story.id)
        assert story_service.get_single(story.id).view_count == 2

    def test_salute_is_counted_once_per_user(self, user, make_user, veteran):
        story = make_story(veteran, make_user("author"), status=Status.APPROVED)
        story_service.salute(story.id, user)
        saluted = story_service.salute(story.id, user)

        assert saluted.salute_count == 1
        assert PostSalute.objects.filter(user=user, post_type=PostType.STORY, post_id=story.id).count() == 1
        assert story_service.is_saluted(story.id, user) == {"saluted": True}

    def test_salutes_are_per_kind(self, user, veteran):
        story = make_story(veteran, user, status=Status.APPROVED)
        story_service.salute(story.id, user)
        assert not PostSalute.objects.filter(post_type=PostType.TESTIMONIAL).exists()

    def test_anonymous_is_never_saluted(self, user, veteran):
        story = make_story(veteran, user, status=Status.APPROVED)
        assert story_service.is_saluted(story.id, AnonymousUser()) == {"saluted": False}

    def test_pending_content_cannot_be_saluted_or_shared(self, user, veteran):
        story = make_story(veteran, user)
        with pytest.raises(BadRequest):
            story_service.salute(story.id, user)
        with pytest.raises(BadRequest):
            story_service.share(story.id)

    def test_share(self, user, veteran):
        story = make_story(veteran, user, status=Status.APPROVED)
        story_service.share(story.id)
        assert story_service.share(story.id).share_count == 2


@pytest.mark.django_db
def test_search_rejects_unknown_sort_column(user):
    with pytest.raises(ValidationError):
        story_service.search({"sort_column": "password"}, user)


@pytest.mark.django_db
def test_search_sorts_descending(user, veteran):
    first = make_story(veteran, user, status=Status.APPROVED)
    second = make_story(veteran, user, status=Status.APPROVED)
    results = list(story_service.search({"sort_column": "id", "sort_order": "desc"}, AnonymousUser()))
    assert results == [second, first]


@pytest.mark.django_db
class TestAtomicity:
    def test_failed_photo_write_leaves_no_file_or_blob(self, user, veteran, monkeypatch):
        storage = InMemoryStorage()
        service = ModerationService(PHOTO, BlobStore(storage))

        def fail(**kwargs):
            raise IntegrityError("photo insert failed")

        monkeypatch.setattr(Photo.objects, "create", fail)
        upload = SimpleUploadedFile("portrait.png", b"\x89PNG", content_type="image/png")

        with pytest.raises(IntegrityError):
            service.create({"veteran": veteran, "title": "Portrait"}, [upload], user)

        assert not File.objects.exists()
        assert storage.listdir("uploads")[1] == []

    def test_resolver_database_error_keeps_content(self, user, veteran, monkeypatch):
        def broken(*args, **kwargs):
            Story.objects.raw("SELECT * FROM no_such_table")[0]

        monkeypatch.setattr(resolver, "post_created", broken)
        with transaction.atomic():
            story = story_service.create({"veteran": veteran, "title": "t", "text": "x"}, [], user)

        assert Story.objects.filter(id=story.id).exists()

    def test_photo_update_takes_a_single_file(self, user, veteran):
        upload = SimpleUploadedFile("a.png", b"\x89PNG", content_type="image/png")
        photo = photo_service.create({"veteran": veteran, "title": "Portrait"}, [upload], user)
        replacements = [
            SimpleUploadedFile("b.png", b"\x89PNG", content_type="image/png"),
            SimpleUploadedFile("c.png", b"\x89PNG", content_type="image/png"),
        ]

        with pytest.raises(ValidationError):
            photo_service.update(photo.id, {}, replacements, user)

        assert Photo.objects.get(id=photo.id).photo_file.file_url == photo.photo_file.file_url

    def test_lost_salute_race_does_not_count(self, user, make_user, veteran):
        story = make_story(veteran, make_user("author"), status=Status.APPROVED)
        # Another request already inserted the ledger row.
        PostSalute.objects.create(user=user, post_type=PostType.STORY, post_id=story.id)

        saluted = story_service.salute(story.id, user)

        assert saluted.salute_count == 0
        assert Story.objects.get(id=story.id).salute_count == 0
