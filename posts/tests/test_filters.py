import pytest
from django.contrib.auth.models import AnonymousUser

from memorial.exceptions import BadRequest
from posts.filters import build_filter, visibility_status
from veterans.models import Status


@pytest.mark.django_db
class TestVisibilityStatus:
    def test_anonymous_only_sees_approved(self, veteran):
        assert visibility_status({}, AnonymousUser()) == Status.APPROVED
        assert visibility_status({"veteran_id": veteran.id, "status": Status.PENDING}, AnonymousUser()) == Status.APPROVED

    def test_veteran_listing_defaults_to_approved(self, user, veteran):
        assert visibility_status({"veteran_id": veteran.id}, user) == Status.APPROVED

    def test_pending_for_unmanaged_veteran_is_rejected(self, user, veteran):
        with pytest.raises(BadRequest):
            visibility_status({"veteran_id": veteran.id, "status": Status.PENDING}, user)

    def test_next_of_kin_can_list_pending(self, kin_user, veteran):
        assert visibility_status({"veteran_id": veteran.id, "status": Status.PENDING}, kin_user) == Status.PENDING

    def test_admin_sees_everything_without_status(self, admin_user):
        assert visibility_status({}, admin_user) is None

    def test_own_submissions_in_any_status(self, user):
        assert visibility_status({"user_id": user.id, "status": Status.REJECTED}, user) == Status.REJECTED

    def test_other_users_rejected_submissions_are_hidden(self, user, make_user):
        other = make_user("other")
        with pytest.raises(BadRequest):
            visibility_status({"user_id": other.id, "status": Status.REJECTED}, user)


@pytest.mark.django_db
class TestBuildFilter:
    def test_review_requires_login(self):
        with pytest.raises(BadRequest):
            build_filter({"review": True}, AnonymousUser())

    def test_review_limits_to_managed_veterans(self, kin_user, veteran):
        lookup = build_filter({"review": True}, kin_user)
        assert lookup == {"veteran_id__in": [veteran.id]}

    def test_user_filter(self, user):
        lookup = build_filter({"user_id": user.id}, user)
        assert lookup == {"status": Status.APPROVED, "created_by_id": user.id}
