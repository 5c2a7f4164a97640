import pytest
from django.contrib.auth.models import User
from rest_framework.test import APIClient

from authentication.models import UserProfile
from veterans.models import NextOfKin, Status, Veteran


@pytest.fixture
def make_user(db):
    def _make(username, role=UserProfile.Role.USER):
        user = User.objects.create_user(username=username, email=f"{username}@example.com", password="secret")
        if role != UserProfile.Role.USER:
            UserProfile.objects.filter(user=user).update(role=role)
            user = User.objects.get(pk=user.pk)
        return user
    return _make


@pytest.fixture
def user(make_user):
    return make_user("visitor")


@pytest.fixture
def admin_user(make_user):
    return make_user("moderator", role=UserProfile.Role.ADMIN)


@pytest.fixture
def veteran(db):
    return Veteran.objects.create(first_name="John", last_name="Doe")


@pytest.fixture
def kin_user(make_user, veteran):
    kin = make_user("kin")
    NextOfKin.objects.create(
        user=kin, veteran=veteran, full_name="Jane Doe", email="kin@example.com", status=Status.APPROVED
    )
    return kin


@pytest.fixture
def api_client():
    return APIClient()
