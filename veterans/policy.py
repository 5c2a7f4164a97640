from authentication.permissions import is_admin
from .models import NextOfKin, Status


def can_manage(user, veteran_id):
    """
    True when ``user`` may approve, reject or see unapproved content of the
    veteran: admins always, otherwise only an approved next of kin.
    """
    if not user or not user.is_authenticated:
        return False
    if is_admin(user):
        return True
    return NextOfKin.objects.filter(
        user_id=user.id, veteran_id=veteran_id, status=Status.APPROVED
    ).exists()


def managed_veteran_ids(user):
    if not user or not user.is_authenticated:
        return []
    return list(
        NextOfKin.objects.filter(user_id=user.id, status=Status.APPROVED)
        .values_list('veteran_id', flat=True)
        .distinct()
    )
