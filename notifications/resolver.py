"""
Turns moderation events into per-recipient notification candidates.

A candidate is a plain, JSON-serializable dict so it can travel through the
Celery broker unchanged::

    {"user_id": 7, "created_by_id": 3, "type": "post",
     "sub_type": "photo", "content": {"veteran_id": 42}}
"""
from veterans.models import NextOfKin, Status
from .models import Notification


def _candidate(user_id, created_by_id, type_, sub_type, content):
    return {
        "user_id": user_id,
        "created_by_id": created_by_id,
        "type": str(type_),
        "sub_type": sub_type or "",
        "content": content,
    }


def approved_next_of_kin_user_ids(veteran_id):
    user_ids = (
        NextOfKin.objects.filter(veteran_id=veteran_id, status=Status.APPROVED)
        .values_list("user_id", flat=True)
        .distinct()
    )
    return sorted(set(user_ids))


def post_created(veteran_id, created_by_id, sub_type):
    """Every approved next of kin of the veteran hears about new content."""
    return [
        _candidate(user_id, created_by_id, Notification.Type.POST, sub_type, {"veteran_id": veteran_id})
        for user_id in approved_next_of_kin_user_ids(veteran_id)
    ]


def post_approved(veteran_id, creator_id, approver_id, sub_type):
    if creator_id is None:
        return []
    return [
        _candidate(
            creator_id,
            approver_id,
            Notification.Type.POST,
            sub_type,
            {"veteran_id": veteran_id, "text": f"Your {sub_type} approved."},
        )
    ]


def nok_decided(next_of_kin, acting_user_id, text):
    return [
        _candidate(
            next_of_kin.user_id,
            acting_user_id,
            Notification.Type.NOK,
            "",
            {"veteran_id": next_of_kin.veteran_id, "text": text},
        )
    ]
