import logging

from django.contrib.auth.models import User
from fcm_django.models import FCMDevice
from firebase_admin.messaging import Message, Notification as PushNotification

from authentication.utils import send_email
from .models import Notification, NotificationPreference

logger = logging.getLogger(__name__)

SUBJECTS = {
    Notification.Type.POST: "New activity on a memorial",
    Notification.Type.NOK: "Your next of kin request",
}


def _describe(candidate):
    content = candidate.get("content") or {}
    title = SUBJECTS.get(candidate["type"], "Memorial notification")
    body = content.get("text") or f"A new {candidate.get('sub_type') or 'post'} was submitted for a veteran you follow."
    return title, body


def send_email_notification(user_id, candidate):
    email = User.objects.filter(id=user_id).values_list("email", flat=True).first()
    if not email:
        logger.info(f"User {user_id} has no email address, skipping EMAIL notification.")
        return False
    title, body = _describe(candidate)
    send_email(title, body, [email])
    logger.info(f"Sent EMAIL notification to user {user_id}")
    return True


def send_push_notification(user_id, candidate):
    devices = FCMDevice.objects.filter(user_id=user_id, active=True)
    if not devices.exists():
        logger.info(f"User {user_id} has push notifications enabled but no active devices.")
        return False
    title, body = _describe(candidate)
    data = {key: str(value) for key, value in (candidate.get("content") or {}).items()}
    devices.send_message(Message(notification=PushNotification(title=title, body=body), data=data))
    logger.info(f"Sent PUSH notification to user {user_id}")
    return True


class NotificationDispatcher:
    """
    Delivers resolved candidates. Post notifications honour the recipient's
    preference row; without a row only the on-site notification is created.
    Any other notification type is always delivered on site.
    """

    def __init__(self, mailer=send_email_notification, pusher=send_push_notification):
        self.mailer = mailer
        self.pusher = pusher

    def dispatch(self, candidates):
        delivered = []
        for candidate in candidates:
            try:
                notification = self.deliver(candidate)
            except Exception:
                logger.exception(f"Could not deliver notification to user {candidate.get('user_id')}")
                continue
            if notification is not None:
                delivered.append(notification)
        return delivered

    def deliver(self, candidate):
        user_id = candidate["user_id"]
        sub_type = candidate.get("sub_type") or ""

        if candidate["type"] != Notification.Type.POST:
            return self._create(candidate)

        preference = NotificationPreference.objects.filter(user_id=user_id).first()
        if preference is None:
            return self._create(candidate)

        notification = None
        if preference.allows(sub_type, "site"):
            notification = self._create(candidate)
        else:
            logger.debug(f"Suppressed SITE notification for user {user_id} ({sub_type} disabled).")

        if preference.allows(sub_type, "email"):
            self._send_safely(self.mailer, "EMAIL", user_id, candidate)
        if preference.allows(sub_type, "mobile"):
            self._send_safely(self.pusher, "PUSH", user_id, candidate)
        return notification

    def _create(self, candidate):
        return Notification.objects.create(
            user_id=candidate["user_id"],
            created_by_id=candidate.get("created_by_id"),
            type=candidate["type"],
            sub_type=candidate.get("sub_type") or "",
            content=candidate.get("content") or {},
        )

    def _send_safely(self, sender, channel, user_id, candidate):
        try:
            sender(user_id, candidate)
        except Exception:
            logger.exception(f"An error occurred while sending {channel} notification to user {user_id}")


def dispatch(candidates):
    return NotificationDispatcher().dispatch(candidates)
