from django.db import models
from django.conf import settings

class Notification(models.Model):
    class Type(models.TextChoices):
        POST = "post", "Post"
        NOK = "nok", "Next of kin"

    class Status(models.TextChoices):
        NEW = "new", "New"
        READ = "read", "Read"

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    type = models.CharField(max_length=16, choices=Type.choices)
    sub_type = models.CharField(max_length=32, blank=True, default="")
    content = models.JSONField(default=dict, blank=True, help_text="Payload for the client, e.g. {'veteran_id': 42, 'text': '...'}")
    status = models.CharField(max_length=8, choices=Status.choices, default=Status.NEW)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Notification for {self.user.username}: {self.type}/{self.sub_type or '-'}"


class NotificationPreference(models.Model):
    """
    Per-user delivery switches, one site/email/mobile triple per content kind.
    Flag names follow ``<kind>_notifications_<channel>``.
    """
    CHANNELS = ("site", "email", "mobile")

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notification_preference')

    story_notifications_site = models.BooleanField(default=True)
    story_notifications_email = models.BooleanField(default=True)
    story_notifications_mobile = models.BooleanField(default=True)

    photo_notifications_site = models.BooleanField(default=True)
    photo_notifications_email = models.BooleanField(default=True)
    photo_notifications_mobile = models.BooleanField(default=True)

    testimonial_notifications_site = models.BooleanField(default=True)
    testimonial_notifications_email = models.BooleanField(default=True)
    testimonial_notifications_mobile = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Notification preferences of {self.user.username}"

    @classmethod
    def for_user(cls, user):
        obj, created = cls.objects.get_or_create(user=user)
        return obj

    def allows(self, sub_type, channel):
        # Unknown kinds or channels are treated as switched off.
        return bool(getattr(self, f"{(sub_type or '').lower()}_notifications_{channel}", False))
