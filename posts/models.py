from django.conf import settings
from django.db import models
from veterans.models import Status


class PostType(models.TextChoices):
    STORY = "story", "Story"
    PHOTO = "photo", "Photo"
    TESTIMONIAL = "testimonial", "Testimonial"


class ModeratableContent(models.Model):
    """Fields shared by every user submission that goes through moderation."""
    veteran = models.ForeignKey("veterans.Veteran", on_delete=models.CASCADE)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING)
    response = models.TextField(blank=True, default="")
    view_count = models.PositiveIntegerField(default=0)
    salute_count = models.PositiveIntegerField(default=0)
    share_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['id']


class Story(ModeratableContent):
    title = models.CharField(max_length=255)
    text = models.TextField()

    class Meta(ModeratableContent.Meta):
        verbose_name_plural = "stories"

    def __str__(self):
        return f"{self.title} ({self.status})"


class Photo(ModeratableContent):
    title = models.CharField(max_length=255)
    photo_file = models.ForeignKey("uploads.File", on_delete=models.SET_NULL, null=True, blank=True, related_name="photos")

    def __str__(self):
        return f"{self.title} ({self.status})"


class Testimonial(ModeratableContent):
    title = models.CharField(max_length=255, blank=True, default="")
    text = models.TextField()

    def __str__(self):
        return f"Testimonial {self.id} ({self.status})"


class PostSalute(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="salutes")
    post_type = models.CharField(max_length=16, choices=PostType.choices)
    post_id = models.PositiveBigIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "post_type", "post_id"], name="unique_salute_per_user_and_post"),
        ]

    def __str__(self):
        return f"{self.user_id} saluted {self.post_type} {self.post_id}"
