from django.db import models

class File(models.Model):
    name = models.CharField(max_length=255, help_text="Original or generated name of the uploaded file.")
    file_url = models.URLField(max_length=1024)
    mime_type = models.CharField(max_length=100, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name
