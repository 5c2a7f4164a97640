from django.contrib import admin
from .models import File

@admin.register(File)
class FileAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'mime_type', 'created_at')
    search_fields = ('name', 'file_url')
    readonly_fields = ('created_at',)
