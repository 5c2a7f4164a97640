from django.contrib import admin
from .models import Story, Photo, Testimonial, PostSalute

class ModeratableContentAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "veteran", "created_by", "status", "salute_count", "view_count", "created_at")
    list_filter = ("status",)
    search_fields = ("title", "veteran__last_name", "created_by__username")
    readonly_fields = ("view_count", "salute_count", "share_count", "created_at", "updated_at")

admin.site.register(Story, ModeratableContentAdmin)
admin.site.register(Photo, ModeratableContentAdmin)
admin.site.register(Testimonial, ModeratableContentAdmin)

@admin.register(PostSalute)
class PostSaluteAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "post_type", "post_id", "created_at")
    list_filter = ("post_type",)
    search_fields = ("user__username",)
