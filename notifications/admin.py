from django.contrib import admin
from .models import Notification, NotificationPreference

@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'type', 'sub_type', 'status', 'created_at')
    list_filter = ('type', 'sub_type', 'status', 'created_at')
    search_fields = ('user__username',)
    readonly_fields = ('user', 'created_by', 'type', 'sub_type', 'content', 'created_at')
    list_per_page = 50
    actions = ['mark_as_read', 'mark_as_unread']

    fieldsets = (
        (None, {
            'fields': ('user', 'created_by', 'type', 'sub_type')
        }),
        ('Status', {
            'fields': ('status', 'created_at')
        }),
        ('Payload', {
            'fields': ('content',)
        }),
    )

    @admin.action(description="Mark selected notifications as read")
    def mark_as_read(self, request, queryset):
        queryset.update(status=Notification.Status.READ)

    @admin.action(description="Mark selected notifications as unread")
    def mark_as_unread(self, request, queryset):
        queryset.update(status=Notification.Status.NEW)

@admin.register(NotificationPreference)
class NotificationPreferenceAdmin(admin.ModelAdmin):
    list_display = ('user', 'story_notifications_site', 'photo_notifications_site', 'testimonial_notifications_site')
    search_fields = ('user__username',)
