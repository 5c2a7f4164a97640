from django.contrib import admin
from .models import Veteran, NextOfKin

@admin.register(Veteran)
class VeteranAdmin(admin.ModelAdmin):
    list_display = ('id', 'first_name', 'last_name', 'birth_date', 'death_date')
    search_fields = ('first_name', 'last_name')

@admin.register(NextOfKin)
class NextOfKinAdmin(admin.ModelAdmin):
    list_display = ('id', 'full_name', 'user', 'veteran', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('full_name', 'email', 'user__username', 'veteran__last_name')
    readonly_fields = ('created_at', 'updated_at')
    filter_horizontal = ('proofs',)
