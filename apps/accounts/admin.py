from django.contrib import admin
from .models import UserProfile

@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'github_login', 'github_uid', 'site_admin', 'created_at']
    list_filter = ['site_admin', 'created_at']
    search_fields = ['user__username', 'user__email', 'github_login']
    readonly_fields = ['id', 'created_at', 'updated_at']

    fieldsets = (
        ('User Information', {
            'fields': ('user', 'id')
        }),
        ('GitHub', {
            'fields': ('github_login', 'github_uid')
        }),
        ('Access', {
            'fields': ('site_admin', 'feature_flags'),
            'description': (
                'site_admin: can open every organization.\n'
                'feature_flags: per-user opt-ins, e.g. ["search_assignments"].'
            )
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at')
        }),
    )
