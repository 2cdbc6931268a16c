from django.contrib import admin
from .models import Assignment, AssignmentInvitation, AssignmentRepo, Deadline


class AssignmentRepoInline(admin.TabularInline):
    model = AssignmentRepo
    extra = 0
    raw_id_fields = ['user']
    readonly_fields = ['created_at']


@admin.register(Assignment)
class AssignmentAdmin(admin.ModelAdmin):
    list_display = ['title', 'organization', 'creator', 'public_repo', 'invitations_enabled', 'deleted_at', 'created_at']
    list_filter = ['public_repo', 'invitations_enabled', 'template_repos_enabled', 'students_are_repo_admins', 'created_at']
    search_fields = ['title', 'slug', 'organization__title', 'creator__username']
    readonly_fields = ['created_at', 'updated_at']
    raw_id_fields = ['creator', 'deadline']
    inlines = [AssignmentRepoInline]
    fieldsets = (
        ('Basic Information', {
            'fields': ('organization', 'title', 'slug', 'creator')
        }),
        ('Repositories', {
            'fields': ('public_repo', 'students_are_repo_admins', 'template_repos_enabled', 'starter_code_repo_id')
        }),
        ('Invitations & Deadline', {
            'fields': ('invitations_enabled', 'deadline')
        }),
        ('Metadata', {
            'fields': ('deleted_at', 'created_at', 'updated_at')
        }),
    )

    def get_queryset(self, request):
        # Include assignments queued for deletion
        return Assignment.all_objects.select_related('organization', 'creator')


@admin.register(AssignmentInvitation)
class AssignmentInvitationAdmin(admin.ModelAdmin):
    list_display = ['assignment', 'short_key', 'created_at']
    search_fields = ['assignment__title', 'key', 'short_key']
    readonly_fields = ['key', 'short_key', 'created_at']


@admin.register(Deadline)
class DeadlineAdmin(admin.ModelAdmin):
    list_display = ['id', 'deadline_at', 'processed_at', 'created_at']
    list_filter = ['processed_at']
    readonly_fields = ['created_at']
