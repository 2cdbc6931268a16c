from django.contrib import admin
from .models import Organization, Roster, RosterEntry, LtiConfiguration


class RosterEntryInline(admin.TabularInline):
    model = RosterEntry
    extra = 0
    raw_id_fields = ['user']


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ['title', 'slug', 'github_id', 'roster', 'created_at']
    search_fields = ['title', 'slug']
    prepopulated_fields = {'slug': ('title',)}
    filter_horizontal = ['users']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Roster)
class RosterAdmin(admin.ModelAdmin):
    list_display = ['id', 'identifier_name', 'created_at']
    inlines = [RosterEntryInline]


@admin.register(RosterEntry)
class RosterEntryAdmin(admin.ModelAdmin):
    list_display = ['identifier', 'roster', 'user', 'created_at']
    search_fields = ['identifier', 'user__username']
    raw_id_fields = ['user']


@admin.register(LtiConfiguration)
class LtiConfigurationAdmin(admin.ModelAdmin):
    list_display = ['organization', 'consumer_key', 'lms_link', 'created_at']
    search_fields = ['organization__title', 'consumer_key']
