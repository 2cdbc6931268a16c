from django.db import models
from django.contrib.auth.models import User
from django.db.models.signals import post_save
from django.dispatch import receiver
import uuid


class UserProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # GitHub identity
    github_login = models.CharField(max_length=100, blank=True, db_index=True)
    github_uid = models.BigIntegerField(null=True, blank=True, unique=True)

    # Role flags
    site_admin = models.BooleanField(
        default=False,
        help_text="Site admins can access every organization"
    )

    # Per-user feature flags (names listed in settings.FEATURE_FLAGS are on for everyone)
    feature_flags = models.JSONField(
        default=list,
        blank=True,
        help_text="Feature flags enabled for this user, e.g. [\"search_assignments\"]"
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user.username}'s Profile"

    @property
    def display_login(self):
        return self.github_login or self.user.username


@receiver(post_save, sender=User)
def create_user_profile(sender, instance, created, **kwargs):
    if created:
        UserProfile.objects.create(user=instance)

@receiver(post_save, sender=User)
def save_user_profile(sender, instance, **kwargs):
    if hasattr(instance, 'profile'):
        instance.profile.save()
