import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='UserProfile',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('github_login', models.CharField(blank=True, db_index=True, max_length=100)),
                ('github_uid', models.BigIntegerField(blank=True, null=True, unique=True)),
                ('site_admin', models.BooleanField(default=False, help_text='Site admins can access every organization')),
                ('feature_flags', models.JSONField(blank=True, default=list, help_text='Feature flags enabled for this user, e.g. ["search_assignments"]')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='profile', to=settings.AUTH_USER_MODEL)),
            ],
        ),
    ]
