import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import assignments.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('organizations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Deadline',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('deadline_at', models.DateTimeField()),
                ('processed_at', models.DateTimeField(blank=True, help_text='When submissions were recorded for this deadline', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['deadline_at'],
            },
        ),
        migrations.CreateModel(
            name='Assignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('slug', models.SlugField(blank=True, help_text='Repository prefix; generated from the title when left blank', max_length=200)),
                ('public_repo', models.BooleanField(default=True, help_text='Whether student repositories are public')),
                ('students_are_repo_admins', models.BooleanField(default=False, help_text='Give students admin access to their repositories')),
                ('invitations_enabled', models.BooleanField(default=True, help_text='Whether the invitation link accepts new students')),
                ('template_repos_enabled', models.BooleanField(default=False, help_text='Create student repositories from the starter code template')),
                ('starter_code_repo_id', models.BigIntegerField(blank=True, help_text='GitHub id of the starter code repository', null=True)),
                ('deleted_at', models.DateTimeField(blank=True, help_text='Set when the assignment is queued for deletion', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('creator', models.ForeignKey(blank=True, help_text='Teacher who created this assignment', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_assignments', to=settings.AUTH_USER_MODEL)),
                ('deadline', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assignment', to='assignments.deadline')),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='organizations.organization')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['organization', 'slug'], name='assignment_org_slug_idx')],
            },
        ),
        migrations.CreateModel(
            name='AssignmentInvitation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(default=assignments.models.generate_invitation_key, max_length=64, unique=True)),
                ('short_key', models.CharField(default=assignments.models.generate_invitation_short_key, max_length=16, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('assignment', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='assignment_invitation', to='assignments.assignment')),
            ],
        ),
        migrations.CreateModel(
            name='AssignmentRepo',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('github_repo_id', models.BigIntegerField()),
                ('submission_sha', models.CharField(blank=True, help_text='Head commit recorded when the deadline passed', max_length=40)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('assignment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignment_repos', to='assignments.assignment')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignment_repos', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'unique_together': {('assignment', 'user')},
            },
        ),
    ]
