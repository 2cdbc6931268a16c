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
            name='Roster',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('identifier_name', models.CharField(default='Identifiers', help_text="What the entries are called, e.g. 'Emails' or 'Student IDs'", max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name='Organization',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('slug', models.SlugField(max_length=200, unique=True)),
                ('github_id', models.BigIntegerField(blank=True, null=True, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('roster', models.ForeignKey(blank=True, help_text='Class list linked to this organization, if any', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='organizations', to='organizations.roster')),
                ('users', models.ManyToManyField(blank=True, help_text='Teachers who can manage this organization', related_name='organizations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['title'],
            },
        ),
        migrations.CreateModel(
            name='RosterEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('identifier', models.CharField(max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('roster', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='roster_entries', to='organizations.roster')),
                ('user', models.ForeignKey(blank=True, help_text='Account linked to this entry; empty until the student is linked', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='roster_entries', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name_plural': 'roster entries',
                'unique_together': {('roster', 'identifier')},
            },
        ),
        migrations.CreateModel(
            name='LtiConfiguration',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('consumer_key', models.CharField(max_length=255, unique=True)),
                ('shared_secret', models.CharField(max_length=255)),
                ('lms_link', models.URLField(blank=True)),
                ('context_id', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='lti_configuration', to='organizations.organization')),
            ],
            options={
                'verbose_name': 'LTI configuration',
            },
        ),
    ]
