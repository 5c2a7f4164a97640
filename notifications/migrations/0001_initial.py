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
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('post', 'Post'), ('nok', 'Next of kin')], max_length=16)),
                ('sub_type', models.CharField(blank=True, default='', max_length=32)),
                ('content', models.JSONField(blank=True, default=dict, help_text="Payload for the client, e.g. {'veteran_id': 42, 'text': '...'}")),
                ('status', models.CharField(choices=[('new', 'New'), ('read', 'Read')], default='new', max_length=8)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='NotificationPreference',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('story_notifications_site', models.BooleanField(default=True)),
                ('story_notifications_email', models.BooleanField(default=True)),
                ('story_notifications_mobile', models.BooleanField(default=True)),
                ('photo_notifications_site', models.BooleanField(default=True)),
                ('photo_notifications_email', models.BooleanField(default=True)),
                ('photo_notifications_mobile', models.BooleanField(default=True)),
                ('testimonial_notifications_site', models.BooleanField(default=True)),
                ('testimonial_notifications_email', models.BooleanField(default=True)),
                ('testimonial_notifications_mobile', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='notification_preference', to=settings.AUTH_USER_MODEL)),
            ],
        ),
    ]
