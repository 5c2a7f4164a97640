import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


STATUS_CHOICES = [('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')]


def moderatable_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('status', models.CharField(choices=STATUS_CHOICES, default='pending', max_length=16)),
        ('response', models.TextField(blank=True, default='')),
        ('view_count', models.PositiveIntegerField(default=0)),
        ('salute_count', models.PositiveIntegerField(default=0)),
        ('share_count', models.PositiveIntegerField(default=0)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
        ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
        ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
        ('veteran', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to='veterans.veteran')),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('uploads', '0001_initial'),
        ('veterans', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Story',
            fields=moderatable_fields() + [
                ('title', models.CharField(max_length=255)),
                ('text', models.TextField()),
            ],
            options={
                'verbose_name_plural': 'stories',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Photo',
            fields=moderatable_fields() + [
                ('title', models.CharField(max_length=255)),
                ('photo_file', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='photos', to='uploads.file')),
            ],
            options={
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Testimonial',
            fields=moderatable_fields() + [
                ('title', models.CharField(blank=True, default='', max_length=255)),
                ('text', models.TextField()),
            ],
            options={
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='PostSalute',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('post_type', models.CharField(choices=[('story', 'Story'), ('photo', 'Photo'), ('testimonial', 'Testimonial')], max_length=16)),
                ('post_id', models.PositiveBigIntegerField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='salutes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'constraints': [models.UniqueConstraint(fields=('user', 'post_type', 'post_id'), name='unique_salute_per_user_and_post')],
            },
        ),
    ]
