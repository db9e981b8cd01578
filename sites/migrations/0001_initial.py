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
            name='Site',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('subdomain', models.SlugField(help_text='Subdomain the website app serves this site under', max_length=100, unique=True)),
                ('domain', models.CharField(blank=True, help_text='Optional custom domain', max_length=255, null=True)),
                ('type', models.CharField(choices=[('CITY', 'City'), ('ATTRACTION', 'Attraction'), ('REGION', 'Region'), ('CUSTOM', 'Custom')], default='CITY', max_length=20)),
                ('status', models.CharField(choices=[('DRAFT', 'Draft'), ('PUBLISHED', 'Published'), ('ARCHIVED', 'Archived')], default='DRAFT', max_length=20)),
                ('languages', models.JSONField(blank=True, default=list, help_text='Language codes content is generated for, e.g. ["en", "es"]')),
                ('default_language', models.CharField(default='en', max_length=10)),
                ('features', models.JSONField(blank=True, default=dict)),
                ('theme', models.JSONField(blank=True, default=dict)),
                ('seo_settings', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sites', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'sites',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status'], name='sites_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='Page',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('HOME', 'Home'), ('CATEGORY', 'Category'), ('ATTRACTION', 'Attraction'), ('GUIDE', 'Guide')], default='HOME', max_length=20)),
                ('slug', models.SlugField(max_length=255)),
                ('title', models.CharField(blank=True, max_length=500)),
                ('status', models.CharField(choices=[('DRAFT', 'Draft'), ('PUBLISHED', 'Published')], default='DRAFT', max_length=20)),
                ('order', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('site', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pages', to='sites.site')),
            ],
            options={
                'db_table': 'pages',
                'ordering': ['order', 'created_at'],
                'indexes': [models.Index(fields=['site', 'type'], name='pages_site_type_idx')],
                'unique_together': {('site', 'slug')},
            },
        ),
    ]
