import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('ai', '0001_initial'),
        ('sites', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Section',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('order', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('page', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sections', to='sites.page')),
                ('template', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sections', to='ai.template')),
            ],
            options={
                'db_table': 'sections',
                'ordering': ['order', 'id'],
                'indexes': [models.Index(fields=['page', 'order'], name='sections_page_order_idx')],
            },
        ),
        migrations.CreateModel(
            name='SectionContent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('language', models.CharField(max_length=10)),
                ('data', models.JSONField(default=dict)),
                ('image_urls', models.JSONField(blank=True, default=list)),
                ('generated_by', models.CharField(default='manual', help_text='Source tag, e.g. gemini or manual', max_length=50)),
                ('generated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('version', models.PositiveIntegerField(default=1)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('section', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='contents', to='content.section')),
            ],
            options={
                'db_table': 'section_contents',
                'ordering': ['section', 'language'],
                'constraints': [models.UniqueConstraint(fields=('section', 'language'), name='unique_section_language')],
            },
        ),
    ]
