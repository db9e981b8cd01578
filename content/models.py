"""
Section and SectionContent models.
"""
from django.db import IntegrityError, models, transaction
from django.db.models import F
from django.utils import timezone

from ai.models import Template
from sites.models import Page


class Section(models.Model):
    """
    An ordered slot on a page, bound to one template.
    """
    page = models.ForeignKey(Page, on_delete=models.CASCADE, related_name='sections')
    template = models.ForeignKey(Template, on_delete=models.PROTECT, related_name='sections')
    order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'sections'
        ordering = ['order', 'id']
        indexes = [
            models.Index(fields=['page', 'order'], name='sections_page_order_idx'),
        ]

    def __str__(self):
        return f"{self.template.name} #{self.order} on {self.page.slug}"


class SectionContentManager(models.Manager):

    def upsert(self, section, language, data, generated_by, generated_at=None, image_urls=None):
        """
        Create or update the single row for (section, language).

        Updates replace ``data`` and bump ``version``. Returns ``(content, created)``.
        """
        generated_at = generated_at or timezone.now()
        with transaction.atomic():
            existing = self.select_for_update().filter(section=section, language=language).first()
            if existing is None:
                try:
                    with transaction.atomic():
                        created = self.create(
                            section=section,
                            language=language,
                            data=data,
                            image_urls=image_urls or [],
                            generated_by=generated_by,
                            generated_at=generated_at,
                        )
                    return created, True
                except IntegrityError:
                    # Another worker inserted the row between our read and insert.
                    existing = self.select_for_update().get(section=section, language=language)

            existing.data = data
            existing.generated_by = generated_by
            existing.generated_at = generated_at
            existing.version = F('version') + 1
            update_fields = ['data', 'generated_by', 'generated_at', 'version', 'updated_at']
            if image_urls is not None:
                existing.image_urls = image_urls
                update_fields.append('image_urls')
            existing.save(update_fields=update_fields)
            existing.refresh_from_db(fields=['version'])
            return existing, False


class SectionContent(models.Model):
    """
    Generated (or hand-edited) data for one section in one language.
    """
    section = models.ForeignKey(Section, on_delete=models.CASCADE, related_name='contents')
    language = models.CharField(max_length=10)
    data = models.JSONField(default=dict)
    image_urls = models.JSONField(default=list, blank=True)
    generated_by = models.CharField(
        max_length=50,
        default='manual',
        help_text="Source tag, e.g. gemini or manual"
    )
    generated_at = models.DateTimeField(default=timezone.now)
    version = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = SectionContentManager()

    class Meta:
        db_table = 'section_contents'
        ordering = ['section', 'language']
        constraints = [
            models.UniqueConstraint(fields=['section', 'language'], name='unique_section_language'),
        ]

    def __str__(self):
        return f"Section {self.section_id} [{self.language}] v{self.version}"
