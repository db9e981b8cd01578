"""
Site and Page models.
"""
from django.db import models
from django.conf import settings


class Site(models.Model):
    """
    A tourism microsite (a city or a single attraction) built in the CMS.
    One operator can own multiple sites.
    """
    TYPE_CHOICES = [
        ('CITY', 'City'),
        ('ATTRACTION', 'Attraction'),
        ('REGION', 'Region'),
        ('CUSTOM', 'Custom'),
    ]
    STATUS_CHOICES = [
        ('DRAFT', 'Draft'),
        ('PUBLISHED', 'Published'),
        ('ARCHIVED', 'Archived'),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='sites'
    )
    name = models.CharField(max_length=255)
    subdomain = models.SlugField(
        max_length=100,
        unique=True,
        help_text="Subdomain the website app serves this site under"
    )
    domain = models.CharField(
        max_length=255,
        blank=True,
        null=True,
        help_text="Optional custom domain"
    )
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='CITY')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='DRAFT')
    languages = models.JSONField(
        default=list,
        blank=True,
        help_text="Language codes content is generated for, e.g. [\"en\", \"es\"]"
    )
    default_language = models.CharField(max_length=10, default='en')

    features = models.JSONField(default=dict, blank=True)
    theme = models.JSONField(default=dict, blank=True)
    seo_settings = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'sites'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='sites_status_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.subdomain})"

    @property
    def location_context(self):
        """Free-text location the prompts are written about; falls back to the site name."""
        return str((self.features or {}).get('locationContext') or self.name)

    def get_languages(self):
        """Configured languages, or the default language when none are set."""
        return list(self.languages) if self.languages else [self.default_language]

    def mark_published(self):
        self.status = 'PUBLISHED'
        self.save(update_fields=['status', 'updated_at'])


class Page(models.Model):
    TYPE_CHOICES = [
        ('HOME', 'Home'),
        ('CATEGORY', 'Category'),
        ('ATTRACTION', 'Attraction'),
        ('GUIDE', 'Guide'),
    ]
    STATUS_CHOICES = [
        ('DRAFT', 'Draft'),
        ('PUBLISHED', 'Published'),
    ]

    site = models.ForeignKey(Site, on_delete=models.CASCADE, related_name='pages')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='HOME')
    slug = models.SlugField(max_length=255)
    title = models.CharField(max_length=500, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='DRAFT')
    order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'pages'
        ordering = ['order', 'created_at']
        unique_together = [['site', 'slug']]
        indexes = [
            models.Index(fields=['site', 'type'], name='pages_site_type_idx'),
        ]

    def __str__(self):
        return f"{self.title or self.slug} ({self.site.name})"
