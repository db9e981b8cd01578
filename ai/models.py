"""
Section templates: a content schema plus the prompt pair used to fill it.
"""
from django.db import models


class Template(models.Model):
    """
    A renderable section type shared across sites.

    ``schema`` is sent verbatim to the model as its structured output
    contract and is also what generated content is validated against.
    ``user_prompt_template`` may reference ``{placeholder}`` tokens that are
    filled from the generation context.
    """
    name = models.CharField(max_length=100, unique=True)
    display_name = models.CharField(max_length=255, blank=True)
    component_name = models.CharField(max_length=100)
    category = models.CharField(max_length=50, blank=True)
    description = models.TextField(blank=True)
    schema = models.JSONField(default=dict, blank=True)
    default_data = models.JSONField(default=dict, blank=True)
    system_prompt = models.TextField(blank=True)
    user_prompt_template = models.TextField()
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'templates'
        ordering = ['category', 'name']

    def __str__(self):
        return self.display_name or self.name
