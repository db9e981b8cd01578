"""
Serializers for Site and Page read payloads.
"""
from rest_framework import serializers
from .models import Site, Page


class PublicSiteSerializer(serializers.ModelSerializer):
    """Site fields the website app needs to render; no ownership data."""

    class Meta:
        model = Site
        fields = (
            'id', 'name', 'subdomain', 'domain', 'type', 'status',
            'languages', 'default_language', 'features', 'theme', 'seo_settings',
        )
        read_only_fields = fields


class PageSummarySerializer(serializers.ModelSerializer):

    class Meta:
        model = Page
        fields = ('id', 'slug', 'title', 'type', 'status', 'order')
        read_only_fields = fields


class CacheInvalidationSerializer(serializers.Serializer):
    TYPE_CHOICES = ('site', 'page', 'section')

    type = serializers.ChoiceField(choices=TYPE_CHOICES)
    id = serializers.IntegerField(min_value=1)
