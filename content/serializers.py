"""
Serializers for section content and generation requests.
"""
from rest_framework import serializers
from .models import SectionContent


class SectionContentSerializer(serializers.ModelSerializer):
    """One section's content as the website app renders it."""
    section_id = serializers.IntegerField(source='section.id', read_only=True)
    order = serializers.IntegerField(source='section.order', read_only=True)
    template = serializers.CharField(source='section.template.name', read_only=True)
    component = serializers.CharField(source='section.template.component_name', read_only=True)

    class Meta:
        model = SectionContent
        fields = (
            'section_id', 'order', 'template', 'component', 'language',
            'data', 'image_urls', 'version', 'generated_by', 'generated_at',
        )
        read_only_fields = fields


class GenerateContentSerializer(serializers.Serializer):
    language = serializers.CharField(max_length=10, required=False, allow_blank=False)
    regenerate = serializers.BooleanField(required=False, default=False)


class RegenerateSectionSerializer(serializers.Serializer):
    language = serializers.CharField(max_length=10, required=False, allow_blank=False)
