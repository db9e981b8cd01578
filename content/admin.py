from django.contrib import admin
from .models import Section, SectionContent


class SectionContentInline(admin.TabularInline):
    model = SectionContent
    extra = 0
    fields = ('language', 'version', 'generated_by', 'generated_at')
    readonly_fields = ('version', 'generated_at')


@admin.register(Section)
class SectionAdmin(admin.ModelAdmin):
    list_display = ('id', 'page', 'template', 'order')
    list_filter = ('template',)
    search_fields = ('page__slug', 'page__site__name', 'template__name')
    inlines = [SectionContentInline]


@admin.register(SectionContent)
class SectionContentAdmin(admin.ModelAdmin):
    list_display = ('section', 'language', 'version', 'generated_by', 'generated_at')
    list_filter = ('language', 'generated_by')
    readonly_fields = ('created_at', 'updated_at')
