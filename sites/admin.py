from django.contrib import admin
from .models import Site, Page


@admin.register(Site)
class SiteAdmin(admin.ModelAdmin):
    list_display = ('name', 'subdomain', 'type', 'status', 'user', 'created_at')
    list_filter = ('type', 'status', 'created_at')
    search_fields = ('name', 'subdomain', 'domain', 'user__email')
    readonly_fields = ('created_at', 'updated_at')


@admin.register(Page)
class PageAdmin(admin.ModelAdmin):
    list_display = ('slug', 'title', 'site', 'type', 'status', 'order')
    list_filter = ('type', 'status')
    search_fields = ('slug', 'title', 'site__name')
    readonly_fields = ('created_at', 'updated_at')
