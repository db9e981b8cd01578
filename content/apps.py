from django.apps import AppConfig


class ContentConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'content'
    verbose_name = 'Section content'
    connections = None

    def ready(self):
        from .connections import ConnectionProvider
        self.connections = ConnectionProvider.from_settings()
