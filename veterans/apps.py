from django.apps import AppConfig


class VeteransConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'veterans'
