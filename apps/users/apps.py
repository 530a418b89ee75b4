from django.apps import AppConfig

class UsersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.users'   # full dotted path including the 'apps' folder
    verbose_name = "Accounts and projects"
