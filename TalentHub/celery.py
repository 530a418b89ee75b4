import os
from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'TalentHub.settings')

app = Celery('TalentHub')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
