"""
The Celery application for the worker process.

Celery needs an application instance, not a factory, so start it with:

  $ celery --app=openeuler_webhooks.worker worker
"""

from openeuler_webhooks import create_celery_app

application = create_celery_app(config="worker")
