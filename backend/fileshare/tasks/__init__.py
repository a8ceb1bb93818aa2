"""Celery tasks. Modules are imported by the worker through celery_app.conf.imports."""
