"""
Domain layer

Pure entities, value objects, repository interfaces and domain services.
Nothing in this package imports infrastructure libraries.
"""
