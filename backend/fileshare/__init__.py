"""
fileshare

Access-control and object-lifecycle core for a multi-tenant file-sharing
service.
"""

__version__ = "0.1.0"
