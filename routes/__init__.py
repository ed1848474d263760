"""
Routes package for the CRM application.
Blueprints registered on the Flask application live here.
"""
from .filters import filters_bp

__all__ = ['filters_bp']
