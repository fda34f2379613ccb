"""
API Module for Form Architect.

FastAPI application with routes for:
- Forms and public submissions
- Submission review and spam flags
- Template library and sample data
"""

from .main import create_app, app

__all__ = ["create_app", "app"]
