"""
API Routes for Form Architect.
"""

from . import forms, submissions, scoring, templates

__all__ = ["forms", "submissions", "scoring", "templates"]
