"""
Sample data command line tools for Form Architect.
"""

from .main import SampleReport, build_report

__all__ = ["SampleReport", "build_report"]
