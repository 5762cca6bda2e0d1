"""
Configuration — environment settings and YAML job files.
"""

from .loader import Settings, JobFile, load_job_file

__all__ = ["Settings", "JobFile", "load_job_file"]
