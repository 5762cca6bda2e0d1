"""
Credentials — Remove stored Windows credentials whose target matches a pattern.
"""
