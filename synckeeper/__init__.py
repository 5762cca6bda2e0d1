"""
synckeeper — scheduled directory mirroring and credential-store cleanup.
"""

__version__ = "1.0.0"
