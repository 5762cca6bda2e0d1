"""
Mirror — One-way directory mirroring through robocopy.

This module builds the robocopy command line, manages the per-run log
file around it, classifies the exit code and rotates old logs.
"""
