"""
CLI commands, registered on the group in synckeeper.main.
"""
