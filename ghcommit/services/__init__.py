"""
Services package.

Contains the GitHub API layer and the commit-building services on top of it.
"""
