# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
gh-ask - search a repository's GitHub Discussions from the command line.
"""

__version__ = '1.0.0'
