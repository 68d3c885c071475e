"""
Korean Word Database Crawler

Fetches Standard Korean Language Dictionary entries by numeric id and
collects the distinct headwords into a plain text file.
"""

__version__ = "1.0.0"
