"""
serpscrape - paginated search-result scraping exposed as an agent tool.
"""

__version__ = "0.1.0"
