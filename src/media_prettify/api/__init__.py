"""External API clients for metadata lookup.

Submodules:
    tmdb -- TMDb search used as the metadata store's fetcher
"""
