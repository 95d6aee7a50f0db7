from .directory_cache import DirectoryCache

__all__ = ["DirectoryCache"]
