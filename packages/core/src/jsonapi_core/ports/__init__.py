from .adapter import IStorageAdapter

__all__ = ["IStorageAdapter"]
