from .json_store import StaticDataRepository

__all__ = ["StaticDataRepository"]
