from .client import HiroClient

__all__ = ["HiroClient"]
