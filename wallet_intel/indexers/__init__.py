from .tenero import TeneroClient

__all__ = ["TeneroClient"]
