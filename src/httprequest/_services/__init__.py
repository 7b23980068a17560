from ._base_service import HttpService

__all__ = ["HttpService"]
