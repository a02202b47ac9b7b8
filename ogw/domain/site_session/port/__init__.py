from .repository import SiteSessionRepository

__all__ = ["SiteSessionRepository"]
