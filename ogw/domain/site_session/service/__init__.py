from .site_session import SiteSessionService

__all__ = ["SiteSessionService"]
