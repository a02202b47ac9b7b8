from .site_session import SiteSession, SiteSessionId

__all__ = ["SiteSession", "SiteSessionId"]
