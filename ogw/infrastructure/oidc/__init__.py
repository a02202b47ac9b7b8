from ogw.infrastructure.oidc.di import OIDCInfraProvider

__all__ = ["OIDCInfraProvider"]
