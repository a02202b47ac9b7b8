from ogw.domain.account.util.di.provider import AccountProvider

__all__ = ["AccountProvider"]
