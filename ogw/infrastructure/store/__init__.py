from ogw.infrastructure.store.di import StoreProvider

__all__ = ["StoreProvider"]
