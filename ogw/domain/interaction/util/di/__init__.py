from ogw.domain.interaction.util.di.provider import InteractionProvider

__all__ = ["InteractionProvider"]
