from price_worker.notifications.discord import DiscordNotifier, build_price_drop_embed

__all__ = ['DiscordNotifier', 'build_price_drop_embed']
