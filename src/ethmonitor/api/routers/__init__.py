"""API routers."""

from ethmonitor.api.routers.wallets import router as wallets_router

__all__ = ["wallets_router"]
