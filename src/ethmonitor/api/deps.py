"""Dependency injection for FastAPI."""

from fastapi import Depends, Request

from ethmonitor.app_context import AppContext, ContextRegistry
from ethmonitor.config.settings import get_settings
from ethmonitor.core.address import is_valid_address
from ethmonitor.core.exceptions import ValidationError
from ethmonitor.services import (
    BalanceService,
    TransferService,
    WalletAnalyzer,
)


def get_context_registry(request: Request) -> ContextRegistry:
    """Provide the registry owned by the running application."""
    return request.app.state.contexts


def get_app_context(
    registry: ContextRegistry = Depends(get_context_registry),
) -> AppContext:
    """Provide the AppContext for the configured API keys."""
    return registry.get(get_settings())


def get_balance_service(context: AppContext = Depends(get_app_context)) -> BalanceService:
    """Provide BalanceService instance."""
    return context.balance_service


def get_transfer_service(context: AppContext = Depends(get_app_context)) -> TransferService:
    """Provide TransferService instance."""
    return context.transfer_service


def get_wallet_analyzer(context: AppContext = Depends(get_app_context)) -> WalletAnalyzer:
    """Provide WalletAnalyzer instance."""
    return context.analyzer


def valid_address(address: str) -> str:
    """Path dependency rejecting anything but a 0x-prefixed 20-byte hex address."""
    if not is_valid_address(address):
        raise ValidationError(f"Invalid Ethereum address: {address}")
    return address
