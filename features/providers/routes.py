"""Provider discovery HTTP routes."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from core.providers.registries import ProviderRegistry
from core.pydantic_schemas import ok
from features.dependencies import get_provider_registry
from features.providers.service import ProviderCatalogService

router = APIRouter(prefix="/providers", tags=["providers"])


@router.get("")
async def list_providers(registry: ProviderRegistry = Depends(get_provider_registry)) -> Dict[str, Any]:
    """List configured providers for every media kind."""

    return ok("Providers retrieved", data=ProviderCatalogService(registry).list_all())


@router.get("/{kind}")
async def list_kind_providers(
    kind: str,
    registry: ProviderRegistry = Depends(get_provider_registry),
) -> Dict[str, Any]:
    return ok("Providers retrieved", data=ProviderCatalogService(registry).list_kind(kind))


@router.get("/{kind}/models")
async def list_provider_models(
    kind: str,
    provider: Optional[str] = Query(None, description="Provider name; defaults to the kind's default"),
    registry: ProviderRegistry = Depends(get_provider_registry),
) -> Dict[str, Any]:
    return ok("Models retrieved", data=ProviderCatalogService(registry).list_models(kind, provider))
