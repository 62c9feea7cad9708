"""
Capabilities Routes - Inspect and directly execute registered capabilities.

Endpoints:
- GET /capabilities: List all capabilities with their input schemas
- GET /capabilities/{name}: One capability
- POST /capabilities/{name}/execute: Run a capability without the model
"""
from fastapi import APIRouter, Depends, HTTPException

from aide.capabilities import CapabilityRegistry, get_registry
from aide.capabilities.base import Capability, CapabilityContext
from aide.core.logging_config import get_logger
from aide.models.capabilities import (
    CapabilitiesListResponse,
    CapabilityExecutionRequest,
    CapabilityExecutionResponse,
    CapabilityInfo,
)
from aide.models.chat import ErrorResponse

logger = get_logger(__name__)

router = APIRouter(
    prefix="/capabilities",
    tags=["Capabilities"],
    responses={404: {"model": ErrorResponse, "description": "Capability not found"}}
)


def _require_capability(registry: CapabilityRegistry, name: str) -> Capability:
    capability = registry.try_get(name)
    if capability is None:
        raise HTTPException(status_code=404, detail=f"No capability named '{name}' is registered")
    return capability


@router.get(
    "",
    response_model=CapabilitiesListResponse,
    summary="List all registered capabilities"
)
def list_capabilities(registry: CapabilityRegistry = Depends(get_registry)) -> CapabilitiesListResponse:
    capabilities = [CapabilityInfo.from_capability(c) for c in registry.get_all()]
    return CapabilitiesListResponse(capabilities=capabilities, count=len(capabilities))


@router.get(
    "/{name}",
    response_model=CapabilityInfo,
    summary="Get details for a specific capability"
)
def get_capability(name: str, registry: CapabilityRegistry = Depends(get_registry)) -> CapabilityInfo:
    return CapabilityInfo.from_capability(_require_capability(registry, name))


@router.post(
    "/{name}/execute",
    response_model=CapabilityExecutionResponse,
    summary="Execute a capability directly (bypassing the model)"
)
def execute_capability(
    name: str,
    request: CapabilityExecutionRequest,
    registry: CapabilityRegistry = Depends(get_registry)
) -> CapabilityExecutionResponse:
    capability = _require_capability(registry, name)

    logger.info(f"Executing capability {name} with input: {(request.input or '')[:100]}")

    context = CapabilityContext(
        input=request.input or "",
        parameters=dict(request.parameters or {}),
    )

    try:
        result = capability.execute(context)
    except Exception as e:
        logger.exception(f"Error executing capability {name}")
        raise HTTPException(
            status_code=500,
            detail=f"An error occurred executing capability '{name}': {e}"
        )

    logger.info(f"Capability {name} execution completed. Success: {result.success}")

    return CapabilityExecutionResponse(**result.to_dict())
