"""JaaS video token issuance endpoints."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from ..core.config import Settings, get_settings
from ..core.errors import ConfigurationError, TelemedError, ValidationError
from ..schemas.jaas import TokenErrorResponse
from ..services.jaas_token import IssueResult, JaasTokenIssuer, get_issuer

router = APIRouter()

NO_STORE_HEADERS = {"Cache-Control": "no-cache, no-store, must-revalidate"}
PREFLIGHT_MAX_AGE = "86400"
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": TokenErrorResponse},
    500: {"model": TokenErrorResponse},
}


def _cors_headers(settings: Settings) -> dict[str, str]:
    origin = settings.cors_allow_origins[0] if settings.cors_allow_origins else "*"
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Access-Control-Allow-Credentials": "true",
    }


def _render(result: IssueResult, settings: Settings) -> JSONResponse:
    error = result.error
    if error is None and result.token is not None:
        content = {"success": True, **result.token.model_dump(by_alias=True, mode="json")}
        return JSONResponse(content=content, headers=NO_STORE_HEADERS)

    if error is None:
        error = TelemedError()
    include_details = not (isinstance(error, ConfigurationError) and settings.is_production)
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_payload(include_details=include_details),
        headers=NO_STORE_HEADERS,
    )


@router.post("/token", responses=ERROR_RESPONSES)
async def create_token(
    payload: Any = Body(default=None),
    issuer: JaasTokenIssuer = Depends(get_issuer),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Issue a signed JaaS token for the requested room and participant."""

    if not isinstance(payload, dict):
        result = IssueResult(error=ValidationError("Request body must be a JSON object"))
    else:
        result = issuer.issue(payload)
    return _render(result, settings)


@router.get("/token", responses=ERROR_RESPONSES)
async def create_token_from_query(
    request: Request,
    issuer: JaasTokenIssuer = Depends(get_issuer),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Same as POST, with the request fields passed as query parameters."""

    params: dict[str, Any] = {key: value for key, value in request.query_params.items() if value != ""}
    return _render(issuer.issue(params), settings)


@router.options("/token")
async def token_preflight(settings: Settings = Depends(get_settings)) -> Response:
    """Answer preflight requests from the dashboard origin."""

    headers = _cors_headers(settings)
    headers["Access-Control-Max-Age"] = PREFLIGHT_MAX_AGE
    return Response(status_code=status.HTTP_200_OK, headers=headers)
