# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/services/api_client.py

Cliente HTTP de la API LHDN MyInvois (httpx.AsyncClient).

Operaciones (una llamada HTTP cada una, sin reintentos internos):
- get_token: OAuth2 client-credentials (form-urlencoded)
- submit_documents: POST /api/v1.0/documentsubmissions/
- get_submission_status: GET /api/v1.0/documentsubmissions/{uid}
- cancel_document: PUT /api/v1.0/documents/state/{uuid}/state

Una respuesta no-2xx se convierte en LhdnTokenError / LhdnSubmissionError
con el status HTTP y el cuerpo. Los reintentos, si existen, son del llamador.

Autor: EInvoiceMY
Fecha: 2025-11-12
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from app.modules.lhdn.schemas import (
    LhdnCancelResponse,
    LhdnSubmissionStatusResponse,
    LhdnSubmitResponse,
    LhdnTokenResponse,
)
from app.shared.config import LHDN_BASE_URLS
from app.shared.errors import ExternalDependencyError, LhdnSubmissionError, LhdnTokenError

logger = logging.getLogger(__name__)

TOKEN_PATH = "/connect/token"
SUBMIT_DOCUMENTS_PATH = "/api/v1.0/documentsubmissions/"
TOKEN_SCOPE = "InvoicingAPI"

M = TypeVar("M", bound=BaseModel)


def get_lhdn_base_url(env: str) -> str:
    if env == "production":
        return LHDN_BASE_URLS["production"]
    return LHDN_BASE_URLS["sandbox"]


def submission_status_path(submission_uid: str) -> str:
    return f"/api/v1.0/documentsubmissions/{submission_uid}"


def cancel_document_path(document_uuid: str) -> str:
    return f"/api/v1.0/documents/state/{document_uuid}/state"


class LhdnApiClient:
    """Cliente delgado sobre httpx; no guarda estado entre llamadas."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    @classmethod
    def from_settings(cls, settings: Any) -> "LhdnApiClient":
        http_client = httpx.AsyncClient(
            base_url=get_lhdn_base_url(settings.lhdn_env),
            timeout=settings.lhdn_timeout_sec,
            headers={"User-Agent": f"{settings.app_name}/{settings.app_version}"},
        )
        logger.info("[LHDN] cliente configurado (env=%s)", settings.lhdn_env)
        return cls(http_client)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        action: str,
        error_cls: Type[ExternalDependencyError],
        access_token: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        try:
            response = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            logger.error("[LHDN] %s timeout: %s", action, e)
            raise error_cls(f"{action} timeout: {e}") from e
        except httpx.RequestError as e:
            logger.error("[LHDN] %s request error: %s", action, e)
            raise error_cls(f"{action} request error: {e}") from e

        if not response.is_success:
            body = response.text
            logger.error(
                "[LHDN] %s failed: status=%d body=%s",
                action,
                response.status_code,
                body[:500],
            )
            raise error_cls(
                f"{action} failed ({response.status_code}): {body}",
                http_status=response.status_code,
                body=body,
            )
        return response

    @staticmethod
    def _parse(
        response: httpx.Response,
        model: Type[M],
        *,
        action: str,
        error_cls: Type[ExternalDependencyError],
    ) -> M:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise error_cls(
                f"{action} returned an unexpected body: {e}",
                http_status=response.status_code,
                body=response.text,
            ) from e

    async def get_token(self, client_id: str, client_secret: str) -> LhdnTokenResponse:
        response = await self._request(
            "POST",
            TOKEN_PATH,
            action="Token request",
            error_cls=LhdnTokenError,
            data={
                "grant_type": "client_credentials",
                "client_id": client_id,
                "client_secret": client_secret,
                "scope": TOKEN_SCOPE,
            },
        )
        return self._parse(response, LhdnTokenResponse, action="Token request", error_cls=LhdnTokenError)

    async def submit_documents(self, access_token: str, payload: Dict[str, Any]) -> LhdnSubmitResponse:
        response = await self._request(
            "POST",
            SUBMIT_DOCUMENTS_PATH,
            action="Submission",
            error_cls=LhdnSubmissionError,
            access_token=access_token,
            json=payload,
        )
        return self._parse(response, LhdnSubmitResponse, action="Submission", error_cls=LhdnSubmissionError)

    async def get_submission_status(self, access_token: str, submission_uid: str) -> LhdnSubmissionStatusResponse:
        response = await self._request(
            "GET",
            submission_status_path(submission_uid),
            action="Status check",
            error_cls=LhdnSubmissionError,
            access_token=access_token,
        )
        return self._parse(
            response, LhdnSubmissionStatusResponse, action="Status check", error_cls=LhdnSubmissionError
        )

    async def cancel_document(self, access_token: str, document_uuid: str, reason: str) -> LhdnCancelResponse:
        response = await self._request(
            "PUT",
            cancel_document_path(document_uuid),
            action="Cancel",
            error_cls=LhdnSubmissionError,
            access_token=access_token,
            json={"status": "cancelled", "reason": reason},
        )
        return self._parse(response, LhdnCancelResponse, action="Cancel", error_cls=LhdnSubmissionError)


__all__ = [
    "LHDN_BASE_URLS",
    "get_lhdn_base_url",
    "submission_status_path",
    "cancel_document_path",
    "LhdnApiClient",
]

# Fin del archivo backend/app/modules/lhdn/services/api_client.py
