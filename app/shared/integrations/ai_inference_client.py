# -*- coding: utf-8 -*-
"""
backend/app/shared/integrations/ai_inference_client.py

Cliente de inferencia IA (REST estilo Workers AI) para:
- OCR de imágenes con modelo de visión (texto literal)
- Extracción estructurada en JSON (factura)

Contrato único:
    run(model, {messages, response_format?, max_tokens}) -> {"response": str}

Autor: EInvoiceMY
Fecha: 2025-11-28
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import aiohttp

from app.shared.errors import AiExtractionError

logger = logging.getLogger(__name__)


@runtime_checkable
class AiInferenceClient(Protocol):
    async def run(self, model: str, payload: Dict[str, Any]) -> Dict[str, str]: ...


class WorkersAiClient:
    """
    Cliente HTTP (aiohttp) para el endpoint `/accounts/{account}/ai/run/{model}`.

    No reintenta: los reintentos pertenecen a la cola que ejecuta el pipeline.
    """

    def __init__(
        self,
        *,
        base_url: str,
        account_id: str,
        api_token: str,
        timeout_sec: float = 120.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.account_id = account_id
        self.api_token = api_token
        self.timeout_sec = timeout_sec

    def _url(self, model: str) -> str:
        return f"{self.base_url}/accounts/{self.account_id}/ai/run/{model}"

    async def run(self, model: str, payload: Dict[str, Any]) -> Dict[str, str]:
        """
        Ejecuta un modelo y devuelve {"response": str}.

        Raises:
            AiExtractionError: Si el endpoint responde con error o sin 'response'
        """
        headers = {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }
        logger.info("[ai_run] model=%s", model, extra={"model": model})

        async with aiohttp.ClientSession() as session:
            try:
                async with session.post(
                    self._url(model),
                    headers=headers,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=self.timeout_sec),
                ) as resp:
                    body_text = await resp.text()
                    if resp.status != 200:
                        raise AiExtractionError(
                            f"AI inference error {resp.status}: {body_text[:500]}"
                        )
            except aiohttp.ClientError as e:
                raise AiExtractionError(f"AI inference request failed: {e}") from e

        try:
            body = json.loads(body_text)
        except json.JSONDecodeError as e:
            raise AiExtractionError("AI inference returned a non-JSON envelope") from e

        result: Optional[Any] = body.get("result", body) if isinstance(body, dict) else None
        response = result.get("response") if isinstance(result, dict) else None
        if response is None:
            raise AiExtractionError("AI inference returned no response")

        # Con response_format=json_schema algunos modelos devuelven el objeto ya parseado
        if not isinstance(response, str):
            response = json.dumps(response)
        return {"response": response}


__all__ = ["AiInferenceClient", "WorkersAiClient"]

# Fin del archivo backend/app/shared/integrations/ai_inference_client.py
