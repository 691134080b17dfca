from __future__ import annotations

import json
import logging
import re
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any

from app.gestao.errors import CnpjLookupError, ValidationError

logger = logging.getLogger(__name__)

_PESOS_1 = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
_PESOS_2 = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)


def limpar_cnpj(cnpj: str | None) -> str:
    return re.sub(r"\D", "", cnpj or "")


def _digito(numeros: str, pesos: tuple[int, ...]) -> int:
    resto = sum(int(n) * p for n, p in zip(numeros, pesos)) % 11
    return 0 if resto < 2 else 11 - resto


def validar_cnpj(cnpj: str | None) -> bool:
    """Check length, repeated-digit sequences and both check digits."""
    digits = limpar_cnpj(cnpj)
    if len(digits) != 14:
        return False
    if digits == digits[0] * 14:
        return False
    if _digito(digits[:12], _PESOS_1) != int(digits[12]):
        return False
    return _digito(digits[:13], _PESOS_2) == int(digits[13])


def formatar_cnpj(cnpj: str | None) -> str:
    d = limpar_cnpj(cnpj)
    if len(d) != 14:
        return cnpj or ""
    return f"{d[:2]}.{d[2:5]}.{d[5:8]}/{d[8:12]}-{d[12:]}"


def formatar_endereco(data: dict[str, Any]) -> str:
    parts = [str(data[k]) for k in ("logradouro", "numero", "complemento", "bairro", "municipio", "uf") if data.get(k)]
    if data.get("cep"):
        parts.append(f"CEP: {data['cep']}")
    return ", ".join(parts)


@dataclass(frozen=True)
class ReceitaWSClient:
    base_url: str = "https://receitaws.com.br/v1"
    timeout_seconds: int = 15

    def request_json(self, path: str) -> dict[str, Any]:
        url = self.base_url.rstrip("/") + path
        req = urllib.request.Request(url, method="GET")
        req.add_header("Accept", "application/json")
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_seconds) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as e:
            logger.warning("ReceitaWS HTTP %s for %s", e.code, path)
            raise CnpjLookupError("Erro ao consultar CNPJ", extra={"details": f"HTTP {e.code}"}) from e
        except (urllib.error.URLError, TimeoutError) as e:
            logger.warning("ReceitaWS unreachable for %s: %s", path, e)
            raise CnpjLookupError("Erro ao consultar CNPJ", extra={"details": str(e)}) from e
        try:
            return json.loads(raw.decode("utf-8"))
        except ValueError as e:
            raise CnpjLookupError("Erro ao consultar CNPJ", extra={"details": "Resposta inválida"}) from e

    def consultar(self, cnpj: str) -> dict[str, Any]:
        """
        Look a CNPJ up and map the answer onto Empresa fields.

        Raises ValidationError for an invalid CNPJ or one the service refuses,
        CnpjLookupError when the service cannot be reached.
        """
        digits = limpar_cnpj(cnpj)
        if not validar_cnpj(digits):
            raise ValidationError("CNPJ inválido")
        logger.info("Consultando CNPJ %s", digits)
        data = self.request_json(f"/cnpj/{urllib.parse.quote(digits)}")
        if data.get("status") == "ERROR":
            raise ValidationError(data.get("message") or "CNPJ não encontrado ou inválido")
        return {
            "cnpj": limpar_cnpj(data.get("cnpj")) or digits,
            "razao_social": data.get("nome") or "",
            "nome_fantasia": data.get("fantasia") or data.get("nome") or "",
            "telefone": data.get("telefone") or "",
            "email": data.get("email") or "",
            "endereco": formatar_endereco(data),
        }
