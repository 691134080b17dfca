import io
import urllib.error

import pytest

from app.gestao.errors import CnpjLookupError, ValidationError
from app.gestao.modules.empresas import cnpj


@pytest.mark.parametrize("value", ["11222333000181", "11.222.333/0001-81", "12345678000195", "11444777000161"])
def test_valid_cnpjs(value):
    assert cnpj.validar_cnpj(value)


@pytest.mark.parametrize("value", ["", None, "1122233300018", "11222333000182", "00000000000000", "abc"])
def test_invalid_cnpjs(value):
    assert not cnpj.validar_cnpj(value)


def test_formatar_cnpj():
    assert cnpj.formatar_cnpj("11222333000181") == "11.222.333/0001-81"
    assert cnpj.formatar_cnpj("123") == "123"


def test_consultar_rejects_invalid_before_calling_service(monkeypatch):
    client = cnpj.ReceitaWSClient()

    def boom(self, path):
        raise AssertionError("should not be called")

    monkeypatch.setattr(cnpj.ReceitaWSClient, "request_json", boom)
    with pytest.raises(ValidationError):
        client.consultar("11222333000182")


def test_request_json_maps_transport_errors(monkeypatch):
    def refused(req, timeout):
        raise urllib.error.URLError("connection refused")

    monkeypatch.setattr(cnpj.urllib.request, "urlopen", refused)
    with pytest.raises(CnpjLookupError) as exc:
        cnpj.ReceitaWSClient(base_url="http://receitaws.invalid/v1").request_json("/cnpj/11222333000181")
    assert exc.value.status_code == 502


def test_request_json_maps_http_errors(monkeypatch):
    def too_many(req, timeout):
        raise urllib.error.HTTPError(req.full_url, 429, "Too Many Requests", {}, io.BytesIO(b""))

    monkeypatch.setattr(cnpj.urllib.request, "urlopen", too_many)
    with pytest.raises(CnpjLookupError) as exc:
        cnpj.ReceitaWSClient().request_json("/cnpj/11222333000181")
    assert exc.value.extra["details"] == "HTTP 429"
