from datetime import date, timedelta

import pytest

from app.gestao import create_app
from app.gestao.db import session_scope
from app.gestao.models import Base, Documento, Empresa, Responsavel
from app.gestao.modules.dashboard import service


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("UPLOAD_ROOT", str(tmp_path / "uploads"))

    app = create_app()
    Base.metadata.create_all(bind=app.extensions["sqlalchemy_engine"])
    with session_scope(app) as s:
        e = Empresa(razao_social="Acme", cnpj="11222333000181", telefone="1", email="acme@example.com")
        r = Responsavel(nome="Ana", email="ana@example.com", telefone="1", funcao="Fiscal", empresa=e)
        s.add_all([e, r])
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


def _add_documento(app, nome: str, vencimento: date) -> int:
    with session_scope(app) as s:
        e = s.query(Empresa).one()
        r = s.query(Responsavel).one()
        d = Documento(
            nome=nome,
            tipo="OUTROS",
            empresa=e,
            responsavel=r,
            data_emissao=vencimento - timedelta(days=365),
            data_vencimento=vencimento,
        )
        s.add(d)
        s.flush()
        return d.id


def test_empty_dashboard(client):
    r = client.get("/api/dashboard")
    assert r.status_code == 200
    assert r.json == {"empresas": 1, "documentos": 0, "vencidos": 0, "proximos": 0, "proximosVencimentos": []}


def test_document_due_in_five_days_counts_as_proximo(app, client):
    before = client.get("/api/dashboard").json
    doc_id = _add_documento(app, "Alvará", date.today() + timedelta(days=5))

    after = client.get("/api/dashboard").json
    assert after["proximos"] == before["proximos"] + 1
    assert after["vencidos"] == before["vencidos"]
    assert [d["id"] for d in after["proximosVencimentos"]] == [doc_id]
    assert after["proximosVencimentos"][0]["empresa_nome"] == "Acme"
    assert after["proximosVencimentos"][0]["dias_restantes"] == 5


def test_document_due_yesterday_counts_as_vencido(app, client):
    before = client.get("/api/dashboard").json
    _add_documento(app, "Certidão", date.today() - timedelta(days=1))

    after = client.get("/api/dashboard").json
    assert after["vencidos"] == before["vencidos"] + 1
    assert after["proximos"] == before["proximos"]
    assert after["proximosVencimentos"] == []


def test_bucket_edges_match_status_field(app):
    hoje = date(2026, 3, 1)
    for delta in (-1, 0, 30, 31):
        _add_documento(app, f"d{delta}", hoje + timedelta(days=delta))

    with session_scope(app) as s:
        stats = service.estatisticas(s, hoje)
    assert stats["estatisticas"]["vencidos"] == 1
    assert stats["estatisticas"]["proximos"] == 2
    assert stats["estatisticas"]["validos"] == 1
    assert [d["nome"] for d in stats["documentosVencidos"]] == ["d-1"]
    assert [d["nome"] for d in stats["proximosVencimentos"]] == ["d0", "d30"]
    assert {d["status_vencimento"] for d in stats["proximosVencimentos"]} == {"expiring"}


def test_dashboard_lists_at_most_ten_upcoming(app):
    hoje = date(2026, 3, 1)
    for i in range(12):
        _add_documento(app, f"doc{i:02d}", hoje + timedelta(days=i))

    with session_scope(app) as s:
        data = service.dashboard(s, hoje)
    assert data["proximos"] == 12
    assert len(data["proximosVencimentos"]) == 10
    assert data["proximosVencimentos"][0]["nome"] == "doc00"


def test_alertas(app, client):
    _add_documento(app, "Vencido", date.today() - timedelta(days=3))
    _add_documento(app, "Proximo", date.today() + timedelta(days=3))
    _add_documento(app, "Valido", date.today() + timedelta(days=90))

    r = client.get("/api/alertas")
    assert r.status_code == 200
    assert r.json["totalVencidos"] == 1
    assert r.json["totalProximos"] == 1
    assert r.json["totalAlertas"] == 2
    assert r.json["vencidos"][0]["nome"] == "Vencido"


def test_estatisticas_endpoint(app, client):
    _add_documento(app, "Valido", date.today() + timedelta(days=90))
    r = client.get("/api/dashboard/estatisticas")
    assert r.status_code == 200
    assert r.json["estatisticas"]["validos"] == 1
    assert r.json["documentosProximos"] == []


def test_calendario_groups_by_day(app, client):
    _add_documento(app, "A", date(2026, 5, 3))
    _add_documento(app, "B", date(2026, 5, 3))
    _add_documento(app, "C", date(2026, 5, 31))
    _add_documento(app, "Fora", date(2026, 6, 1))

    r = client.get("/api/calendario/2026/5")
    assert r.status_code == 200
    assert r.json["ano"] == 2026
    assert r.json["mes"] == 5
    assert r.json["total"] == 3
    assert [d["nome"] for d in r.json["dias"]["3"]] == ["A", "B"]
    assert [d["nome"] for d in r.json["dias"]["31"]] == ["C"]

    assert client.get("/api/calendario/2026/13").status_code == 400


def test_document_created_through_api_shows_up_as_proximo(client):
    import io

    with session_scope(client.application) as s:
        empresa_id = s.query(Empresa).one().id
        responsavel_id = s.query(Responsavel).one().id
    before = client.get("/api/dashboard").json

    vencimento = date.today() + timedelta(days=5)
    r = client.post(
        "/api/documentos",
        data={
            "nome": "TFF 2026",
            "tipo": "TFF - SALVADOR",
            "empresa_id": str(empresa_id),
            "responsavel_id": str(responsavel_id),
            "data_emissao": (vencimento - timedelta(days=365)).isoformat(),
            "data_vencimento": vencimento.isoformat(),
            "arquivo": (io.BytesIO(b"%PDF"), "tff.pdf", "application/pdf"),
        },
        content_type="multipart/form-data",
    )
    assert r.status_code == 201

    after = client.get("/api/dashboard").json
    assert after["documentos"] == before["documentos"] + 1
    assert after["proximos"] == before["proximos"] + 1
    assert after["vencidos"] == before["vencidos"]
    assert [d["id"] for d in after["proximosVencimentos"]] == [r.json["id"]]
    assert after["proximosVencimentos"][0]["dias_restantes"] == 5


def test_list_documentos_limit_is_applied_in_the_query(app):
    from app.gestao.modules.documentos.service import list_documentos

    hoje = date(2026, 3, 1)
    for i in range(5):
        _add_documento(app, f"doc{i}", hoje + timedelta(days=i))

    with session_scope(app) as s:
        docs = list_documentos(s, status="proximos", referencia=hoje, limit=3)
    assert [d.nome for d in docs] == ["doc0", "doc1", "doc2"]
