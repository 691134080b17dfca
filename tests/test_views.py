import io
from datetime import date, timedelta

import pytest

from app.gestao import create_app
from app.gestao.db import session_scope
from app.gestao.models import Base, Documento, Empresa, Responsavel

CSRF = "test-csrf-token"


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("UPLOAD_ROOT", str(tmp_path / "uploads"))

    app = create_app()
    Base.metadata.create_all(bind=app.extensions["sqlalchemy_engine"])
    with session_scope(app) as s:
        e = Empresa(razao_social="Acme Serviços", cnpj="11222333000181", telefone="1", email="acme@example.com")
        r = Responsavel(nome="Ana Lima", email="ana@example.com", telefone="1", funcao="Fiscal", empresa=e)
        s.add_all([e, r])
        s.add(
            Documento(
                nome="Alvará Vencido",
                tipo="ALVARÁ SANITÁRIO",
                empresa=e,
                responsavel=r,
                data_emissao=date.today() - timedelta(days=400),
                data_vencimento=date.today() - timedelta(days=2),
            )
        )

    c = app.test_client()
    with c.session_transaction() as sess:
        sess["csrf_token"] = CSRF
    return c


def _ids(client):
    with session_scope(client.application) as s:
        return s.query(Empresa).one().id, s.query(Responsavel).one().id, s.query(Documento).one().id


def test_pages_render(client):
    _, _, doc_id = _ids(client)
    for url in ("/", "/documentos/", "/documentos/novo", f"/documentos/{doc_id}", f"/documentos/{doc_id}/editar", "/empresas/", "/empresas/nova", "/responsaveis/", "/responsaveis/novo", "/calendario"):
        r = client.get(url)
        assert r.status_code == 200, url


def test_dashboard_shows_expired_badge(client):
    html = client.get("/").get_data(as_text=True)
    assert "Alvará Vencido" in html
    html = client.get("/documentos/?status=vencidos").get_data(as_text=True)
    assert "badge-danger" in html
    assert "Vencido</span>" in html


def test_post_without_csrf_is_rejected(client):
    r = client.post("/empresas/nova", data={"razao_social": "X"})
    assert r.status_code == 400


def test_create_document_through_form(client):
    empresa_id, responsavel_id, _ = _ids(client)
    r = client.post(
        "/documentos/novo",
        data={
            "csrf_token": CSRF,
            "nome": "Certidão Federal",
            "tipo": "CERTIDÃO FEDERAL",
            "empresa_id": str(empresa_id),
            "responsavel_id": str(responsavel_id),
            "data_emissao": "2026-01-01",
            "data_vencimento": (date.today() + timedelta(days=10)).isoformat(),
            "arquivo": (io.BytesIO(b"%PDF"), "certidao.pdf", "application/pdf"),
        },
        content_type="multipart/form-data",
    )
    assert r.status_code == 302
    with session_scope(client.application) as s:
        d = s.query(Documento).filter(Documento.nome == "Certidão Federal").one()
        assert d.arquivo_path.endswith("-certidao.pdf")


def test_form_errors_are_flashed(client):
    r = client.post("/documentos/novo", data={"csrf_token": CSRF, "nome": "Incompleto"})
    assert r.status_code == 400
    assert "Preencha todos os campos obrigatórios" in r.get_data(as_text=True)


def test_empresa_delete_with_documents_flashes_error(client):
    empresa_id, _, _ = _ids(client)
    r = client.post(f"/empresas/{empresa_id}/excluir", data={"csrf_token": CSRF}, follow_redirects=True)
    assert r.status_code == 200
    assert "Empresa possui documentos vinculados" in r.get_data(as_text=True)


def test_andamento_and_status_through_detail_page(client):
    _, responsavel_id, doc_id = _ids(client)
    r = client.post(
        f"/documentos/{doc_id}/andamentos",
        data={"csrf_token": CSRF, "responsavel_id": str(responsavel_id), "descricao": "Pedido de renovação protocolado", "status": "em_andamento"},
        follow_redirects=True,
    )
    assert "Pedido de renovação protocolado" in r.get_data(as_text=True)

    client.post(f"/documentos/{doc_id}/status", data={"csrf_token": CSRF, "status_geral": "concluido"})
    with session_scope(client.application) as s:
        assert s.get(Documento, doc_id).status_geral == "concluido"


def test_missing_document_page_is_404(client):
    r = client.get("/documentos/999")
    assert r.status_code == 404
    assert "Documento não encontrado" in r.get_data(as_text=True)


def test_calendar_page_lists_month_documents(client):
    venc = date.today() - timedelta(days=2)
    r = client.get(f"/calendario?ano={venc.year}&mes={venc.month}")
    assert r.status_code == 200
    assert "Alvará Vencido" in r.get_data(as_text=True)
