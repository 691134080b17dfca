from datetime import date, datetime

from app.gestao import vencimento


def test_status_boundaries_with_plain_dates():
    hoje = date(2026, 1, 1)
    assert vencimento.status_vencimento(date(2025, 12, 31), hoje) == vencimento.EXPIRED
    assert vencimento.status_vencimento(date(2026, 1, 1), hoje) == vencimento.EXPIRING
    assert vencimento.status_vencimento(date(2026, 1, 31), hoje) == vencimento.EXPIRING
    assert vencimento.status_vencimento(date(2026, 2, 1), hoje) == vencimento.VALID


def test_dias_restantes_rounds_up_with_datetime_now():
    # Due tomorrow at midnight, now is mid-morning today: 0.6 days -> 1
    assert vencimento.dias_restantes(date(2026, 1, 2), datetime(2026, 1, 1, 10, 0)) == 1
    # Due today, now past midnight: -0.4 days -> 0, still expiring
    assert vencimento.dias_restantes(date(2026, 1, 1), datetime(2026, 1, 1, 10, 0)) == 0
    assert vencimento.status_vencimento(date(2026, 1, 1), datetime(2026, 1, 1, 10, 0)) == vencimento.EXPIRING
    # Due yesterday: -1.4 days -> -1
    assert vencimento.dias_restantes(date(2025, 12, 31), datetime(2026, 1, 1, 10, 0)) == -1


def test_dias_restantes_accepts_datetime_due_value():
    assert vencimento.dias_restantes(datetime(2026, 1, 11, 15, 30), date(2026, 1, 1)) == 10


def test_janela_is_inclusive_thirty_days():
    inicio, fim = vencimento.janela(date(2026, 2, 1))
    assert inicio == date(2026, 2, 1)
    assert fim == date(2026, 3, 3)


def test_labels_and_css_cover_every_status():
    for status in (vencimento.VALID, vencimento.EXPIRING, vencimento.EXPIRED):
        assert status in vencimento.LABELS
        assert status in vencimento.CSS_CLASSES
    assert vencimento.LABELS[vencimento.EXPIRED] == "Vencido"
