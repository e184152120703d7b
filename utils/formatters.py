from datetime import date, datetime

from models.sale import METODOS_PAGAMENTO


def format_currency(value) -> str:
    """
    Formata um número como moeda em reais (R$ 1.234,56).
    """
    value = float(value or 0.0)
    return f"R$ {value:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def format_date(d: date | datetime | None) -> str:
    """
    Formata datas no padrão brasileiro.
    """
    if d is None:
        return "-"
    if isinstance(d, datetime):
        return d.strftime("%d/%m/%Y %H:%M")
    return d.strftime("%d/%m/%Y")


def format_metodo(metodo: str | None) -> str:
    return METODOS_PAGAMENTO.get(metodo or "", "Não informado")
