from __future__ import annotations

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

# A loja trabalha com horário "de parede" (sem fuso) no fuso local.
BR_TZ = ZoneInfo("America/Sao_Paulo")

END_OF_DAY = time(23, 59, 59, 999000)


def today_local(tz: ZoneInfo | None = None) -> date:
    return datetime.now(tz or BR_TZ).date()


def parse_date(raw: str | None) -> date | None:
    """
    Interpreta 'YYYY-MM-DD' (ou um ISO-8601 completo, usando só a data).
    Valor inválido devolve None: filtros de listagem ignoram datas ruins
    em vez de falhar a consulta inteira.
    """
    if not raw:
        return None
    raw = raw.strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def combine(d: date | None, t: time | None) -> datetime | None:
    """
    Junta data + hora num único datetime ingênuo (horário local).
    Se faltar qualquer uma das partes, não há timestamp.
    """
    if d is None or t is None:
        return None
    if t.tzinfo is not None:
        t = time(t.hour, t.minute, t.second, t.microsecond)
    return datetime.combine(d, t)


def start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min)


def end_of_day(d: date) -> datetime:
    return datetime.combine(d, END_OF_DAY)


def day_bounds(d: date) -> tuple[datetime, datetime]:
    """(00:00:00, 23:59:59.999) do dia, ambos inclusivos."""
    return start_of_day(d), end_of_day(d)


def iso(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    return dt.isoformat()
