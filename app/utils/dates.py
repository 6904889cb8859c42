"""pt-BR date labels used by the booking pages"""

from datetime import date, datetime

# Indexed by week day with Sunday as 0
WEEK_DAY_NAMES = [
    "domingo",
    "segunda-feira",
    "terça-feira",
    "quarta-feira",
    "quinta-feira",
    "sexta-feira",
    "sábado",
]

WEEK_DAY_SHORT_NAMES = ["DOM.", "SEG.", "TER.", "QUA.", "QUI.", "SEX.", "SÁB."]

MONTH_NAMES = [
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
]


def week_day_name(day: date) -> str:
    return WEEK_DAY_NAMES[(day.weekday() + 1) % 7]


def describe_date(day: date) -> str:
    """e.g. '04 de janeiro'"""
    return f"{day.day:02d} de {MONTH_NAMES[day.month - 1]}"


def describe_full_date(day: date) -> str:
    """e.g. '04 de janeiro de 2024'"""
    return f"{describe_date(day)} de {day.year}"


def hour_label(hour: int) -> str:
    """e.g. '08:00h'"""
    return f"{hour:02d}:00h"


def time_label(value: datetime) -> str:
    return f"{value.hour:02d}:{value.minute:02d}h"


def month_title(month: int) -> str:
    return MONTH_NAMES[month - 1].capitalize()
