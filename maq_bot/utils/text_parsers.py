import re
from typing import Optional


RESET_PATTERN = re.compile(r"^(menu|voltar|menu principal|cancelar)$", re.IGNORECASE)

GREETING_PATTERN = re.compile(r"^(oi|olá|ola|bom dia|boa tarde|boa noite)[!.]?$", re.IGNORECASE)

# Text of the "I'm interested" link shared in the business ads
INTEREST_PATTERN = re.compile(r"Tenho interesse no serviço da MAQ SERVICE", re.IGNORECASE)

DEFAULT_NAME = "Cliente"


def normalize_text(text: Optional[str]) -> str:
    """
    Strip surrounding whitespace. None becomes empty string.
    """
    return (text or "").strip()


def is_reset_command(text: str) -> bool:
    """
    Whole-string, case-insensitive match against menu/voltar/menu principal/cancelar.
    """
    return bool(RESET_PATTERN.match(text))


def is_greeting(text: str) -> bool:
    if GREETING_PATTERN.match(text):
        return True
    return bool(INTEREST_PATTERN.search(text))


def first_name(display_name: Optional[str]) -> str:
    """
    First word of the display name, or "Cliente" when nothing usable is given.
    """
    parts = (display_name or "").split()
    if not parts:
        return DEFAULT_NAME
    return parts[0]
