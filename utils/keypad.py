"""
Teclado numérico para digitar o valor da corrida.
"""
from typing import Optional

from config.settings import MAX_FARE, MAX_FARE_DIGITS

CLEAR = "C"
DELETE = "DEL"

# Layout exibido na tela (4 linhas x 3 colunas)
KEYPAD_ROWS = (
    ("7", "8", "9"),
    ("4", "5", "6"),
    ("1", "2", "3"),
    (CLEAR, "0", DELETE),
)


def apply_keypad_press(current: Optional[int], key: str) -> Optional[int]:
    """
    Novo valor após apertar uma tecla. None representa o visor vazio.
    - dígitos são acrescentados (no máximo 7 dígitos / 9.999.999)
    - "C" limpa o visor
    - "DEL" apaga o último dígito (com um dígito só, o visor fica vazio)
    """
    digits = "0" if current is None else str(current)

    if key == CLEAR:
        return None
    if key == DELETE:
        return int(digits[:-1]) if len(digits) > 1 else None
    if len(key) != 1 or not key.isdigit():
        raise ValueError(f"Tecla desconhecida: {key!r}")

    if len(digits) >= MAX_FARE_DIGITS:
        return current
    if digits == "0":
        digits = ""

    value = int(digits + key)
    if value > MAX_FARE:
        return current
    return value
