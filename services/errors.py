"""
Exceções do app de corridas.
"""


class StoreError(Exception):
    """Falha em uma operação no banco remoto (rede, validação do banco, etc.)."""


class StoreUnavailableError(StoreError):
    """O cliente do banco não pôde ser criado (configuração ausente ou inválida)."""


class ShiftStateError(Exception):
    """Transição de turno pedida no estado errado (ex.: corrida sem turno aberto)."""


class InvalidSaleError(ValueError):
    """Valor ou forma de pagamento inválidos para uma corrida."""


class MalformedRecordError(ValueError):
    """Dados de entrada da agregação incompletos (ex.: turno sem start_time)."""
