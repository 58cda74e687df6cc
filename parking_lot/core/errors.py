"""Jerarquia de errores del asignador de plazas.

Los errores de dominio (DomainError) son fallos esperables provocados por la
entrada o por el estado del aparcamiento; la capa HTTP los traduce a codigos
4xx. InvariantViolation queda fuera de esa jerarquia: indica un defecto de
programacion y nunca debe tratarse como error del usuario.
"""


class DomainError(Exception):
    """Error base del dominio del aparcamiento."""
    pass


class InvalidArgumentError(DomainError):
    """Capacidad/ampliacion no positiva o numero de plaza fuera de rango."""
    pass


class NotInitializedError(DomainError):
    """Operacion distinta de initialize antes de crear el aparcamiento."""
    pass


class LotFullError(DomainError):
    """No quedan plazas libres."""
    pass


class AlreadyParkedError(DomainError):
    """La matricula ya ocupa una plaza."""
    pass


class AlreadyFreeError(DomainError):
    """La plaza indicada no esta ocupada."""
    pass


class NotFoundError(DomainError):
    """Matricula desconocida."""
    pass


class InvariantViolation(RuntimeError):
    """Estado interno inconsistente (plazas libres vs. ocupadas vs. indice)."""
    pass
