import enum


class LaunchType(str, enum.Enum):
    CREDITO = "Crédito"
    DEBITO = "Débito"
