import enum

class CodeType(str, enum.Enum):
    registration = "registration"
    recovery = "recovery"
