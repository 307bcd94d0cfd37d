import enum


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__

    @property
    def title(self) -> str:
        """ADD => Add, NEQ => Neq"""
        return self.name.title()
