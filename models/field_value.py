from dataclasses import dataclass


@dataclass(frozen=True)
class TextValue:
    value: str

    def display(self) -> str:
        return self.value


@dataclass(frozen=True)
class NumberValue:
    value: int | float

    def display(self) -> str:
        if isinstance(self.value, float) and self.value.is_integer():
            return str(int(self.value))
        return str(self.value)


@dataclass(frozen=True)
class BooleanValue:
    value: bool

    def display(self) -> str:
        return "Yes" if self.value else "No"


FieldValue = TextValue | NumberValue | BooleanValue
