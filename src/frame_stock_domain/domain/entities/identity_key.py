"""Identity key value object."""

from dataclasses import dataclass


@dataclass(frozen=True)  # Value objects are immutable
class IdentityKey:
    """(brand, model code, color code): one physical product across all channels. Case-sensitive."""

    brand: str
    model_code: str
    color_code: str

    def __str__(self) -> str:
        return f"{self.brand} {self.model_code} {self.color_code}".strip()
