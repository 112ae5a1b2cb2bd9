"""
Typed pointer from a ledger entry or payment to the domain
object that caused it.

The database stores a (reference_type, reference_id) pair with
no foreign key. In Python the pair is always handled as a
Reference so that sale and purchase references carry an id and
manual ones never do.
"""

from dataclasses import dataclass

from pos_ledger.models.enums import ReferenceType


@dataclass(frozen=True)
class Reference:
    kind: ReferenceType
    id: int | None = None

    def __post_init__(self):
        if self.kind == ReferenceType.MANUAL:
            if self.id is not None:
                raise ValueError("manual references do not carry an id")
        elif self.id is None:
            raise ValueError(f"{self.kind.value} references require an id")

    @classmethod
    def sale(cls, sale_id: int) -> "Reference":
        return cls(ReferenceType.SALE, sale_id)

    @classmethod
    def purchase(cls, purchase_id: int) -> "Reference":
        return cls(ReferenceType.PURCHASE, purchase_id)

    @classmethod
    def manual(cls) -> "Reference":
        return cls(ReferenceType.MANUAL)

    @classmethod
    def from_columns(
        cls, kind: ReferenceType | str | None, ref_id: int | None
    ) -> "Reference | None":
        """Rebuild a Reference from stored columns; None when unset."""
        if kind is None:
            return None
        return cls(ReferenceType(kind), ref_id)

    @property
    def is_sale(self) -> bool:
        return self.kind == ReferenceType.SALE

    @property
    def is_purchase(self) -> bool:
        return self.kind == ReferenceType.PURCHASE

    def __str__(self) -> str:
        if self.id is None:
            return self.kind.value
        return f"{self.kind.value} #{self.id}"
