"""Common transaction record produced by the parsers and consumed by the matcher."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from budget_verifier.utils import format_amount


@dataclass(eq=False)
class Transaction:
    """A single bank or budget entry.

    Amounts are signed integer cents (negative for debits). ``matching`` points
    at the transaction on the other list this one was paired with; a matched
    pair references each other, so it is left out of ``repr`` and equality is
    by identity.
    """
    timestamp: date
    description: str
    amount: int
    details: Optional[str] = None
    matching: Optional['Transaction'] = field(default=None, repr=False)

    def describe(self):
        """Render this transaction without following its match."""
        return "[{}: '{}', '{}', {}]".format(
            self.timestamp.strftime('%Y-%m-%d'),
            self.description,
            self.details or '',
            format_amount(self.amount),
        )

    def __str__(self):
        matching = self.matching.describe() if self.matching is not None else '<nil>'
        return f"[{self.describe()} (matching: {matching})]"
