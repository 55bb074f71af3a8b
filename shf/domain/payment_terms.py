from __future__ import annotations

from dataclasses import dataclass
from datetime import date

PAYMENT_TYPE_BRANDING = "branding_fee"
PAYMENT_TYPE_MEMBER = "member_fee"

STATUS_CREATED = "created"
STATUS_PENDING = "pending"
STATUS_AWAITING = "awaiting_payments"
STATUS_COMPLETED = "completed"
STATUS_EXPIRED = "expired"


@dataclass(frozen=True, slots=True)
class PaymentTermsPolicy:
    """Which payments count towards an entitlement "as of" a date.

    A payment counts when it has the wanted type, it is completed, and it is
    unexpired: expire_date is None (perpetual) or strictly after as_of.
    A payment expiring today no longer counts today.
    """

    as_of: date

    def is_unexpired(self, expire_date: date | None) -> bool:
        return expire_date is None or expire_date > self.as_of

    def counts(self, *, payment_type: str, status: str, expire_date: date | None, wanted_type: str) -> bool:
        return (
            payment_type == wanted_type
            and status == STATUS_COMPLETED
            and self.is_unexpired(expire_date)
        )

    def sqlalchemy_counts_predicate(self, *, type_col, status_col, expire_col, wanted_type: str):
        """Build a SQLAlchemy predicate implementing the same rule as ``counts``."""
        from sqlalchemy import and_, or_

        return and_(
            type_col == wanted_type,
            status_col == STATUS_COMPLETED,
            or_(expire_col.is_(None), expire_col > self.as_of),
        )
