from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True, slots=True)
class MembershipPolicy:
    """Defines what it means for a user's membership to be current "as of" a date.

    - the user is flagged as a member
    - AND membership_start_date <= as_of
    - AND (membership_expire_date is None OR membership_expire_date >= as_of)

    The expire date is inclusive: a membership expiring today is still current.
    """

    as_of: date

    def is_current(
        self,
        *,
        member: bool | None,
        start_date: date | None,
        expire_date: date | None,
    ) -> bool:
        if not member or start_date is None:
            return False
        return start_date <= self.as_of and (expire_date is None or expire_date >= self.as_of)

    def sqlalchemy_current_predicate(self, *, member_col, start_col, expire_col):
        """Build a SQLAlchemy predicate implementing the current-membership rule."""
        from sqlalchemy import and_, or_

        return and_(
            member_col.is_(True),
            start_col.isnot(None),
            start_col <= self.as_of,
            or_(expire_col.is_(None), expire_col >= self.as_of),
        )
