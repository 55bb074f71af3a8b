from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from shf.domain.application_state import ApplicationState
from shf.domain.membership import MembershipPolicy
from shf.domain.payment_terms import PAYMENT_TYPE_BRANDING, STATUS_COMPLETED, PaymentTermsPolicy

HIDDEN_VISIBILITY = "none"


@dataclass(frozen=True, slots=True)
class CompanyRules:
    """Derived state of a single, loaded Company "as of" a date.

    Each predicate here has a collection counterpart in
    ``shf.repositories.company`` built from the same policies; the two agree
    on any data set, except that the collection filter for branding licenses
    also counts perpetual payments.

    - complete: name is not blank AND no address is missing a region
    - branding licensed: the most recent unexpired, completed branding fee
      payment has an expire date after as_of
    - member backed: an accepted application whose user has a current membership
    - searchable: complete AND member backed AND branding licensed
    """

    as_of: date
    membership: MembershipPolicy = field(init=False)
    payment_terms: PaymentTermsPolicy = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "membership", MembershipPolicy(as_of=self.as_of))
        object.__setattr__(self, "payment_terms", PaymentTermsPolicy(as_of=self.as_of))

    # -- completeness --------------------------------------------------------

    def missing_region(self, company) -> bool:
        return any(address.region_id is None for address in company.addresses)

    def has_blank_name(self, company) -> bool:
        """Blank as SQL TRIM sees it: only spaces are removed."""
        return not company.name or not company.name.strip(" ")

    def is_complete(self, company) -> bool:
        return not self.has_blank_name(company) and not self.missing_region(company)

    # -- branding license ----------------------------------------------------

    def branding_payments(self, company) -> list:
        """Completed branding fee payments, oldest first."""
        payments = [
            p
            for p in company.payments
            if p.payment_type == PAYMENT_TYPE_BRANDING and p.status == STATUS_COMPLETED
        ]
        return sorted(payments, key=lambda p: (p.created_at, p.id or 0))

    def most_recent_branding_payment(self, company):
        payments = self.branding_payments(company)
        return payments[-1] if payments else None

    def branding_expire_date(self, company) -> date | None:
        payment = self.most_recent_branding_payment(company)
        return payment.expire_date if payment else None

    def branding_payment_notes(self, company) -> str | None:
        payment = self.most_recent_branding_payment(company)
        return payment.notes if payment else None

    def has_branding_license(self, company) -> bool:
        """True only if the most recent unexpired branding payment expires after ``as_of``.

        A perpetual payment (no expire date) gives no license here, although
        ``branding_licensed_predicate`` in the company repository counts it.
        """
        unexpired = [
            p
            for p in self.branding_payments(company)
            if self.payment_terms.counts(
                payment_type=p.payment_type,
                status=p.status,
                expire_date=p.expire_date,
                wanted_type=PAYMENT_TYPE_BRANDING,
            )
        ]
        if not unexpired:
            return False
        expire_date = unexpired[-1].expire_date
        return expire_date is not None and expire_date > self.as_of

    # -- members -------------------------------------------------------------

    def membership_is_current(self, user) -> bool:
        return self.membership.is_current(
            member=user.member,
            start_date=user.membership_start_date,
            expire_date=user.membership_expire_date,
        )

    def accepted_applications(self, company) -> list:
        return [a for a in company.applications if a.state == ApplicationState.ACCEPTED.value]

    def has_member_backed_application(self, company) -> bool:
        return any(self.membership_is_current(a.user) for a in self.accepted_applications(company))

    def current_members(self, company) -> list:
        members = []
        for application in self.accepted_applications(company):
            user = application.user
            if self.membership_is_current(user) and user not in members:
                members.append(user)
        return members

    def earliest_current_member_fee_paid(self, company) -> date | None:
        start_dates = [u.membership_start_date for u in self.current_members(company)]
        return min(start_dates) if start_dates else None

    # -- visibility ----------------------------------------------------------

    def any_visible_addresses(self, company) -> bool:
        return any(a.visibility != HIDDEN_VISIBILITY for a in company.addresses)

    def is_searchable(self, company) -> bool:
        return (
            self.is_complete(company)
            and self.has_member_backed_application(company)
            and self.has_branding_license(company)
        )
