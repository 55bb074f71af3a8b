from datetime import date, timedelta

import pytest
from sqlalchemy.orm import Session

import shf.repositories.company as company_repo
from shf.db.models.address import Address as AddressModel
from shf.db.models.application import BusinessCategory as BusinessCategoryModel
from shf.db.models.company import Company as CompanyModel
from shf.domain.company_rules import CompanyRules
from shf.repositories.geography import get_or_create_kommun, get_or_create_region

TODAY = date.today()


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture(scope="function")
def rules() -> CompanyRules:
    return CompanyRules(as_of=TODAY)


@pytest.fixture(scope="function")
def mixed_companies(db: Session, region, make_company, make_member, add_application, add_branding_payment) -> dict:
    """Companies covering each way of failing (or passing) the visibility rules."""
    current = make_member()
    lapsed = make_member(start=TODAY - timedelta(days=400), expire=TODAY - timedelta(days=35))
    not_member = make_member(member=False)

    def addr(region_id=region.id, visibility="street_address"):
        return AddressModel(city="Uppsala", region_id=region_id, visibility=visibility)

    searchable = make_company("5562252998", addresses=[addr()])
    add_application(searchable, current)
    add_branding_payment(searchable, TODAY + timedelta(days=30))

    blank_name = make_company("1234567897", name="   ", addresses=[addr()])
    add_application(blank_name, current)
    add_branding_payment(blank_name, TODAY + timedelta(days=30))

    no_region = make_company("5560360793", addresses=[addr(), addr(region_id=None)])
    add_application(no_region, current)
    add_branding_payment(no_region, TODAY - timedelta(days=1))

    lapsed_member = make_company("5565951398", addresses=[addr()])
    add_application(lapsed_member, lapsed)
    add_application(lapsed_member, not_member)
    add_branding_payment(lapsed_member, None)

    under_review = make_company("5566778899", addresses=[addr(visibility="none")])
    add_application(under_review, current, state="under_review")
    add_branding_payment(under_review, TODAY)

    pending_payment = make_company("5569876542", addresses=[])
    add_application(pending_payment, current)
    add_branding_payment(pending_payment, TODAY + timedelta(days=30), status="pending")

    # TRIM only removes spaces, so a tab is a name in both forms
    tab_name = make_company("5590001110", name="\t", addresses=[addr()])

    return {
        "searchable": searchable,
        "blank_name": blank_name,
        "no_region": no_region,
        "lapsed_member": lapsed_member,
        "under_review": under_review,
        "pending_payment": pending_payment,
        "tab_name": tab_name,
    }


def _ids(companies) -> set[int]:
    return {c.id for c in companies}


# ============================================================================
# INSTANCE RULES AGREE WITH COLLECTION FILTERS
# ============================================================================


def test_complete_filter_agrees_with_instance_rule(db: Session, rules, mixed_companies):
    everything = db.query(CompanyModel).all()
    expected = {c.id for c in everything if rules.is_complete(c)}
    assert _ids(company_repo.get_complete_companies(db)) == expected
    assert mixed_companies["blank_name"].id not in expected
    assert mixed_companies["no_region"].id not in expected
    assert mixed_companies["tab_name"].id in expected
    # No addresses at all is still complete
    assert mixed_companies["pending_payment"].id in expected


@pytest.mark.parametrize(
    "name, complete",
    [("", False), ("   ", False), ("\t", True), ("\n", True), (" \t ", True), (" Hund AB ", True)],
    ids=["empty", "spaces", "tab", "newline", "spaces-around-tab", "padded"],
)
def test_whitespace_names_agree_in_both_forms(db: Session, rules, region, make_company, name, complete):
    company = make_company("5562252998", name=name, addresses=[AddressModel(city="Uppsala", region_id=region.id)])
    assert rules.is_complete(company) is complete
    assert (company.id in _ids(company_repo.get_complete_companies(db))) is complete


def test_branding_licensed_filter_agrees_with_instance_rule(db: Session, rules, mixed_companies):
    everything = db.query(CompanyModel).all()
    expected = {c.id for c in everything if rules.has_branding_license(c)}
    assert expected == {mixed_companies["searchable"].id, mixed_companies["blank_name"].id}
    # The collection filter also counts the perpetual payment
    assert _ids(company_repo.get_branding_licensed_companies(db, as_of=TODAY)) == expected | {
        mixed_companies["lapsed_member"].id
    }


def test_with_members_filter_agrees_with_instance_rule(db: Session, rules, mixed_companies):
    everything = db.query(CompanyModel).all()
    expected = {c.id for c in everything if rules.has_member_backed_application(c)}
    assert _ids(company_repo.get_companies_with_members(db, as_of=TODAY)) == expected
    assert mixed_companies["lapsed_member"].id not in expected
    assert mixed_companies["under_review"].id not in expected


def test_address_visible_filter_agrees_with_instance_rule(db: Session, rules, mixed_companies):
    everything = db.query(CompanyModel).all()
    expected = {c.id for c in everything if rules.any_visible_addresses(c)}
    assert _ids(company_repo.get_address_visible_companies(db)) == expected
    assert mixed_companies["under_review"].id not in expected
    assert mixed_companies["pending_payment"].id not in expected


def test_searchable_is_the_composition_of_the_three_rules(db: Session, rules, mixed_companies):
    everything = db.query(CompanyModel).all()
    for company in everything:
        assert rules.is_searchable(company) == (
            rules.is_complete(company)
            and rules.has_member_backed_application(company)
            and rules.has_branding_license(company)
        )

    expected = {c.id for c in everything if rules.is_searchable(c)}
    assert expected == {mixed_companies["searchable"].id}
    assert _ids(company_repo.get_searchable_companies(db, as_of=TODAY)) == expected


def test_filters_return_each_company_once(db: Session, mixed_companies, make_member, add_application, add_branding_payment):
    company = mixed_companies["searchable"]
    add_application(company, make_member())
    add_branding_payment(company, TODAY + timedelta(days=300))

    ids = [c.id for c in company_repo.get_searchable_companies(db, as_of=TODAY)]
    assert ids == [company.id]


def test_paginated_listing_restricts_to_searchable(db: Session, mixed_companies):
    companies, total = company_repo.get_companies_paginated(db, searchable_only=True)
    assert total == 1
    assert companies[0].id == mixed_companies["searchable"].id

    companies, total = company_repo.get_companies_paginated(db, page=1, page_size=4, searchable_only=False)
    assert total == 7
    assert len(companies) == 4


# ============================================================================
# BRANDING LICENSE
# ============================================================================


@pytest.mark.parametrize(
    "payments, expected",
    [
        ([], False),
        ([(-1, "completed")], False),
        ([(0, "completed")], False),
        ([(10, "completed")], True),
        ([(-30, "completed"), (60, "completed")], True),
        ([(60, "completed"), (-30, "completed")], True),
        ([(None, "completed")], False),
        ([(None, "completed"), (60, "completed")], True),
        ([(60, "completed"), (None, "completed")], False),
        ([(60, "pending")], False),
    ],
    ids=[
        "no-payments",
        "expired-yesterday",
        "expires-today",
        "future",
        "expired-then-future",
        "future-then-expired",
        "perpetual",
        "perpetual-then-future",
        "future-then-perpetual",
        "not-completed",
    ],
)
def test_branding_license_is_always_a_bool(db: Session, rules, make_company, add_branding_payment, payments, expected):
    company = make_company("5562252998")
    for days, status in payments:
        expire = None if days is None else TODAY + timedelta(days=days)
        add_branding_payment(company, expire, status=status)
    db.refresh(company)

    result = rules.has_branding_license(company)
    assert isinstance(result, bool)
    assert result is expected


def test_most_recent_branding_payment(db: Session, rules, make_company, add_branding_payment):
    company = make_company("5562252998")
    assert rules.most_recent_branding_payment(company) is None
    assert rules.branding_expire_date(company) is None
    assert rules.branding_payment_notes(company) is None

    add_branding_payment(company, TODAY + timedelta(days=10))
    latest = add_branding_payment(company, TODAY + timedelta(days=375))
    add_branding_payment(company, TODAY + timedelta(days=500), status="pending")
    latest.notes = "Faktura 2041"
    db.commit()
    db.refresh(company)

    assert rules.most_recent_branding_payment(company).id == latest.id
    assert rules.branding_expire_date(company) == TODAY + timedelta(days=375)
    assert rules.branding_payment_notes(company) == "Faktura 2041"


# ============================================================================
# MEMBERS
# ============================================================================


def test_earliest_current_member_fee_paid(db: Session, rules, make_company, make_member, add_application):
    company = make_company("5562252998")
    assert rules.earliest_current_member_fee_paid(company) is None

    add_application(company, make_member(start=TODAY - timedelta(days=30)))
    add_application(company, make_member(start=TODAY - timedelta(days=100)))
    # Lapsed and rejected members don't count
    add_application(company, make_member(start=TODAY - timedelta(days=900), expire=TODAY - timedelta(days=1)))
    add_application(company, make_member(start=TODAY - timedelta(days=800)), state="rejected")
    db.refresh(company)

    assert rules.earliest_current_member_fee_paid(company) == TODAY - timedelta(days=100)
    assert len(rules.current_members(company)) == 2


def test_no_current_members_gives_no_date(db: Session, rules, make_company, make_member, add_application):
    company = make_company("5562252998")
    add_application(company, make_member(member=False))
    db.refresh(company)

    assert rules.current_members(company) == []
    assert rules.earliest_current_member_fee_paid(company) is None


def test_approved_applications_from_members_ordered_by_last_name(db: Session, make_company, make_member, add_application):
    company = make_company("5562252998")
    add_application(company, make_member(last_name="Svensson"))
    add_application(company, make_member(last_name="Berg"))
    add_application(company, make_member(last_name="Aalto"), state="new")
    add_application(company, make_member(member=False, last_name="Ek"))

    applications = company_repo.get_approved_applications_from_members(db, company.id)
    assert [a.user.last_name for a in applications] == ["Berg", "Svensson"]


# ============================================================================
# ADDRESSES AND NAME LISTS
# ============================================================================


def test_missing_region(db: Session, rules, region, make_company):
    company = make_company("5562252998", addresses=[AddressModel(region_id=region.id)])
    assert rules.missing_region(company) is False

    company.addresses.append(AddressModel(city="Lund"))
    db.commit()
    db.refresh(company)
    assert rules.missing_region(company) is True
    assert rules.is_complete(company) is False


def test_derived_name_lists(db: Session, make_company, make_member, add_application):
    skane = get_or_create_region(db, "Skåne")
    blekinge = get_or_create_region(db, "Blekinge")
    malmo = get_or_create_kommun(db, "Malmö")
    lund = get_or_create_kommun(db, "Lund")
    training = BusinessCategoryModel(name="Träning")
    grooming = BusinessCategoryModel(name="Trim")
    db.add_all([training, grooming])
    db.commit()

    company = make_company(
        "5562252998",
        addresses=[
            AddressModel(city="Malmö", region_id=skane.id, kommun_id=malmo.id),
            AddressModel(city="Lund", region_id=skane.id, kommun_id=lund.id),
            AddressModel(city="Karlskrona", region_id=blekinge.id),
            AddressModel(city="Malmö", region_id=skane.id, kommun_id=malmo.id),
        ],
    )
    first = add_application(company, make_member())
    second = add_application(company, make_member())
    first.business_categories.extend([training, grooming])
    second.business_categories.append(training)
    db.commit()

    assert company_repo.get_category_names(db, company.id) == ["Trim", "Träning"]
    assert company_repo.get_region_names(db, company.id) == ["Blekinge", "Skåne"]
    assert company_repo.get_kommun_names(db, company.id) == ["Lund", "Malmö"]
    assert company_repo.get_city_names(db, company.id) == ["Karlskrona", "Lund", "Malmö"]


def test_companies_at_addresses(db: Session, make_company):
    first = make_company("5562252998", addresses=[AddressModel(city="Umeå")])
    make_company("1234567897", addresses=[AddressModel(city="Luleå")])

    found = company_repo.get_companies_at_addresses(db, first.addresses)
    assert [c.id for c in found] == [first.id]
    assert company_repo.get_companies_at_addresses(db, []) == []


def test_companies_with_calendar_key(db: Session, make_company):
    keyed = make_company("5562252998")
    keyed.calendar_key = "abc123"
    blank = make_company("1234567897")
    blank.calendar_key = ""
    make_company("5560360793")
    db.commit()

    assert [c.id for c in company_repo.get_companies_with_calendar_key(db)] == [keyed.id]
