import os
import tempfile
from datetime import date, timedelta
from pathlib import Path

# Set environment variables BEFORE any imports that might use settings
_test_db_dir = tempfile.mkdtemp()
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_test_db_dir, 'test_shf.db')}"
os.environ["SECRET_KEY"] = "test-secret-key-min-32-characters-long-for-testing"
os.environ["ALGORITHM"] = "HS256"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["FIRST_ADMIN_EMAIL"] = "admin@test.example.com"
os.environ["FIRST_ADMIN_PASSWORD"] = "AdminTest123!"
os.environ["URL_SHORTENER_API_URL"] = "http://shortener.test/create"
os.environ["EVENTS_API_URL"] = "http://calendar.test/events"

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from shf.api.deps import get_db, get_events_importer, get_url_shortener
from shf.core.config import settings
from shf.core.security import create_access_token, get_password_hash
from shf.db.models.address import Address as AddressModel
from shf.db.models.application import Application as ApplicationModel
from shf.db.models.company import Company as CompanyModel
from shf.db.models.payment import Payment as PaymentModel
from shf.db.models.user import User as UserModel
from shf.domain.payment_terms import PAYMENT_TYPE_BRANDING, STATUS_COMPLETED
from shf.main import app
from shf.repositories.geography import get_or_create_region
from shf.repositories.role import MEMBER, get_role_by_name
from shf.repositories.user import get_user_by_email
from shf.services.event_importer import EventsImporter, ExternalEvent
from shf.services.url_shortener import UrlShortener

ROOT_DIR = Path(__file__).resolve().parent.parent

# ============================================================================
# COLLABORATOR FAKES
# ============================================================================


class FakeEventsImporter(EventsImporter):
    """Serves canned calendar entries instead of calling the calendar API."""

    def __init__(self, events: list[dict] | None = None, error: Exception | None = None):
        super().__init__(api_url="http://calendar.test/events")
        self.events = events or []
        self.error = error
        self.fetched_keys: list[str] = []

    def fetch(self, key: str) -> list[ExternalEvent]:
        self.fetched_keys.append(key)
        if self.error is not None:
            raise self.error
        return [ExternalEvent.model_validate(e) for e in self.events]


class FakeUrlShortener(UrlShortener):
    def __init__(self, short_url: str | None = "https://tinyurl.com/shf123"):
        super().__init__(api_url="http://shortener.test/create")
        self.short_url = short_url
        self.calls: list[str] = []

    def shorten(self, url: str) -> str | None:
        self.calls.append(url)
        return self.short_url


# ============================================================================
# DATABASE AND CLIENT
# ============================================================================


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test and run migrations."""
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    test_engine = create_engine(test_db_url, connect_args={"check_same_thread": False})

    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    alembic_cfg = Config(str(ROOT_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(ROOT_DIR / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        test_engine.dispose()

        for suffix in ["", "-wal", "-shm"]:
            path = f"{test_db_path}{suffix}"
            if os.path.exists(path):
                os.remove(path)
        if os.path.exists(temp_db_dir):
            os.rmdir(temp_db_dir)


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def events_importer() -> FakeEventsImporter:
    return FakeEventsImporter()


@pytest.fixture(scope="function")
def url_shortener() -> FakeUrlShortener:
    return FakeUrlShortener()


@pytest.fixture(scope="function")
def client(db_session, events_importer, url_shortener):
    """Create a test client with database and collaborator overrides."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_events_importer] = lambda: events_importer
    app.dependency_overrides[get_url_shortener] = lambda: url_shortener

    yield TestClient(app)

    app.dependency_overrides.clear()


# ============================================================================
# USERS
# ============================================================================


@pytest.fixture(scope="function")
def admin_user(db: Session) -> dict:
    """The admin user seeded by migration 002."""
    user = get_user_by_email(db, settings.first_admin_email)
    if not user:
        raise RuntimeError("Admin user not found. Check migration 002.")

    return {
        "id": user.id,
        "email": user.email,
        "password": settings.first_admin_password,
        "role_id": user.role_id,
    }


@pytest.fixture(scope="function")
def admin_token(admin_user: dict) -> str:
    return create_access_token(data={"sub": admin_user["id"]})


@pytest.fixture(scope="function")
def make_member(db: Session):
    """Factory for member users. By default the membership is current."""
    counter = {"n": 0}

    def _make_member(
        member: bool = True,
        start: date | None = None,
        expire: date | None = None,
        last_name: str = "Andersson",
    ) -> UserModel:
        counter["n"] += 1
        role = get_role_by_name(db, MEMBER)
        user = UserModel(
            email=f"member{counter['n']}@example.com",
            first_name="Test",
            last_name=last_name,
            password_hash=get_password_hash("MemberPass123!"),
            role_id=role.id,
            member=member,
            membership_start_date=start if start is not None else date.today() - timedelta(days=30),
            membership_expire_date=expire if expire is not None else date.today() + timedelta(days=335),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_member


@pytest.fixture(scope="function")
def member_token(make_member) -> str:
    return create_access_token(data={"sub": make_member().id})


# ============================================================================
# COMPANIES
# ============================================================================


@pytest.fixture(scope="function")
def region(db: Session):
    region = get_or_create_region(db, "Stockholm")
    db.commit()
    return region


@pytest.fixture(scope="function")
def make_company(db: Session):
    """Factory for companies inserted directly, bypassing the save pipeline."""

    def _make_company(company_number: str, name: str | None = "Hundföretaget AB", addresses=None) -> CompanyModel:
        company = CompanyModel(company_number=company_number, name=name, email="info@hund.se")
        for address in addresses or []:
            company.addresses.append(address)
        db.add(company)
        db.commit()
        db.refresh(company)
        return company

    return _make_company


def _add_branding_payment(db: Session, company, expire_date: date | None, status: str = STATUS_COMPLETED):
    payment = PaymentModel(
        company_id=company.id,
        payment_type=PAYMENT_TYPE_BRANDING,
        status=status,
        start_date=date.today() - timedelta(days=365),
        expire_date=expire_date,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    return payment


def _add_application(db: Session, company, user, state: str = "accepted") -> ApplicationModel:
    application = ApplicationModel(user_id=user.id, company_id=company.id, state=state)
    db.add(application)
    db.commit()
    db.refresh(application)
    return application


@pytest.fixture(scope="function")
def searchable_company(db: Session, region, make_company, make_member):
    """A company meeting every visibility rule: complete, member backed, branding licensed."""
    company = make_company(
        "5562252998",
        addresses=[AddressModel(street_address="Hundgatan 1", post_code="11122", city="Stockholm", region_id=region.id)],
    )
    _add_application(db, company, make_member())
    _add_branding_payment(db, company, date.today() + timedelta(days=100))
    db.refresh(company)
    return company


@pytest.fixture(scope="function")
def add_branding_payment(db: Session):
    """Factory: add_branding_payment(company, expire_date, status="completed")."""
    return lambda company, expire_date, status=STATUS_COMPLETED: _add_branding_payment(
        db, company, expire_date, status
    )


@pytest.fixture(scope="function")
def add_application(db: Session):
    """Factory: add_application(company, user, state="accepted")."""
    return lambda company, user, state="accepted": _add_application(db, company, user, state)
