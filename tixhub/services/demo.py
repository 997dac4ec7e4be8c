# tixhub/services/demo.py
"""
Demo mode: used when Supabase is not configured.

One in-memory identity with an organizer profile and a live session, so
the app boots straight into the organizer view without any network call.
Nothing survives a restart.
"""

from tixhub.repositories.memory import InMemoryIdentityGateway, InMemoryProfileRepository
from tixhub.schemas.auth import OrganizerProfileCreate

DEMO_EMAIL = "demo@organizer.com"
DEMO_PASSWORD = "demo-password"
DEMO_IDENTITY_ID = "mock-user-id"

DEMO_ORGANIZER = OrganizerProfileCreate(
    organizer_name="Demo Organizer",
    phone="+1234567890",
    business_type="Event Management",
    company_name="Demo Events Co.",
    tax_id="123456789",
    billing_address="123 Demo Street",
    contact_person="Demo Person",
    invoice_email="invoice@demo.com",
)


async def seed_demo_backend() -> tuple[InMemoryIdentityGateway, InMemoryProfileRepository]:
    gateway = InMemoryIdentityGateway()
    repo = InMemoryProfileRepository()

    gateway.add_account(DEMO_EMAIL, DEMO_PASSWORD, identity_id=DEMO_IDENTITY_ID)
    await repo.insert_organizer(DEMO_ORGANIZER.to_row(DEMO_IDENTITY_ID, DEMO_EMAIL))
    gateway.start_session(DEMO_EMAIL)

    # seeding is not traffic
    repo.insert_calls = 0
    return gateway, repo
