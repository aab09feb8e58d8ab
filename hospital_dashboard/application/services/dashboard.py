import logging
from typing import Dict, Optional

from ..ports.session_provider import SessionProvider
from ..ports.store_client import StoreClient
from ..repositories import AppointmentRepository, DoctorRepository, PatientRepository
from .entity_module import AppointmentsModule, DoctorsModule, EntityModule, PatientsModule

logger = logging.getLogger(__name__)

MODULE_NAMES = ("doctors", "patients", "appointments")


class Dashboard:
    """Top-level screen: three management modules, one active at a time.

    The store client is injected once and shared by every repository; the
    session collaborator is only used for the user's email and sign-out.
    """

    def __init__(self, client: StoreClient, session: SessionProvider, delete_ttl_seconds: Optional[int] = None):
        self.session = session
        doctors = DoctorRepository(client)
        patients = PatientRepository(client)
        appointments = AppointmentRepository(client)
        self.modules: Dict[str, EntityModule] = {
            "doctors": DoctorsModule(doctors, delete_ttl_seconds),
            "patients": PatientsModule(patients, delete_ttl_seconds),
            "appointments": AppointmentsModule(appointments, patients, doctors, delete_ttl_seconds),
        }
        self.active_name = "doctors"

    @property
    def active(self) -> EntityModule:
        return self.modules[self.active_name]

    @property
    def user_email(self) -> Optional[str]:
        user = self.session.current_user()
        return user.email if user else None

    async def switch_to(self, name: str) -> EntityModule:
        """Make `name` the active module and load it fresh.

        Leaving a module discards any open form on it, unsaved draft included.
        """
        if name not in self.modules:
            raise ValueError(f"Unknown module '{name}'. Must be one of: {list(MODULE_NAMES)}")
        if name != self.active_name:
            self.active.form.cancel()
            self.active_name = name
        await self.active.refresh()
        return self.active

    async def sign_out(self) -> None:
        logger.info(f"Signing out {self.user_email or 'anonymous user'}")
        await self.session.sign_out()
