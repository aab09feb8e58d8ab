# Services package (re-export feature modules for stable imports)
from .form_controller import FormController, FormDefinition, FormState, FormPhase, FormMode, Draft
from .deletion import DeletionProtocol, DeletionRequest
from .entity_module import EntityModule, DoctorsModule, PatientsModule, AppointmentsModule
from .dashboard import Dashboard

__all__ = [
    "FormController",
    "FormDefinition",
    "FormState",
    "FormPhase",
    "FormMode",
    "Draft",
    "DeletionProtocol",
    "DeletionRequest",
    "EntityModule",
    "DoctorsModule",
    "PatientsModule",
    "AppointmentsModule",
    "Dashboard",
]
