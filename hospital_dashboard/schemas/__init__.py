# Schemas package (re-export feature modules for stable imports)
from .common.common import *
from .doctors.doctor import *
from .patients.patient import *
from .appointments.appointment import *
