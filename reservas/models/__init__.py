from reservas.models.tenant import Tenant
from reservas.models.user import User
from reservas.models.service import Service
from reservas.models.provider import Provider, provider_services
from reservas.models.availability import AvailabilityRule, ScheduleBlock
from reservas.models.client import Client
from reservas.models.booking import Booking
from reservas.models.audit_log import AuditLog

# This makes the models directory a Python package and ensures all models are loaded
