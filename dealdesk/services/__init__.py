"""Service layer - one module per entity plus dashboard and calls."""

from ..events import bus
from . import activity_svc

activity_svc.register(bus)
