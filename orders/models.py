"""
Expose ORM models for Django's auto-discovery while keeping real definitions
under the infrastructure module.
"""

from orders.infra.models import *
from orders.infra.read_models import OrderSummary
from orders.infra.event_store import EventStore
