"""
Dashboard schemas.
"""

from decimal import Decimal

from clientledger.schemas.base import BaseSchema, Money
from clientledger.schemas.client import Client
from clientledger.schemas.debt import Debt
from clientledger.schemas.service import Service


class DashboardResponse(BaseSchema):
    """Business overview shown on the home screen."""
    
    total_clients: int = 0
    total_services: int = 0
    outstanding_total: Money = Decimal("0.00")
    overdue_count: int = 0
    recent_clients: list[Client] = []
    open_debts: list[Debt] = []
    recent_completed_services: list[Service] = []
