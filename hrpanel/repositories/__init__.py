"""Data access layer."""

from .bonus import BonusTierRepository, EvaluationRangeRepository
from .payroll import PayrollRepository
from .periods import MonthRepository
from .snapshots import ShopAssignmentRow, StoreManagementRepository

__all__ = [
    "BonusTierRepository",
    "EvaluationRangeRepository",
    "MonthRepository",
    "PayrollRepository",
    "ShopAssignmentRow",
    "StoreManagementRepository",
]
