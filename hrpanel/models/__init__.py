"""Database models for the HR panel."""
from __future__ import annotations

from .activity import EmployeeEvaluation, ManagerDebt, MonthlySale
from .base import Base, new_uuid
from .bonus import BonusTier, TotalRange
from .periods import Month
from .snapshots import StoreManagementSnapshot
from .staff import Employee, EmployeeShop, Post, Recommender, Shop

__all__ = [
    "Base",
    "BonusTier",
    "Employee",
    "EmployeeEvaluation",
    "EmployeeShop",
    "ManagerDebt",
    "Month",
    "MonthlySale",
    "Post",
    "Recommender",
    "Shop",
    "StoreManagementSnapshot",
    "TotalRange",
    "new_uuid",
]
