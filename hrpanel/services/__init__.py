"""Service layer entrypoints for domain logic."""

from .bonus_config import BonusConfigService
from .payroll import SalaryReport, SalaryReportService, SalaryTotals
from .periods import CommandOutcome, PeriodService
from .snapshots import SnapshotArchiver, archive_prior_month
from .store_management import (
    StoreManagementReport,
    StoreManagementReportService,
    StoreManagementRow,
)

__all__ = [
    "BonusConfigService",
    "CommandOutcome",
    "PeriodService",
    "SalaryReport",
    "SalaryReportService",
    "SalaryTotals",
    "SnapshotArchiver",
    "StoreManagementReport",
    "StoreManagementReportService",
    "StoreManagementRow",
    "archive_prior_month",
]
