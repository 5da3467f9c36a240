"""Financial summary agent (stage 2)."""

from .main import ExaFinanceSource, create_finance_source
from .models import FinancialSummary

__all__ = ["ExaFinanceSource", "FinancialSummary", "create_finance_source"]
