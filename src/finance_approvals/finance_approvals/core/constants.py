"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

# Loan policy defaults (overridable through settings.LOAN_POLICY)
DEFAULT_MAX_PRINCIPAL_SALARY_MULTIPLE = 12
DEFAULT_MIN_INSTALLMENTS = 3
DEFAULT_MAX_INSTALLMENTS = 60
DEFAULT_CONTRACT_MONTHS = 12
DEFAULT_MIN_SERVICE_MONTHS = 6
DEFAULT_FIRST_INSTALLMENT_LEAD_MONTHS = 1
DEFAULT_MAX_DEDUCTION_RATIO = Decimal("0.30")

DEFAULT_LIST_LIMIT = 200
