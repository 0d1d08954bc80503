import os


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, str(default)))


class Config:
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FILE = os.environ.get("LOG_FILE", "")
    AUDIT_LOG_FILE = os.environ.get("AUDIT_LOG_FILE", "")

    # Loan eligibility thresholds
    LOAN_POLICY = {
        "max_principal_salary_multiple": _env_int("LOAN_MAX_SALARY_MULTIPLE", 12),
        "min_installments": _env_int("LOAN_MIN_INSTALLMENTS", 3),
        "max_installments": _env_int("LOAN_MAX_INSTALLMENTS", 60),
        "default_contract_months": _env_int("LOAN_DEFAULT_CONTRACT_MONTHS", 12),
        "min_service_months": _env_int("LOAN_MIN_SERVICE_MONTHS", 6),
        "first_installment_lead_months": _env_int("LOAN_FIRST_INSTALLMENT_LEAD_MONTHS", 1),
        "max_deduction_ratio": os.environ.get("LOAN_MAX_DEDUCTION_RATIO", "0.30"),
    }

    # Default chains per request type; scoped chains may add department_id / project_id.
    APPROVAL_CHAINS = [
        {
            "request_type": "LEAVE",
            "levels": [
                {"level_name": "Direct Manager", "role": "GENERAL_MANAGER"},
                {"level_name": "HR", "role": "HR_MANAGER"},
            ],
        },
        {
            "request_type": "LOAN",
            "levels": [
                {"level_name": "HR", "role": "HR_MANAGER"},
                {"level_name": "Finance", "role": "FINANCE_MANAGER"},
                {"level_name": "General Manager", "role": "GENERAL_MANAGER"},
            ],
        },
        {
            "request_type": "PAYROLL_RUN",
            "levels": [
                {"level_name": "Finance", "role": "FINANCE_MANAGER"},
                {"level_name": "General Manager", "role": "GENERAL_MANAGER"},
            ],
        },
        {
            "request_type": "MANUAL_ATTENDANCE",
            "levels": [
                {"level_name": "HR", "role": "HR_MANAGER"},
            ],
        },
        {
            "request_type": "PURCHASE_ORDER",
            "levels": [
                {"level_name": "Project Manager", "role": "PROJECT_MANAGER"},
                {"level_name": "Warehouse", "role": "WAREHOUSE_MANAGER"},
                {"level_name": "Finance", "role": "FINANCE_MANAGER"},
            ],
        },
    ]
