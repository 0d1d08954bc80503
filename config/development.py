import os

from .config import Config

DEBUG = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FILE = os.getenv("LOG_FILE", "logs/finance_approvals.log")
AUDIT_LOG_FILE = os.getenv("AUDIT_LOG_FILE", "logs/audit.log")

LOAN_POLICY = dict(Config.LOAN_POLICY)
APPROVAL_CHAINS = list(Config.APPROVAL_CHAINS)
