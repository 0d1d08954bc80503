from .config import Config

DEBUG = False
TESTING = True

LOG_LEVEL = "WARNING"
LOG_FILE = ""
AUDIT_LOG_FILE = ""

LOAN_POLICY = dict(Config.LOAN_POLICY)
APPROVAL_CHAINS = list(Config.APPROVAL_CHAINS)
