"""Finance Approvals package.

Request approval routing and loan scheduling for the HR/payroll dashboard,
organized by feature modules (requests, approvals, loans) with a thin
service layer on top of pure domain logic.
"""
