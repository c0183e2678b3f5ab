"""HR payroll package.

Feature modules (users, attendance, payroll, notifications) each keep a thin
Flask controller layer on top of service and repository layers.
"""
