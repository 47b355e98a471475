"""HR System package.

This package is organized by feature modules (employees, leave, payroll, ...)
with a thin Flask controller layer and SOLID service/repository layers.
"""
