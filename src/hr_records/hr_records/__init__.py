"""HR Records package.

This package is organized by feature modules (employees, departments,
attendance, leaves, payroll, users) with a thin Flask controller layer over
service/repository layers. Authorization decisions live in ``policy`` and
derived fields in ``common.derived_fields``.
"""
