"""DayFlow HR core package.

This package is organized by feature modules (attendance, leaves, payroll,
sequences, ...) with a thin Flask controller layer and service/repository
layers underneath.
"""
