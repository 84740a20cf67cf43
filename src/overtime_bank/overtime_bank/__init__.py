"""Overtime Bank package.

Compensatory-time ledger ("Banco de Horas") organized by feature modules
(periods, ledger, reports, ...) with a thin Flask controller layer on top of
service/repository layers.
"""
