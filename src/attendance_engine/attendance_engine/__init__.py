"""Attendance & Leave engine package.

Pure rule modules (attendance policy/validator/metrics, leave conflict/balance/
state machine) sit under feature packages, with thin service and repository
layers wiring them to a record store.
"""
