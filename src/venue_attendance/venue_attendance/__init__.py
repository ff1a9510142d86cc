"""Venue Attendance package.

Feature modules (users, venues, attendance, monitor, payroll, ...) each keep
plain domain models, repository protocols with MySQL adapters, services that
raise domain errors, and a thin Flask JSON controller. The check-in workflow
lives in attendance/workflow as an explicit state machine.
"""
