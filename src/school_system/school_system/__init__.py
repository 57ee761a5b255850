"""School System package.

This package is organized by feature modules (users, classrooms, groups,
schedules, ...) with a thin Flask controller layer on top of service and
repository layers.
"""
