"""Employee notifications.

A notifier is any object with ``employee_created(employee)``. Mail delivery
is not wired up; the default notifier writes the welcome message to the log.
"""

from __future__ import annotations

import logging

from cateringapi.config import API_NAME
from cateringapi.storage.models import Employee

log = logging.getLogger(__name__)


def welcome_message(employee: Employee) -> str:
    return (
        f"Welcome to {API_NAME}, {employee.name}! "
        f"Your account has been created with {employee.email}."
    )


class LogNotifier:
    def employee_created(self, employee: Employee):
        log.info(f"Welcome message for employee {employee.id}: {welcome_message(employee)}")
