"""Example: call the service layer directly (no Flask).

Controllers are a thin layer; every rule lives in the services.
"""

import importlib

from config import get_settings_module

from src.event_attendance.event_attendance.container import build_container
from src.event_attendance.event_attendance.core.exceptions import DomainError


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    try:
        result = container.checkin_processor.check_in(1, "member-demo")
        print(result.message, result.record.to_dict())
    except DomainError as e:
        print(e.to_dict())

    for row in container.query_service.roster_with_status(1):
        print(row.to_dict())


if __name__ == "__main__":
    main()
