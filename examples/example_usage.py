"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the rules live in the services and the policy.
Run ``scripts/init_db.py`` and ``scripts/seed_db.py`` first.
"""

import importlib

from config import get_settings_module

from src.hr_records.hr_records.common.pagination import PageRequest
from src.hr_records.hr_records.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, secret_key=settings.SECRET_KEY)

    token, account = container.auth_service.signin("asha.rao@example.com", "employee123")
    principal = container.auth_service.resolve_principal(token)

    leave = container.leave_service.create(
        principal,
        {
            "leaveType": "Annual Leave",
            "startDate": "2024-03-04",
            "endDate": "2024-03-06",
            "reason": "Family visit",
            # ignored for employees: the request is always their own and pending
            "employeeId": 999,
            "status": "approved",
        },
    )
    print(account.user.email, "->", leave.employee_name, leave.days, "days,", leave.status.value)

    page = container.leave_service.list(principal, page=PageRequest(), search="anything")
    print("own leaves:", page.total)


if __name__ == "__main__":
    main()
