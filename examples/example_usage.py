"""Example: use the service layer directly (no Flask).

Lists the active plans and a company's access state straight from MySQL.
"""

import importlib

from config import get_settings_module

from src.cardhub.cardhub.container import build_container
from src.cardhub.cardhub.subscriptions.gate import compute_access_state


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    for plan in container.subscription_service.list_plans():
        print(plan.to_dict())

    subscription = container.subscription_service.get_current(1)
    print(compute_access_state(subscription).to_dict())


if __name__ == "__main__":
    main()
