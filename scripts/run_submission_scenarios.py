from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from logic import format_currency
from seed import demo_user, initialize_store
from store import AppStore
from wizard import ApplicationWizard, ServiceUnavailableError


def main() -> None:
    store = AppStore()
    initialize_store(store)
    store.login(demo_user())

    for service in store.services:
        print(f"\n=== {service.name} ({service.ministry}, {service.status}) ===")
        try:
            wizard = ApplicationWizard(service, store.user)
        except ServiceUnavailableError as exc:
            print(f"Outcome: BLOCKED -> {exc}")
            continue

        wizard.attach_document("national-id.pdf", 204800, "application/pdf")
        while wizard.can_go_next():
            wizard.next()
        result = wizard.submit(store)
        print("Outcome: SUBMITTED")
        print(f"Tracking number: {result.application.tracking_number}")
        print(f"Fees: {format_currency(result.application.fees)}")

    stats = store.dashboard_stats
    print(f"\nApplications: {stats.total_applications}, unread notifications: {stats.unread_notifications}")


if __name__ == "__main__":
    main()
