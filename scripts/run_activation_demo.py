#!/usr/bin/env python3
"""
Run activation demo: register -> enroll -> activate -> report.

Registers a few experiments against a local platform handle, enrolls them and
prints the registry summary with per-group activation counts.
"""

import logging
import sys
from pathlib import Path

ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))


def main():
    from src.abtest import (
        ActivationLog,
        Experiment,
        HashAssignmentHelper,
        Manager,
        PlatformExperience,
        PlatformHandle,
        PlatformProvider,
        render_registry_summary,
    )

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    experiment_ids = ["checkout_button", "pricing_page", "onboarding_flow"]
    log = ActivationLog()

    print("1. Activating with local hash assignment...")
    manager = Manager(helper=HashAssignmentHelper("visitor_42", weights=(50, 50)), activation_log=log)
    for eid in experiment_ids:
        manager.add_experiment(Experiment(eid))
    for eid in experiment_ids:
        manager.get_experiment(eid).enroll()

    print("2. Switching to platform provider...")
    platform = PlatformHandle(experiences={
        "checkout_button": PlatformExperience(trigger=lambda cb: cb(1), platform_id="1001"),
    })
    manager.set_helper(PlatformProvider(lambda: platform))
    manager.add_experiment(Experiment("checkout_button"), replace=True)
    manager.get_experiment("checkout_button").enroll()
    manager.activate_experiment("missing_experiment")

    print("3. Registry summary:")
    print(render_registry_summary(manager, activation_log=log))


if __name__ == "__main__":
    main()
