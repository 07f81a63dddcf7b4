"""
Default alerting configuration stored for an organization that has none yet: a single email contact point referenced by the root route.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from models.alerting.contact_points import AlertingConfig

DEFAULT_RECEIVER_NAME = "default-email"
DEFAULT_RECEIVER_UID = "default-email-uid"


def default_alerting_config() -> AlertingConfig:
    return AlertingConfig.model_validate({
        "route": {
            "receiver": DEFAULT_RECEIVER_NAME,
            "group_by": ["alertname"],
        },
        "receivers": [
            {
                "name": DEFAULT_RECEIVER_NAME,
                "grafana_managed_receiver_configs": [
                    {
                        "uid": DEFAULT_RECEIVER_UID,
                        "name": DEFAULT_RECEIVER_NAME,
                        "type": "email",
                        "disableResolveMessage": False,
                        "settings": {"addresses": "<example@email.com>"},
                        "secureSettings": {},
                    }
                ],
            }
        ],
    })
