"""
Notifier field registry. Every supported notifier type declares its settings fields, each tagged as secure or not and as required or not, so encryption, redaction and validation are applied generically instead of hardcoding field names at the call sites. Validation follows the same shape as the channel validators: it returns a list of human readable error messages rather than raising.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from config import config


@dataclass(frozen=True)
class NotifierField:
    name: str
    secure: bool = False
    required: bool = False


@dataclass(frozen=True)
class NotifierSchema:
    type: str
    fields: Tuple[NotifierField, ...]
    # each group needs at least one of its fields set
    required_any: Tuple[Tuple[str, ...], ...] = field(default_factory=tuple)

    @property
    def secure_keys(self) -> FrozenSet[str]:
        return frozenset(f.name for f in self.fields if f.secure)

    @property
    def required_keys(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.required)


def _schema(notifier_type: str, *fields: NotifierField, required_any: Iterable[Tuple[str, ...]] = ()) -> NotifierSchema:
    return NotifierSchema(type=notifier_type, fields=tuple(fields), required_any=tuple(required_any))


NOTIFIER_SCHEMAS: Dict[str, NotifierSchema] = {
    schema.type: schema
    for schema in (
        _schema(
            "slack",
            NotifierField("url", secure=True),
            NotifierField("token", secure=True),
            NotifierField("recipient"),
            NotifierField("username"),
            NotifierField("icon_emoji"),
            NotifierField("icon_url"),
            NotifierField("mentionChannel"),
            NotifierField("mentionUsers"),
            NotifierField("mentionGroups"),
            NotifierField("title"),
            NotifierField("text"),
            NotifierField("endpointUrl"),
            required_any=(("url", "token"), ("url", "recipient")),
        ),
        _schema(
            "email",
            NotifierField("addresses", required=True),
            NotifierField("singleEmail"),
            NotifierField("subject"),
            NotifierField("message"),
        ),
        _schema(
            "webhook",
            NotifierField("url", required=True),
            NotifierField("httpMethod"),
            NotifierField("username"),
            NotifierField("password", secure=True),
            NotifierField("authorization_scheme"),
            NotifierField("authorization_credentials", secure=True),
            NotifierField("maxAlerts"),
        ),
        _schema(
            "pagerduty",
            NotifierField("integrationKey", secure=True, required=True),
            NotifierField("severity"),
            NotifierField("class"),
            NotifierField("component"),
            NotifierField("group"),
            NotifierField("summary"),
        ),
        _schema(
            "teams",
            NotifierField("url", required=True),
            NotifierField("title"),
            NotifierField("sectiontitle"),
            NotifierField("message"),
        ),
        _schema(
            "discord",
            NotifierField("url", secure=True, required=True),
            NotifierField("avatar_url"),
            NotifierField("title"),
            NotifierField("message"),
            NotifierField("use_discord_username"),
        ),
        _schema(
            "opsgenie",
            NotifierField("apiKey", secure=True, required=True),
            NotifierField("apiUrl"),
            NotifierField("message"),
            NotifierField("description"),
            NotifierField("autoClose"),
            NotifierField("overridePriority"),
            NotifierField("sendTagsAs"),
        ),
        _schema(
            "telegram",
            NotifierField("bottoken", secure=True, required=True),
            NotifierField("chatid", required=True),
            NotifierField("message"),
            NotifierField("parse_mode"),
        ),
        _schema(
            "googlechat",
            NotifierField("url", secure=True, required=True),
            NotifierField("title"),
            NotifierField("message"),
        ),
        _schema(
            "victorops",
            NotifierField("url", secure=True, required=True),
            NotifierField("messageType"),
            NotifierField("title"),
            NotifierField("description"),
        ),
        _schema(
            "pushover",
            NotifierField("apiToken", secure=True, required=True),
            NotifierField("userKey", secure=True, required=True),
            NotifierField("device"),
            NotifierField("priority"),
            NotifierField("sound"),
            NotifierField("title"),
            NotifierField("message"),
        ),
        _schema(
            "wecom",
            NotifierField("url", secure=True),
            NotifierField("secret", secure=True),
            NotifierField("corp_id"),
            NotifierField("agent_id"),
            NotifierField("msgtype"),
            NotifierField("title"),
            NotifierField("message"),
            required_any=(("url", "secret"),),
        ),
    )
}


def enabled_notifier_types() -> List[str]:
    enabled = config.ENABLED_NOTIFIER_TYPES
    if not enabled:
        return sorted(NOTIFIER_SCHEMAS)
    return [t for t in sorted(NOTIFIER_SCHEMAS) if t in enabled]


def get_notifier_schema(notifier_type: str) -> Optional[NotifierSchema]:
    return NOTIFIER_SCHEMAS.get(str(notifier_type or "").strip().lower())


def secure_keys_for(notifier_type: str) -> FrozenSet[str]:
    schema = get_notifier_schema(notifier_type)
    return schema.secure_keys if schema else frozenset()


def _is_set(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def validate_receiver_settings(
    notifier_type: str,
    settings: Optional[Dict[str, Any]],
    secure_settings: Optional[Dict[str, str]] = None,
) -> List[str]:
    normalized_type = str(notifier_type or "").strip().lower()
    schema = NOTIFIER_SCHEMAS.get(normalized_type)
    if schema is None:
        return [f"unknown notifier type '{notifier_type}'"]
    if normalized_type not in enabled_notifier_types():
        return [f"notifier type '{normalized_type}' is not enabled"]

    present = {key for key, value in (settings or {}).items() if _is_set(value)}
    present.update(key for key, value in (secure_settings or {}).items() if value)

    errors: List[str] = []
    for key in schema.required_keys:
        if key not in present:
            errors.append(f"{normalized_type} notifier requires '{key}'")
    for group in schema.required_any:
        if not present.intersection(group):
            errors.append(
                f"{normalized_type} notifier requires one of " + ", ".join(f"'{k}'" for k in group)
            )
    return errors
