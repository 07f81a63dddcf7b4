"""
Receiver stitching: inserting, moving and renaming a receiver inside the alerting configuration while keeping receiver groups and routing references consistent.

All receivers in a group share the group's name and routes reference groups by that name. Group membership is treated as authoritative: a receiver whose own name disagrees with its group is repaired when it is touched.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from models.alerting.contact_points import AlertingConfig, ReceiverEntry, ReceiverGroup, Route

logger = logging.getLogger(__name__)


def find_receiver(cfg: AlertingConfig, uid: str) -> Optional[Tuple[ReceiverGroup, int]]:
    for group in cfg.receivers:
        for idx, receiver in enumerate(group.receivers):
            if receiver.uid == uid:
                return group, idx
    return None


def find_group(cfg: AlertingConfig, name: str) -> Optional[ReceiverGroup]:
    return next((group for group in cfg.receivers if group.name == name), None)


def _get_or_create_group(cfg: AlertingConfig, name: str) -> ReceiverGroup:
    group = find_group(cfg, name)
    if group is None:
        group = ReceiverGroup(name=name)
        cfg.receivers.append(group)
    return group


def _drop_group(cfg: AlertingConfig, group: ReceiverGroup) -> None:
    cfg.receivers = [candidate for candidate in cfg.receivers if candidate is not group]


def is_contact_point_in_use(name: str, routes: Iterable[Optional[Route]]) -> bool:
    for route in routes:
        if route is None:
            continue
        if route.receiver == name:
            return True
        if is_contact_point_in_use(name, route.routes):
            return True
    return False


def replace_references(old_name: str, new_name: str, route: Optional[Route]) -> int:
    if route is None:
        return 0
    replaced = 0
    if route.receiver == old_name:
        route.receiver = new_name
        replaced += 1
    for child in route.routes:
        replaced += replace_references(old_name, new_name, child)
    return replaced


def stitch_receiver(cfg: AlertingConfig, target: ReceiverEntry) -> bool:
    """
    Put `target` into `cfg`, matching an existing receiver by uid. Returns whether `cfg` was modified.

    - Unknown uid: appended to the group named `target.name`, creating the group if needed.
    - Same group name: replaced in place, modified only if any field differs.
    - Different name: the receiver moves to the tail of the group named `target.name`.
      When it was the only member of its old group, routes referencing the old group
      are rewritten to the new name, and if no group with the new name exists the old
      group is simply renamed where it stands.
    """
    location = find_receiver(cfg, target.uid)
    if location is None:
        _get_or_create_group(cfg, target.name).receivers.append(target)
        return True

    group, idx = location
    if group.name == target.name:
        if group.receivers[idx].model_dump() == target.model_dump():
            return False
        group.receivers[idx] = target
        return True

    old_name = group.name
    sole_member = len(group.receivers) == 1
    destination = find_group(cfg, target.name)

    if sole_member:
        replaced = replace_references(old_name, target.name, cfg.route)
        if replaced:
            logger.debug("Rewrote %d route reference(s) from %s to %s", replaced, old_name, target.name)
        if destination is None:
            group.name = target.name
            group.receivers[idx] = target
            return True

    del group.receivers[idx]
    if not group.receivers:
        _drop_group(cfg, group)
    if destination is None:
        destination = _get_or_create_group(cfg, target.name)
    destination.receivers.append(target)
    return True


def remove_receiver(cfg: AlertingConfig, uid: str) -> Optional[Tuple[str, bool]]:
    """Drop the receiver with `uid`. Returns its group name and whether the group was removed with it, or None if absent."""
    location = find_receiver(cfg, uid)
    if location is None:
        return None
    group, idx = location
    del group.receivers[idx]
    if group.receivers:
        return group.name, False
    _drop_group(cfg, group)
    return group.name, True
