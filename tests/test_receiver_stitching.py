"""
Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

try:
    from ._env import ensure_test_env
except ImportError:
    from tests._env import ensure_test_env
ensure_test_env()

import pytest

from models.alerting.contact_points import AlertingConfig, ReceiverEntry, Route
from services.alerting.receiver_stitching import (
    is_contact_point_in_use,
    remove_receiver,
    replace_references,
    stitch_receiver,
)


def _route(receiver, *children):
    return {"receiver": receiver, "routes": list(children)}


def _config(route, groups):
    return AlertingConfig.model_validate({
        "route": route,
        "receivers": [
            {
                "name": group_name,
                "grafana_managed_receiver_configs": [
                    {"uid": uid, "name": name, "type": kind} for uid, name, kind in members
                ],
            }
            for group_name, members in groups
        ],
    })


def _receiver(uid, name, kind):
    return ReceiverEntry(uid=uid, name=name, type=kind)


def default_config():
    return _config(
        _route("receiver-1", _route("receiver-1")),
        [
            ("receiver-1", [("abc", "receiver-1", "slack")]),
            ("receiver-2", [
                ("def", "receiver-2", "slack"),
                ("ghi", "receiver-2", "email"),
                ("jkl", "receiver-2", "discord"),
            ]),
        ],
    )


def inconsistent_config():
    # ghi claims a name that disagrees with the group holding it
    return _config(
        _route("receiver-1", _route("receiver-1")),
        [
            ("receiver-1", [("abc", "receiver-1", "slack")]),
            ("receiver-2", [
                ("def", "receiver-2", "slack"),
                ("ghi", "receiver-3", "email"),
                ("jkl", "receiver-2", "discord"),
            ]),
        ],
    )


CASES = [
    pytest.param(
        None,
        _receiver("brand-new", "receiver-2", "webhook"),
        _config(
            _route("receiver-1", _route("receiver-1")),
            [
                ("receiver-1", [("abc", "receiver-1", "slack")]),
                ("receiver-2", [
                    ("def", "receiver-2", "slack"),
                    ("ghi", "receiver-2", "email"),
                    ("jkl", "receiver-2", "discord"),
                    ("brand-new", "receiver-2", "webhook"),
                ]),
            ],
        ),
        id="unknown uid appends to matching group",
    ),
    pytest.param(
        None,
        _receiver("brand-new", "receiver-9", "webhook"),
        _config(
            _route("receiver-1", _route("receiver-1")),
            [
                ("receiver-1", [("abc", "receiver-1", "slack")]),
                ("receiver-2", [
                    ("def", "receiver-2", "slack"),
                    ("ghi", "receiver-2", "email"),
                    ("jkl", "receiver-2", "discord"),
                ]),
                ("receiver-9", [("brand-new", "receiver-9", "webhook")]),
            ],
        ),
        id="unknown uid creates missing group",
    ),
    pytest.param(
        None,
        _receiver("ghi", "receiver-2", "teams"),
        _config(
            _route("receiver-1", _route("receiver-1")),
            [
                ("receiver-1", [("abc", "receiver-1", "slack")]),
                ("receiver-2", [
                    ("def", "receiver-2", "slack"),
                    ("ghi", "receiver-2", "teams"),
                    ("jkl", "receiver-2", "discord"),
                ]),
            ],
        ),
        id="matching receiver with unchanged name replaces in place",
    ),
    pytest.param(
        None,
        _receiver("abc", "new-receiver", "slack"),
        _config(
            _route("new-receiver", _route("new-receiver")),
            [
                ("new-receiver", [("abc", "new-receiver", "slack")]),
                ("receiver-2", [
                    ("def", "receiver-2", "slack"),
                    ("ghi", "receiver-2", "email"),
                    ("jkl", "receiver-2", "discord"),
                ]),
            ],
        ),
        id="rename of sole member renames group and references",
    ),
    pytest.param(
        None,
        _receiver("def", "receiver-1", "slack"),
        _config(
            _route("receiver-1", _route("receiver-1")),
            [
                ("receiver-1", [("abc", "receiver-1", "slack"), ("def", "receiver-1", "slack")]),
                ("receiver-2", [("ghi", "receiver-2", "email"), ("jkl", "receiver-2", "discord")]),
            ],
        ),
        id="rename to another existing group moves receiver",
    ),
    pytest.param(
        _config(
            _route("receiver-1", _route("receiver-1")),
            [
                ("receiver-1", [("1", "receiver-1", "slack"), ("2", "receiver-1", "slack")]),
                ("receiver-2", [
                    ("3", "receiver-2", "slack"),
                    ("4", "receiver-2", "slack"),
                    ("5", "receiver-2", "slack"),
                ]),
            ],
        ),
        _receiver("2", "receiver-2", "slack"),
        _config(
            _route("receiver-1", _route("receiver-1")),
            [
                ("receiver-1", [("1", "receiver-1", "slack")]),
                ("receiver-2", [
                    ("3", "receiver-2", "slack"),
                    ("4", "receiver-2", "slack"),
                    ("5", "receiver-2", "slack"),
                    ("2", "receiver-2", "slack"),
                ]),
            ],
        ),
        id="rename to another larger group appends at the tail",
    ),
    pytest.param(
        _config(
            _route("receiver-1", _route("receiver-1")),
            [
                ("receiver-1", [("1", "receiver-1", "slack"), ("2", "receiver-1", "slack")]),
                ("receiver-2", [("3", "receiver-2", "slack")]),
                ("receiver-3", [("4", "receiver-4", "slack")]),
                ("receiver-4", [("5", "receiver-4", "slack")]),
            ],
        ),
        _receiver("2", "receiver-4", "slack"),
        _config(
            _route("receiver-1", _route("receiver-1")),
            [
                ("receiver-1", [("1", "receiver-1", "slack")]),
                ("receiver-2", [("3", "receiver-2", "slack")]),
                ("receiver-3", [("4", "receiver-4", "slack")]),
                ("receiver-4", [("5", "receiver-4", "slack"), ("2", "receiver-4", "slack")]),
            ],
        ),
        id="rename when there are many groups picks the group by its own name",
    ),
    pytest.param(
        None,
        _receiver("jkl", "brand-new-group", "opsgenie"),
        _config(
            _route("receiver-1", _route("receiver-1")),
            [
                ("receiver-1", [("abc", "receiver-1", "slack")]),
                ("receiver-2", [("def", "receiver-2", "slack"), ("ghi", "receiver-2", "email")]),
                ("brand-new-group", [("jkl", "brand-new-group", "opsgenie")]),
            ],
        ),
        id="rename to a missing name creates a new group",
    ),
    pytest.param(
        inconsistent_config(),
        _receiver("ghi", "brand-new-group", "opsgenie"),
        _config(
            _route("receiver-1", _route("receiver-1")),
            [
                ("receiver-1", [("abc", "receiver-1", "slack")]),
                ("receiver-2", [("def", "receiver-2", "slack"), ("jkl", "receiver-2", "discord")]),
                ("brand-new-group", [("ghi", "brand-new-group", "opsgenie")]),
            ],
        ),
        id="rename out of an inconsistent group repairs it",
    ),
    pytest.param(
        _config(
            _route("receiver-1", _route("receiver-1"), _route("receiver-2")),
            [
                ("receiver-1", [("1", "receiver-1", "slack"), ("2", "receiver-1", "slack")]),
                ("receiver-2", [("3", "receiver-2", "slack")]),
            ],
        ),
        _receiver("3", "receiver-1", "slack"),
        _config(
            _route("receiver-1", _route("receiver-1"), _route("receiver-1")),
            [
                ("receiver-1", [
                    ("1", "receiver-1", "slack"),
                    ("2", "receiver-1", "slack"),
                    ("3", "receiver-1", "slack"),
                ]),
            ],
        ),
        id="sole member renamed into existing group removes group and rewrites routes",
    ),
]


@pytest.mark.parametrize("initial, target, expected", CASES)
def test_stitch_receiver(initial, target, expected):
    cfg = initial if initial is not None else default_config()

    modified = stitch_receiver(cfg, target)

    assert modified is True
    assert cfg.model_dump() == expected.model_dump()


def test_stitch_receiver_identical_receiver_is_not_a_modification():
    cfg = default_config()
    before = cfg.model_dump()

    modified = stitch_receiver(cfg, _receiver("ghi", "receiver-2", "email"))

    assert modified is False
    assert cfg.model_dump() == before


def test_stitch_receiver_repairs_mismatched_name_in_place():
    cfg = _config(
        _route("receiver-2"),
        [("receiver-2", [("def", "receiver-2", "slack"), ("ghi", "receiver-3", "email")])],
    )

    modified = stitch_receiver(cfg, _receiver("ghi", "receiver-2", "email"))

    assert modified is True
    assert [r.name for r in cfg.receivers[0].receivers] == ["receiver-2", "receiver-2"]
    assert [r.uid for r in cfg.receivers[0].receivers] == ["def", "ghi"]


def test_rename_of_one_of_several_members_keeps_old_routes():
    cfg = default_config()
    cfg.route.receiver = "receiver-2"

    stitch_receiver(cfg, _receiver("def", "elsewhere", "slack"))

    assert cfg.route.receiver == "receiver-2"
    assert [g.name for g in cfg.receivers] == ["receiver-1", "receiver-2", "elsewhere"]


def test_stitch_never_duplicates_uids():
    cfg = inconsistent_config()
    for name in ("receiver-1", "receiver-3", "receiver-2", "receiver-2"):
        stitch_receiver(cfg, _receiver("ghi", name, "email"))

    uids = [r.uid for g in cfg.receivers for r in g.receivers]
    assert sorted(uids) == ["abc", "def", "ghi", "jkl"]
    assert all(r.name == g.name for g in cfg.receivers for r in g.receivers if r.uid == "ghi")


def test_contact_point_in_use():
    routes = [Route.model_validate(_route("not-test", _route("not-test"), _route("test")))]
    assert is_contact_point_in_use("test", routes) is True

    routes = [Route.model_validate(_route("not-test", _route("not-test"), _route("not-test")))]
    assert is_contact_point_in_use("test", routes) is False


def test_contact_point_in_use_deeply_nested_and_missing_root():
    deep = Route.model_validate(_route(None, _route(None, _route(None, _route("target")))))
    assert is_contact_point_in_use("target", [deep]) is True
    assert is_contact_point_in_use("target", [None]) is False


def test_replace_references_rewrites_every_level():
    route = Route.model_validate(_route("old", _route("other", _route("old")), _route("old")))

    replaced = replace_references("old", "new", route)

    assert replaced == 3
    assert not is_contact_point_in_use("old", [route])


def test_remove_receiver_reports_group_removal():
    cfg = default_config()

    assert remove_receiver(cfg, "def") == ("receiver-2", False)
    assert remove_receiver(cfg, "abc") == ("receiver-1", True)
    assert [g.name for g in cfg.receivers] == ["receiver-2"]
    assert remove_receiver(cfg, "missing") is None
