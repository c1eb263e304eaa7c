"""
CLI tests: argument parsing to command payloads (no broker).
"""

import pytest

from atlas_cli.cli import build_commands, build_parser


def commands_for(*argv):
    return build_commands(build_parser().parse_args(list(argv)))


def test_arm_upper_cases_shape():
    assert commands_for("arm", "rectangle") == [{'command': 'arm_drawing', 'shape': 'RECTANGLE'}]


def test_place_with_name():
    assert commands_for("place", "25.2", "55.27", "--name", "Marina") == [
        {'command': 'place_zone', 'lat': 25.2, 'lng': 55.27, 'name': 'Marina'}
    ]


def test_click_and_move_carry_point_only():
    assert commands_for("click", "1", "2") == [{'command': 'map_click', 'lat': 1.0, 'lng': 2.0}]
    assert commands_for("move", "1", "2") == [{'command': 'move_zone', 'lat': 1.0, 'lng': 2.0}]


def test_rename_sends_start_then_commit():
    assert commands_for("rename", "Harbour") == [
        {'command': 'rename_start'},
        {'command': 'rename_commit', 'name': 'Harbour'},
    ]


@pytest.mark.parametrize("argv, expected", [
    (("resize", "radius", "120"), {'command': 'resize', 'field': 'radius', 'value': 120.0}),
    (("activate", "3"), {'command': 'request_activation', 'months': 3}),
    (("select", "z1"), {'command': 'select_zone', 'zone_id': 'z1'}),
    (("describe", "z1"), {'command': 'describe_zone', 'zone_id': 'z1'}),
    (("campaign", "z1"), {'command': 'start_campaign', 'zone_id': 'z1'}),
    (("confirm-payment", "z1"), {'command': 'confirm_payment', 'zone_id': 'z1'}),
    (("quotes",), {'command': 'get_quotes'}),
    (("clear",), {'command': 'clear_selection'}),
    (("list",), {'command': 'list_zones'}),
])
def test_single_commands(argv, expected):
    assert commands_for(*argv) == [expected]


def test_resize_rejects_unknown_field():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["resize", "depth", "10"])


def test_global_options():
    args = build_parser().parse_args(["--service-id", "ze9", "--no-wait", "state"])
    assert args.service_id == "ze9"
    assert args.no_wait


def test_send_yaml(tmp_path):
    path = tmp_path / "cmd.yaml"
    path.write_text("command: resize\nfield: width\nvalue: 250\n")
    assert commands_for("send", str(path)) == [{'command': 'resize', 'field': 'width', 'value': 250}]


def test_send_yaml_without_command(tmp_path):
    path = tmp_path / "cmd.yaml"
    path.write_text("field: width\n")
    with pytest.raises(ValueError):
        commands_for("send", str(path))


def test_send_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        commands_for("send", str(tmp_path / "missing.yaml"))
