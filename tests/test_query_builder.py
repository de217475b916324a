"""Tests for namespace normalization and query construction."""

import shlex

import pytest

from cactiwmi.config.loader import AdapterConfig
from cactiwmi.query.builder import (
    build_query,
    build_request,
    normalize_namespace,
    plan_query,
    quote_query,
)
from cactiwmi.query.models import QueryRequest


@pytest.mark.parametrize("raw", [None, "", "\\\\", "''", "'\\'"])
def test_normalize_namespace_defaults(raw):
    assert normalize_namespace(raw) == "root\\CIMV2"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("root\\CIMV2", "root\\CIMV2"),
        ("root\\\\WMI", "root\\WMI"),
        ("\\\\root\\\\\\cimv2\\\\", "root\\cimv2"),
        ("'root\\MicrosoftIISv2'", "root\\MicrosoftIISv2"),
        ("CIMV2", "root\\CIMV2"),
        ("ROOT\\CIMV2", "root\\CIMV2"),
        ("Root\\\\WMI", "root\\WMI"),
        ("CIMV2\\\\Security\\MicrosoftVolumeEncryption", "root\\CIMV2\\Security\\MicrosoftVolumeEncryption"),
    ],
)
def test_normalize_namespace_collapses_separators(raw, expected):
    result = normalize_namespace(raw)
    assert result == expected
    assert "" not in result.split("\\")
    assert result.startswith("root")


def test_normalize_namespace_custom_default_and_root():
    assert normalize_namespace("", default="root\\WMI") == "root\\WMI"
    assert normalize_namespace("Foo", root="ROOT") == "ROOT\\Foo"
    assert normalize_namespace("root\\Foo", root="ROOT") == "ROOT\\Foo"


def test_build_query_without_filter():
    assert build_query("Win32_ComputerSystem") == "SELECT * FROM Win32_ComputerSystem"
    assert build_query("Win32_ComputerSystem", "Name,Domain") == "SELECT Name,Domain FROM Win32_ComputerSystem"


def test_build_query_empty_columns_selects_all():
    assert build_query("Win32_Process", "") == "SELECT * FROM Win32_Process"
    assert build_query("Win32_Process", None) == "SELECT * FROM Win32_Process"


def test_build_query_with_filter():
    query = build_query("Win32_LogicalDisk", "Size", "DeviceID", "C:")
    assert query == "SELECT Size FROM Win32_LogicalDisk WHERE DeviceID='C:'"


def test_build_query_decodes_plus_in_filter():
    query = build_query("Win32_Service", "State", "DisplayName", "Windows+Update")
    assert query == "SELECT State FROM Win32_Service WHERE DisplayName='Windows Update'"


def test_build_query_strips_quotes_from_filter():
    query = build_query("Win32_Service", "State", "'Name'", "\"\\Spooler'")
    assert query.endswith("WHERE Name='Spooler'")


@pytest.mark.parametrize(
    "key, value",
    [
        ("DeviceID", None),
        (None, "C:"),
        ("DeviceID", ""),
        ("", "C:"),
        ("DeviceID", "''"),
        ("\\\\", "C:"),
    ],
)
def test_build_query_half_filter_is_no_filter(key, value):
    assert "WHERE" not in build_query("Win32_LogicalDisk", "*", key, value)


def test_quote_query_is_single_shell_token():
    query = "SELECT * FROM Win32_LogicalDisk WHERE DeviceID='C:'"
    assert shlex.split(quote_query(query)) == [query]


def test_build_request_scrubs_fields():
    request = build_request(
        host="'10.0.0.1'",
        credential_path='"/etc/cacti/wmi.pw"',
        class_name="Win32_LogicalDisk",
        namespace="root\\\\CIMV2",
        columns="'Name,Size'",
        condition_key="DeviceID",
        condition_value="C:",
    )
    assert request.host == "10.0.0.1"
    assert request.credential_path == "/etc/cacti/wmi.pw"
    assert request.columns == "Name,Size"
    assert request.namespace == ("root", "CIMV2")
    assert request.condition_key == "DeviceID"
    assert request.condition_value == "C:"


def test_build_request_uses_config_default_namespace():
    config = AdapterConfig(default_namespace="root\\WMI")
    request = build_request("h", "/c", "MSNdis", config=config)
    assert request.namespace_path == "root\\WMI"


def test_build_request_rejects_missing_host():
    with pytest.raises(ValueError):
        build_request("''", "/etc/cacti/wmi.pw", "Win32_LogicalDisk")


def test_request_drops_half_filter():
    request = QueryRequest(host="h", credential_path="/c", class_name="X", condition_key="Name")
    assert request.condition_key is None
    assert request.condition_value is None
    assert request.has_filter is False


def test_request_is_immutable():
    request = QueryRequest(host="h", credential_path="/c", class_name="X")
    with pytest.raises(Exception):
        request.host = "other"


def test_request_namespace_never_holds_separator():
    request = QueryRequest(host="h", credential_path="/c", class_name="X", namespace=["root\\\\WMI", "", "x\\"])
    assert request.namespace == ("root", "WMI", "x")


def test_plan_query_argv_and_command_line():
    request = QueryRequest(
        host="10.0.0.1",
        credential_path="/etc/cacti/wmi.pw",
        class_name="Win32_LogicalDisk",
        columns="Name,Size",
        condition_key="DeviceID",
        condition_value="C:",
    )
    plan = plan_query(request, "/usr/bin/wmic")
    assert plan.namespace == "root\\CIMV2"
    assert plan.query == "SELECT Name,Size FROM Win32_LogicalDisk WHERE DeviceID='C:'"
    assert plan.argv == [
        "/usr/bin/wmic",
        "--namespace=root\\CIMV2",
        "--authentication-file=/etc/cacti/wmi.pw",
        "//10.0.0.1",
        plan.query,
    ]
    assert plan.command_line.endswith(" 2>/dev/null")
    assert shlex.split(plan.command_line[: -len(" 2>/dev/null")]) == plan.argv
