"""Tests for ecdeploy.payload module."""

from __future__ import annotations

import base64
import json
from unittest.mock import patch

import pytest

from ecdeploy.exceptions import PreconditionError
from ecdeploy.models import EncodedPayload
from ecdeploy.payload import (
    build_import_options,
    encode_file,
    encode_payload,
    encode_text,
    guest_params,
)


class TestEncodeText:
    def test_password_has_no_trailing_newline(self):
        encoded = encode_text("hunter2")
        assert encoded == "aHVudGVyMg=="
        assert base64.b64decode(encoded) == b"hunter2"

    def test_surrogate_escaped_bytes_restored(self):
        assert base64.b64decode(encode_text("pw\udcff")) == b"pw\xff"

    def test_single_line_for_long_input(self):
        encoded = encode_text("x" * 500)
        assert "\n" not in encoded


class TestEncodeFile:
    def test_round_trip_reproduces_bytes(self, tmp_path):
        doc = tmp_path / "firstboot.yaml"
        original = b"network:\n  hostname: edge-01\nusers:\n  - name: \"ops\"\n" + bytes(range(32, 127)) * 20
        doc.write_bytes(original)
        with patch("ecdeploy.payload.log"):
            encoded = encode_file(doc)
        assert "\n" not in encoded
        assert base64.b64decode(encoded) == original

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(PreconditionError, match="missing file"):
            encode_file(tmp_path / "nope.yaml")

    def test_non_mapping_yaml_warns_but_encodes(self, tmp_path):
        doc = tmp_path / "firstboot.yaml"
        doc.write_text("- just\n- a list\n")
        with patch("ecdeploy.payload.log") as mock_log:
            encoded = encode_file(doc)
        mock_log.assert_called_once()
        assert mock_log.call_args[0][0] == "WARN"
        assert base64.b64decode(encoded) == doc.read_bytes()

    def test_mapping_yaml_does_not_warn(self, tmp_path):
        doc = tmp_path / "firstboot.yaml"
        doc.write_text("hostname: edge-01\n")
        with patch("ecdeploy.payload.log") as mock_log:
            encode_file(doc)
        mock_log.assert_not_called()


class TestEncodePayload:
    def test_absent_inputs_stay_empty(self, esx_request):
        payload = encode_payload(esx_request)
        assert payload == EncodedPayload(firstboot="", root_password="")

    def test_password_encoded(self, esx_request):
        esx_request.root_password = "hunter2"
        payload = encode_payload(esx_request)
        assert base64.b64decode(payload.root_password) == b"hunter2"


class TestGuestParams:
    def test_remote_pairs_keep_empty_values(self):
        params = guest_params(EncodedPayload(), None)
        assert params.as_pairs() == [
            ("guestinfo.ec.firstboot", ""),
            ("guestinfo.root.passwd", ""),
            ("guestinfo.ec.url", ""),
            ("guestinfo.shell.enabled", "True"),
            ("guestinfo.ssh.enabled", "True"),
        ]

    def test_vmx_lines_omit_empty_values(self):
        params = guest_params(EncodedPayload(), None)
        assert params.vmx_lines() == [
            "guestinfo.shell.enabled=True",
            "guestinfo.ssh.enabled=True",
        ]

    def test_vmx_lines_with_all_values(self):
        params = guest_params(EncodedPayload(firstboot="ZmI=", root_password="cHc="), "https://svc.example.com")
        assert params.vmx_lines() == [
            "guestinfo.ec.firstboot=ZmI=",
            "guestinfo.root.passwd=cHc=",
            "guestinfo.ec.url=https://svc.example.com",
            "guestinfo.shell.enabled=True",
            "guestinfo.ssh.enabled=True",
        ]


class TestBuildImportOptions:
    def test_defaults_and_network_mapping(self, esx_request):
        options = build_import_options(esx_request, guest_params(EncodedPayload(), None))
        doc = json.loads(options.to_json())
        assert doc["DiskProvisioning"] == "thin"
        assert doc["IPAllocationPolicy"] == "dhcpPolicy"
        assert doc["IPProtocol"] == "IPv4"
        assert doc["NetworkMapping"] == [{"Name": "VM Network", "Network": "Lab Network"}]
        assert doc["PowerOn"] is False
        assert doc["InjectOvfEnv"] is False
        assert doc["WaitForIP"] is False
        assert doc["MarkAsTemplate"] is False
        assert doc["Name"] == "ec-vm"
        keys = [entry["key"] for entry in doc["PropertyMapping"]]
        assert len(keys) == 5
        values = {entry["key"]: entry["value"] for entry in doc["PropertyMapping"]}
        assert values["guestinfo.ec.firstboot"] == ""
        assert values["guestinfo.root.passwd"] == ""

    def test_quotes_in_values_are_escaped(self, esx_request):
        esx_request.vm_name = 'edge "01"'
        esx_request.vsphere.network = 'net\\"x'
        options = build_import_options(esx_request, guest_params(EncodedPayload(), 'https://x/?q="y"'))
        doc = json.loads(options.to_json())
        assert doc["Name"] == 'edge "01"'
        assert doc["NetworkMapping"][0]["Network"] == 'net\\"x'
        values = {entry["key"]: entry["value"] for entry in doc["PropertyMapping"]}
        assert values["guestinfo.ec.url"] == 'https://x/?q="y"'
