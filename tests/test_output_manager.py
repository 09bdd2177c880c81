"""Tests for wbem_dump_shared.output_manager.OutputManager."""

import json
import os
from unittest.mock import patch

import pytest

from wbem_dump_shared import DumpError, ErrorKind, OutputManager


@pytest.fixture
def output(tmp_path):
    return OutputManager(str(tmp_path))


def test_class_definition_path(output, tmp_path):
    path = output.write_class_definition("root/cimv2", "CIM_Foo", "<CLASS NAME=\"CIM_Foo\"/>")
    assert path == os.path.join(str(tmp_path), "root#cimv2", "CIM_Foo.xml")
    with open(path) as f:
        assert f.read() == "<CLASS NAME=\"CIM_Foo\"/>"


def test_qualifier_document(output, tmp_path):
    output.write_qualifiers("root\\interop", ["<QUALIFIER.DECLARATION NAME=\"Key\"/>"])
    with open(tmp_path / "root@interop" / "qa.xml") as f:
        content = f.read()
    assert content.startswith('<?xml version="1.0" encoding="utf-8"?>')
    assert "<DECLGROUP>\n<QUALIFIER.DECLARATION NAME=\"Key\"/>\n</DECLGROUP>" in content


def test_instance_manifest_one_path_per_line(output, tmp_path):
    output.write_instance_manifest("root/cimv2", "CIM_Foo", ["a", "b"])
    manifest = tmp_path / "root#cimv2" / "CIM_Foo" / "instances.txt"
    assert manifest.read_text() == "a\nb\n"


def test_instance_file(output, tmp_path):
    output.write_instance("root/cimv2", "Linux_Foo", 3, "<INSTANCE CLASSNAME=\"Linux_Foo\"/>")
    content = (tmp_path / "root#cimv2" / "Linux_Foo" / "instance_3.xml").read_text()
    assert "<INSTANCE CLASSNAME=\"Linux_Foo\"/>" in content


def test_error_file_overwritten(output, tmp_path):
    output.write_error("root/cimv2", "first")
    output.write_error("root/cimv2", "second")
    assert (tmp_path / "root#cimv2" / "error.txt").read_text() == "second"


def test_results_json(output, tmp_path):
    output.write_results({"success": True})
    assert json.loads((tmp_path / "dump_results.json").read_text()) == {"success": True}


def test_write_failure_is_io_error(output):
    with patch("wbem_dump_shared.output_manager.open", side_effect=PermissionError("denied"), create=True):
        with pytest.raises(DumpError) as exc_info:
            output.write_error("root/cimv2", "text")
    assert exc_info.value.kind is ErrorKind.IO


def test_mkdir_failure_is_io_error(output):
    with patch("wbem_dump_shared.output_manager.os.makedirs", side_effect=OSError("read-only")):
        with pytest.raises(DumpError) as exc_info:
            output.ensure_dir("root#cimv2")
    assert exc_info.value.kind is ErrorKind.IO


def test_has_instance_tracks_files_written_by_this_run(tmp_path):
    (tmp_path / "root#cimv2" / "Linux_Foo").mkdir(parents=True)
    (tmp_path / "root#cimv2" / "Linux_Foo" / "instance_0.xml").write_text("from an earlier run")
    output = OutputManager(str(tmp_path))

    assert output.has_instance("root/cimv2", "Linux_Foo", 0) is False
    output.write_instance("root/cimv2", "Linux_Foo", 0, "<INSTANCE/>")
    assert output.has_instance("root/cimv2", "Linux_Foo", 0) is True
    assert output.has_instance("root/cimv2", "Linux_Foo", 1) is False
