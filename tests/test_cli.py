import io
import json

import pytest
import yaml

from evmdisasm.cli import main

SIMPLE_BYTECODE = "0x6080604052"


def test_text_output(capsys):
    assert main([SIMPLE_BYTECODE]) == 0
    out = capsys.readouterr().out
    assert out.splitlines() == [
        "000000: PUSH1 0x80",
        "000002: PUSH1 0x40",
        "000004: MSTORE",
    ]


def test_json_output(capsys):
    assert main([SIMPLE_BYTECODE, "--format", "json"]) == 0
    listing = json.loads(capsys.readouterr().out)
    assert [entry["name"] for entry in listing] == ["PUSH1", "PUSH1", "MSTORE"]
    assert listing[0] == {"pc": 0, "op": 0x60, "name": "PUSH1", "arg": "0x80"}


def test_yaml_output(capsys):
    assert main([SIMPLE_BYTECODE, "--format", "yaml"]) == 0
    listing = yaml.safe_load(capsys.readouterr().out)
    assert listing[2] == {"pc": 4, "op": 0x52, "name": "MSTORE", "arg": None}


def test_bytecode_file_and_output_file(tmp_path, capsys):
    source = tmp_path / "contract.bin"
    source.write_text("6080604052\n")
    target = tmp_path / "contract.txt"

    assert main(["--bytecode-file", str(source), "--output", str(target)]) == 0
    assert capsys.readouterr().out == ""
    assert target.read_text().splitlines()[-1] == "000004: MSTORE"


def test_bytecode_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("6001600201\n"))
    assert main(["--bytecode-file", "-"]) == 0
    assert capsys.readouterr().out.splitlines()[-1] == "000004: ADD"


def test_truncated_push_exits_with_error(capsys):
    assert main(["600161ff"]) == 1
    captured = capsys.readouterr()
    assert captured.out == "000000: PUSH1 0x01\n"
    assert "incomplete push instruction at 2" in captured.err


def test_truncated_push_json_writes_nothing(capsys):
    assert main(["600161ff", "--format", "json"]) == 1
    assert capsys.readouterr().out == ""


def test_invalid_hex_exits_with_error(capsys):
    assert main(["0xabc"]) == 1
    assert "invalid hex bytecode" in capsys.readouterr().err


def test_missing_bytecode_file(tmp_path):
    assert main(["--bytecode-file", str(tmp_path / "missing.bin")]) == 1


def test_binary_bytecode_file_exits_with_error(tmp_path, capsys):
    source = tmp_path / "contract.bin"
    source.write_bytes(b"\x60\x80\xff\xfe")
    assert main(["--bytecode-file", str(source)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "not hex text" in captured.err


@pytest.mark.parametrize("argv", [[], ["6001", "--bytecode-file", "x.bin"]])
def test_exactly_one_input_required(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 2
