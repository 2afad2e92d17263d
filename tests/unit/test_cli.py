import os
import subprocess
import sys

import pytest

import json_parser as jp

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
CLI = os.path.join(REPO_ROOT, "json_parser.py")


@pytest.fixture
def json_file(tmp_path):
    def _write(data):
        path = tmp_path / "input.json"
        path.write_text(data, encoding="utf-8")
        return str(path)
    return _write


def test_cli_valid_prints_ok(json_file):
    cmd = [sys.executable, CLI, json_file("[1,2,3]")]
    cp = subprocess.run(cmd, capture_output=True, text=True)
    assert cp.returncode == 0
    assert cp.stdout.strip() == "OK"


def test_cli_invalid_reports_error_class(json_file):
    cmd = [sys.executable, CLI, json_file("[1,2")]
    cp = subprocess.run(cmd, capture_output=True, text=True)
    assert cp.returncode == 1
    assert cp.stderr.startswith("UnexpectedToken:")


def test_cli_reads_stdin():
    cp = subprocess.run([sys.executable, CLI, "-"], input='{"a": null}',
                        capture_output=True, text=True)
    assert cp.returncode == 0


def test_cli_missing_file(tmp_path):
    assert jp.main([str(tmp_path / "nope.json")]) == 1


def test_main_in_process(json_file, capsys):
    assert jp.main([json_file('{"k": "v"}')]) == 0
    assert capsys.readouterr().out.strip() == "OK"


def test_debug_dumps_lexemes(json_file, capsys):
    assert jp.main(["--debug", json_file('{"a": 1}')]) == 0
    out = capsys.readouterr().out.splitlines()
    assert [line.split()[1] for line in out] == ["LCURLY", "STRING", "COLON", "NUMBER", "RCURLY"]


def test_debug_exits_1_on_lexer_error(json_file, capsys):
    assert jp.main(["--debug", json_file("[1, 07]")]) == 1
    assert "InvalidNumber" in capsys.readouterr().err


def test_max_depth_flag(json_file, capsys):
    path = json_file("[[[]]]")
    assert jp.main(["--max-depth", "2", path]) == 1
    assert "NestingTooDeep" in capsys.readouterr().err
    assert jp.main(["--max-depth", "3", path]) == 0


def test_reject_dup_keys_flag(json_file, capsys):
    path = json_file('{"a":1,"a":2}')
    assert jp.main([path]) == 0
    assert jp.main(["--reject-dup-keys", path]) == 1
    assert "DuplicateKey" in capsys.readouterr().err


def test_verbose_logs_to_stderr(json_file):
    cmd = [sys.executable, CLI, "--verbose", json_file("true")]
    cp = subprocess.run(cmd, capture_output=True, text=True)
    assert cp.returncode == 0
    assert "parsing 4 characters" in cp.stderr


def test_max_depth_above_interpreter_stack_exits_1(json_file, capsys):
    depth = sys.getrecursionlimit()
    path = json_file("[" * depth + "]" * depth)
    assert jp.main(["--max-depth", str(depth * 2), path]) == 1
    assert "NestingTooDeep" in capsys.readouterr().err
