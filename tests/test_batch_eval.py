"""Tests for the batch evaluation CLI."""

import json
from pathlib import Path

from batch_eval import main

FIXTURES = Path(__file__).parent / "fixtures"
MESSAGES = str(FIXTURES / "messages.json")


def output_lines(capsys):
    return [json.loads(line) for line in capsys.readouterr().out.splitlines()]


def test_template(capsys):
    assert main([MESSAGES, "--template", "${!meta('device')}/${!index}"]) == 0
    assert [line["fields"]["result"] for line in output_lines(capsys)] == ["sensor-1/0", "sensor-2/1", "sensor-3/2"]


def test_typed_template(capsys):
    assert main([MESSAGES, "-t", "${!len(batch)}", "--type", "int"]) == 0
    assert {line["fields"]["result"] for line in output_lines(capsys)} == {3}


def test_failed_message_sets_exit_status(capsys):
    assert main([MESSAGES, "-t", "${!meta('qos')}", "--type", "int"]) == 1
    captured = capsys.readouterr()
    lines = [json.loads(line) for line in captured.out.splitlines()]
    assert "error" in lines[1]
    assert "1 of 3 message(s) failed" in captured.err


def test_component_config(capsys):
    code = main([MESSAGES, "--config", str(FIXTURES / "configs"), "--component", "mqtt_output"])
    assert code == 1
    lines = output_lines(capsys)
    assert lines[0]["fields"]["topic"] == "devices/sensor-1/events"


def test_bad_template(capsys):
    assert main([MESSAGES, "-t", "${!meta('device')"]) == 2
    assert "unclosed expression" in capsys.readouterr().err


def test_component_required_with_config(capsys):
    assert main([MESSAGES, "--config", str(FIXTURES / "configs")]) == 2
