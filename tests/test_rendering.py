"""Tests for rendering dynamic fields per message."""

import logging
from pathlib import Path

import pytest

from fieldexpr.config import ConfigLoader, MessageLoader, build_fields
from fieldexpr.errors import ConfigError, ConversionError, EvalError
from fieldexpr.rendering import ComponentRenderer, MessageRenderer

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def batch():
    return MessageLoader.load_batch(str(FIXTURES / "messages.json"))


@pytest.fixture
def component_renderer():
    return ComponentRenderer(ConfigLoader(str(FIXTURES / "configs")))


class TestMessageRenderer:
    """Test rendering fields for each message."""

    def test_render_message(self, batch):
        renderer = MessageRenderer(build_fields(ConfigLoader(str(FIXTURES / "configs")).load_component("mqtt_output")))
        assert renderer.render_message(batch, 0) == {
            "topic": "devices/sensor-1/events",
            "qos": 1,
            "retain": False,
            "position": "1 of 3",
        }

    def test_render_message_names_failing_field(self, batch):
        renderer = MessageRenderer(build_fields({"fields": {"qos": {"template": "${!meta('qos')}", "type": "int"}}}))
        with pytest.raises(ConversionError) as excinfo:
            renderer.render_message(batch, 1)
        assert excinfo.value.field == "qos"
        assert excinfo.value.value == "high"
        assert excinfo.value.target == "int"
        assert "cannot convert str 'high' to int" in str(excinfo.value)

    def test_render_message_keeps_eval_error(self, batch):
        renderer = MessageRenderer(build_fields({"fields": {"next": "${!batch[index + 5].payload}"}}))
        with pytest.raises(EvalError) as excinfo:
            renderer.render_message(batch, 0)
        assert excinfo.value.field == "next"

    def test_failure_is_isolated_to_one_message(self, batch, caplog):
        renderer = MessageRenderer(build_fields({"fields": {"qos": {"template": "${!meta('qos')}", "type": "int"}}}))
        with caplog.at_level(logging.WARNING):
            results = renderer.render_batch(batch)

        assert [r.ok for r in results] == [True, False, True]
        assert results[0].fields == {"qos": 1}
        assert results[2].fields == {"qos": 2}
        assert "cannot convert" in results[1].error
        assert results[1].error.startswith("field 'qos': ")
        assert "Failed to render message 1" in caplog.text

    def test_result_dicts(self, batch):
        renderer = MessageRenderer(build_fields({"fields": {"n": {"template": "${!meta('qos')}", "type": "int"}}}))
        results = [r.to_dict() for r in renderer.render_batch(batch)]
        assert results[0] == {"index": 0, "fields": {"n": 1}}
        assert set(results[1]) == {"index", "error"}

    def test_empty_batch_renders_nothing(self):
        renderer = MessageRenderer(build_fields({"fields": {"t": "x"}}))
        assert renderer.render_batch([]) == []


class TestComponentRenderer:
    """Test rendering named component configs."""

    def test_render_component(self, component_renderer, batch):
        response = component_renderer.render_component("mqtt_output", batch)
        assert response["component"] == "mqtt_output"
        messages = response["messages"]
        assert messages[0]["fields"]["topic"] == "devices/sensor-1/events"
        assert "error" in messages[1]
        assert messages[2]["fields"] == {
            "topic": "devices/sensor-3/events",
            "qos": 2,
            "retain": False,
            "position": "3 of 3",
        }

    def test_renderer_is_compiled_once(self, component_renderer):
        first = component_renderer.renderer_for("mqtt_output")
        assert component_renderer.renderer_for("mqtt_output") is first

    def test_broken_component_does_not_start(self, component_renderer):
        with pytest.raises(ConfigError):
            component_renderer.renderer_for("broken")

    def test_missing_component(self, component_renderer):
        with pytest.raises(FileNotFoundError):
            component_renderer.renderer_for("missing")
