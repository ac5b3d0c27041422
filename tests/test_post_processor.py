"""Tests for ApplicationJsonEnvironmentPostProcessor and processor ordering."""

import logging

import pytest

from appjson_core.environment import (
    JNDI_PROPERTY_SOURCE_NAME,
    SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME,
    SYSTEM_PROPERTIES_PROPERTY_SOURCE_NAME,
)
from appjson_core.origin import OriginTrackedValue, PropertySourceOrigin
from appjson_core.post_processor import (
    APPLICATION_JSON_PROPERTY_SOURCE_NAME,
    HIGHEST_PRECEDENCE,
    LOWEST_PRECEDENCE,
    ApplicationJsonEnvironmentPostProcessor,
    EnvironmentPostProcessor,
    apply_post_processors,
    find_application_json,
)
from appjson_core.property_sources import MapPropertySource, SimpleCommandLinePropertySource

from conftest import make_environment


def _process(env, **kwargs):
    ApplicationJsonEnvironmentPostProcessor(**kwargs).post_process_environment(env)
    return env


class TestTriggerLookup:
    def test_no_trigger_is_noop(self):
        env = make_environment(system_properties={"a": "1"})
        before = env.property_sources.names()
        _process(env)
        assert env.property_sources.names() == before

    def test_environment_variable(self):
        env = _process(make_environment(system_environment={"SPRING_APPLICATION_JSON": '{"foo":"bar"}'}))
        assert env.get_property("foo") == "bar"

    def test_system_property(self):
        env = _process(make_environment(system_properties={"spring.application.json": '{"foo":"bar"}'}))
        assert env.get_property("foo") == "bar"

    def test_higher_priority_layer_used_exclusively(self):
        env = make_environment(
            system_properties={"spring.application.json": '{"foo":"props","only.props":1}'},
            system_environment={"SPRING_APPLICATION_JSON": '{"foo":"env","only.env":2}'},
        )
        _process(env)
        layer = env.property_sources.get(APPLICATION_JSON_PROPERTY_SOURCE_NAME)
        assert layer is not None
        assert layer.get_property("foo") == OriginTrackedValue("props")
        assert layer.contains_property("only.props")
        assert not layer.contains_property("only.env")

    def test_property_key_preferred_within_one_layer(self):
        source = MapPropertySource(
            "one",
            {"SPRING_APPLICATION_JSON": '{"a":"upper"}', "spring.application.json": '{"a":"dotted"}'},
        )
        found = find_application_json([source])
        assert found == (source, "spring.application.json", '{"a":"dotted"}')

    def test_layer_with_none_value_is_skipped(self):
        none_layer = MapPropertySource("first", {"spring.application.json": None})
        real_layer = MapPropertySource("second", {"SPRING_APPLICATION_JSON": "{}"})
        found = find_application_json([none_layer, real_layer])
        assert found is not None
        assert found[0] is real_layer


class TestParsing:
    def test_malformed_json_logs_warning_and_injects_nothing(self, caplog):
        env = make_environment(system_environment={"SPRING_APPLICATION_JSON": "not json"})
        before = env.property_sources.names()
        with caplog.at_level(logging.WARNING, logger="appjson_core.post_processor"):
            _process(env)
        assert env.property_sources.names() == before
        messages = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert any("not json" in m for m in messages)

    def test_non_object_json_is_a_parse_failure(self, caplog):
        env = make_environment(system_environment={"SPRING_APPLICATION_JSON": "[1, 2]"})
        with caplog.at_level(logging.WARNING):
            _process(env)
        assert not env.property_sources.contains(APPLICATION_JSON_PROPERTY_SOURCE_NAME)
        assert any("[1, 2]" in r.getMessage() for r in caplog.records)

    def test_non_string_value_is_a_parse_failure(self, caplog):
        env = make_environment(system_properties={"spring.application.json": 42})
        with caplog.at_level(logging.WARNING):
            _process(env)
        assert not env.property_sources.contains(APPLICATION_JSON_PROPERTY_SOURCE_NAME)
        assert caplog.records

    def test_deeply_nested_json_logs_warning_and_injects_nothing(self, caplog):
        env = make_environment(system_environment={"SPRING_APPLICATION_JSON": "[" * 100000})
        before = env.property_sources.names()
        with caplog.at_level(logging.WARNING, logger="appjson_core.post_processor"):
            _process(env)
        assert env.property_sources.names() == before
        assert any(
            "Cannot parse JSON for spring.application.json" in r.getMessage() for r in caplog.records
        )

    def test_deep_object_that_decodes_is_flattened(self):
        depth = 700
        raw = '{"a":' * depth + "1" + "}" * depth
        env = _process(make_environment(system_environment={"SPRING_APPLICATION_JSON": raw}))
        assert env.get_property(".".join(["a"] * depth)) == 1

    def test_empty_object_injects_nothing(self):
        env = make_environment(system_environment={"SPRING_APPLICATION_JSON": "{}"})
        before = len(env.property_sources)
        _process(env)
        assert len(env.property_sources) == before

    def test_nested_values_and_origin(self):
        env = _process(
            make_environment(system_environment={"SPRING_APPLICATION_JSON": '{"a":{"b":[1,{"c":2}]}}'})
        )
        assert env.get_property("a.b[0]") == 1
        assert env.get_property("a.b[1].c") == 2
        assert env.get_property_origin("a.b[1].c") == PropertySourceOrigin(
            SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME, "SPRING_APPLICATION_JSON"
        )

    def test_injected_layer_is_immutable(self):
        env = _process(make_environment(system_environment={"SPRING_APPLICATION_JSON": '{"a":1}'}))
        layer = env.property_sources.get(APPLICATION_JSON_PROPERTY_SOURCE_NAME)
        with pytest.raises(TypeError):
            layer.source["b"] = 2


class TestInsertionPosition:
    def test_before_system_properties(self):
        env = make_environment(system_environment={"SPRING_APPLICATION_JSON": '{"a":1}'})
        env.property_sources.add_first(SimpleCommandLinePropertySource(["--x=1"]))
        _process(env)
        assert env.property_sources.names() == [
            "commandLineArgs",
            APPLICATION_JSON_PROPERTY_SOURCE_NAME,
            SYSTEM_PROPERTIES_PROPERTY_SOURCE_NAME,
            SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME,
        ]

    def test_overrides_system_properties_but_not_command_line(self):
        env = make_environment(
            system_properties={"shared": "props"},
            system_environment={"SPRING_APPLICATION_JSON": '{"shared":"json","cli":"json"}'},
        )
        env.property_sources.add_first(SimpleCommandLinePropertySource(["--cli=args"]))
        _process(env)
        assert env.get_property("shared") == "json"
        assert env.get_property("cli") == "args"

    def test_before_jndi_marker_in_web_environment(self):
        env = make_environment(
            system_environment={"SPRING_APPLICATION_JSON": '{"a":1}'},
            web=True,
            jndi_properties={"a": "jndi"},
        )
        _process(env)
        names = env.property_sources.names()
        index = names.index(APPLICATION_JSON_PROPERTY_SOURCE_NAME)
        assert names[index + 1] == JNDI_PROPERTY_SOURCE_NAME
        assert names[:index] == ["servletConfigInitParams", "servletContextInitParams"]
        assert env.get_property("a") == 1

    def test_web_environment_without_marker_uses_system_properties(self):
        env = make_environment(system_environment={"SPRING_APPLICATION_JSON": '{"a":1}'}, web=True)
        _process(env)
        names = env.property_sources.names()
        assert names[names.index(APPLICATION_JSON_PROPERTY_SOURCE_NAME) + 1] == SYSTEM_PROPERTIES_PROPERTY_SOURCE_NAME

    def test_marker_ignored_without_web_capability(self):
        env = make_environment(system_environment={"SPRING_APPLICATION_JSON": '{"a":1}'})
        env.property_sources.add_first(MapPropertySource(JNDI_PROPERTY_SOURCE_NAME, {}))
        _process(env)
        names = env.property_sources.names()
        assert names[names.index(APPLICATION_JSON_PROPERTY_SOURCE_NAME) + 1] == SYSTEM_PROPERTIES_PROPERTY_SOURCE_NAME

    def test_injected_capability_flag_overrides_environment(self):
        env = make_environment(system_environment={"SPRING_APPLICATION_JSON": '{"a":1}'})
        env.property_sources.add_first(MapPropertySource(JNDI_PROPERTY_SOURCE_NAME, {}))
        _process(env, web_context_available=True)
        assert env.property_sources.names()[:2] == [APPLICATION_JSON_PROPERTY_SOURCE_NAME, JNDI_PROPERTY_SOURCE_NAME]

    def test_missing_anchor_adds_first(self):
        env = make_environment(system_environment={"SPRING_APPLICATION_JSON": '{"a":1}'})
        env.property_sources.remove(SYSTEM_PROPERTIES_PROPERTY_SOURCE_NAME)
        _process(env)
        assert env.property_sources.names() == [
            APPLICATION_JSON_PROPERTY_SOURCE_NAME,
            SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME,
        ]

    def test_relative_order_of_other_layers_preserved(self):
        env = make_environment(system_environment={"SPRING_APPLICATION_JSON": '{"a":1}'})
        env.property_sources.add_first(MapPropertySource("first", {}))
        env.property_sources.add_last(MapPropertySource("last", {}))
        before = env.property_sources.names()
        _process(env)
        after = env.property_sources.names()
        assert len(after) == len(before) + 1
        assert [n for n in after if n != APPLICATION_JSON_PROPERTY_SOURCE_NAME] == before


class TestOrdering:
    def test_default_order(self):
        processor = ApplicationJsonEnvironmentPostProcessor()
        assert processor.order == HIGHEST_PRECEDENCE + 5
        assert ApplicationJsonEnvironmentPostProcessor.DEFAULT_ORDER == -2147483643

    def test_order_is_settable(self):
        processor = ApplicationJsonEnvironmentPostProcessor()
        processor.order = 10
        assert processor.order == 10

    def test_satisfies_protocol(self):
        assert isinstance(ApplicationJsonEnvironmentPostProcessor(), EnvironmentPostProcessor)

    def test_apply_post_processors_runs_in_ascending_order(self):
        calls = []

        class Recorder:
            def __init__(self, label, order=None):
                self.label = label
                if order is not None:
                    self.order = order

            def post_process_environment(self, environment, application=None):
                calls.append(self.label)

        processors = [Recorder("unordered"), Recorder("late", 100), Recorder("early", HIGHEST_PRECEDENCE)]
        ordered = apply_post_processors(make_environment(), processors)
        assert calls == ["early", "late", "unordered"]
        assert [p.label for p in ordered] == calls

    def test_json_layer_visible_to_later_processors(self):
        seen = {}

        class Reader:
            order = 0

            def post_process_environment(self, environment, application=None):
                seen["value"] = environment.get_property("server.port")

        env = make_environment(system_environment={"SPRING_APPLICATION_JSON": '{"server":{"port":8080}}'})
        apply_post_processors(env, [Reader(), ApplicationJsonEnvironmentPostProcessor()])
        assert seen["value"] == 8080

    def test_lowest_precedence_constant(self):
        assert LOWEST_PRECEDENCE == 2**31 - 1
