"""
Round trip tests: documents read and written back must not change.
"""

from __future__ import annotations

import json

import pytest

from archetype_json.codec import deserialize, deserialize_node, serialize, serialize_pretty, serialize_to_string
from archetype_json.codec.script_ast import Condition, Expression, Literal, Script, Step


def test_document_round_trip(document_name, load_document, json_diff):
    text = load_document(document_name)
    script = deserialize(text)
    assert json_diff(serialize(script), json.loads(text)) == []


def test_ast_round_trip(document_name, load_document):
    script = deserialize(load_document(document_name))
    assert deserialize(serialize_to_string(script)) == script
    assert deserialize(serialize_pretty(script)) == script


def test_conditional_step_example(json_diff):
    text = (
        '{"kind":"script","expressions":{"e1":[{"kind":"literal","value":true}]},'
        '"children":[{"kind":"step","if":"e1","children":[]}]}'
    )
    script = deserialize(text)
    assert len(script.children) == 1
    condition = script.children[0]
    assert isinstance(condition, Condition)
    assert condition.expression == Expression((Literal(True),))
    assert condition.then == Step()
    assert condition.then.children == ()

    doc = serialize(script)
    assert list(doc["expressions"]) == ["e1"]
    assert doc["children"][0]["if"] == "e1"
    assert json_diff(doc, json.loads(text)) == []


def test_shared_expression_example():
    script = Script(
        children=(
            Condition(Expression.parse("true == (true || false)"), Step(label="one")),
            Condition(Expression.parse("true == (true || false)"), Step(label="two")),
        )
    )
    doc = serialize(script)
    assert len(doc["expressions"]) == 1
    assert doc["children"][0]["if"] == doc["children"][1]["if"]
    assert deserialize(json.dumps(doc)) == script


def test_shared_expression_in_document(load_document):
    doc = serialize(deserialize(load_document("nested_conditions.json")))
    assert list(doc["expressions"]) == ["e1", "e2"]
    first, second = doc["children"]
    assert first["if"] == second["if"] == "e1"
    assert first["children"][0]["children"][0]["children"][0]["if"] == "e1"


def test_renamed_expressions_are_kept():
    text = (
        '{"expressions":{"enabled":[{"kind":"literal","value":true}]},'
        '"children":[{"kind":"step","if":"enabled","children":[]}]}'
    )
    assert serialize(deserialize(text))["children"][0]["if"] == "enabled"


def test_fragment_round_trip(json_diff):
    text = '{"kind":"step","label":"Only","children":[{"kind":"inputs","children":[]}]}'
    assert json_diff(serialize(deserialize_node(text)), json.loads(text)) == []


@pytest.mark.parametrize(
    "text",
    [
        '{"kind":"script"}',
        '{"kind":"script","children":[{"kind":"step","label":"x"}]}',
        '{"kind":"script","children":[{"kind":"call","method":"m","children":[]}]}',
        '{"kind":"script","children":[{"kind":"output","children":[{"kind":"files","children":[]}]}]}',
    ],
)
def test_children_key_is_kept_as_read(text, json_diff):
    assert json_diff(serialize(deserialize(text)), json.loads(text)) == []


def test_deeply_nested_document():
    depth = 1500
    text = '{"kind":"script","children":[' + '{"kind":"step","children":[' * depth + "]}" * depth + "]}"
    doc = serialize(deserialize(text))
    levels = 0
    node = doc
    while node["children"]:
        assert len(node["children"]) == 1
        node = node["children"][0]
        levels += 1
    assert levels == depth
    assert node == {"kind": "step", "children": []}
