import json

from src.wwproxy.normalize import (
    JsonBlobMatcher,
    StreamLinesMatcher,
    chunk_text,
    match_shape,
    normalize_visible_text,
)

def _chunk(s):
    return json.dumps({"value": {"type": "chunk", "value": s}})

def test_json_blob_output_field_is_visible_text():
    raw = json.dumps({"output": "hello {\"a\": 1}"})
    assert normalize_visible_text(raw) == "hello {\"a\": 1}"

def test_json_blob_text_field_is_visible_text():
    raw = json.dumps({"text": "plain words", "status": "done"})
    assert normalize_visible_text(raw) == "plain words"

def test_json_blob_pretty_printed_over_several_lines():
    raw = json.dumps({"output": "multi"}, indent=2)
    assert match_shape(raw) == ("json_blob", "multi")

def test_json_blob_that_is_already_final_payload():
    obj = {"hero": {"title": "Lisbon"}, "sections": []}
    shape, text = match_shape(json.dumps(obj))
    assert shape == "json_blob"
    assert json.loads(text) == obj

def test_json_blob_ignores_non_objects():
    assert JsonBlobMatcher().match("[1, 2]") is None
    assert JsonBlobMatcher().match("not json") is None

def test_stream_chunks_concatenate_in_order():
    raw = "\n".join([_chunk("Hel"), _chunk("lo "), _chunk("world")])
    assert normalize_visible_text(raw) == "Hello world"

def test_stream_skips_unparseable_lines():
    raw = "\n".join([
        "event: message",
        _chunk("a"),
        "{broken json",
        "",
        _chunk("b"),
        ": keep-alive",
    ])
    assert match_shape(raw) == ("stream_lines", "ab")

def test_stream_accepts_sse_data_prefix_and_crlf():
    raw = "data: " + _chunk("x") + "\r\ndata: " + _chunk("y") + "\r\ndata: [DONE]\r\n"
    assert normalize_visible_text(raw) == "xy"

def test_stream_mixes_output_and_text_records():
    raw = "\n".join([
        json.dumps({"output": "1"}),
        json.dumps({"text": "2"}),
        json.dumps({"value": {"type": "outputs", "values": {}}}),
        _chunk("3"),
    ])
    assert StreamLinesMatcher().match(raw) == "123"

def test_chunk_text_prefers_chunk_over_top_level_fields():
    obj = {"value": {"type": "chunk", "value": "c"}, "output": "o"}
    assert chunk_text(obj) == "c"
    assert chunk_text({"value": {"type": "chunk", "value": 5}}) is None
    assert chunk_text("string") is None

def test_plain_text_falls_back_to_raw():
    raw = "Step 1 done.\nFinal: {\"a\": 1}"
    assert match_shape(raw) == ("raw", raw)

def test_empty_body_is_empty_text():
    assert normalize_visible_text("") == ""

def test_deeply_nested_line_is_skipped():
    raw = "\n".join([_chunk('{"a": 1}'), "[" * 100000])
    assert match_shape(raw) == ("stream_lines", '{"a": 1}')
    assert JsonBlobMatcher().match("[" * 100000) is None

def test_empty_text_field_falls_through_to_raw():
    raw = json.dumps({"text": ""})
    assert match_shape(raw) == ("raw", raw)
