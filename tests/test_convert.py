import pytest
from pydantic import ValidationError

from csvjson.convert import convert_rows, header_names, parse_embedded
from csvjson.models import ConvertOptions
from csvjson.pipeline import convert_text, convert_text_to_records
from csvjson.tokenizer import tokenize


def opts(**kwargs):
    kwargs.setdefault("parse_embedded", False)
    kwargs.setdefault("unmarshal", False)
    kwargs.setdefault("infer", True)
    return ConvertOptions(**kwargs)


# ---------------------------------------------------------------------------
# convert_rows
# ---------------------------------------------------------------------------

def test_empty_rows():
    assert convert_rows([], opts()) == []

def test_header_only():
    assert convert_rows([["a", "b"]], opts()) == []

def test_header_names_trimmed_with_positional_fallback():
    assert header_names([" a ", "", "  ", "b"]) == ["a", "col_2", "col_3", "b"]

def test_short_rows_padded_with_empty_string():
    rows = [["a", "b", "c"], ["1"]]
    assert convert_rows(rows, opts()) == [{"a": 1, "b": "", "c": ""}]

def test_extra_cells_ignored():
    rows = [["a"], ["1", "2", "3"]]
    assert convert_rows(rows, opts()) == [{"a": 1}]

def test_blank_rows_dropped_regardless_of_length():
    rows = [["a", "b"], ["", " "], [""], ["\t", "", "  ", ""], ["1", ""]]
    assert convert_rows(rows, opts()) == [{"a": 1, "b": ""}]

def test_duplicate_headers_last_column_wins():
    records = convert_rows([["a", "", "a"], ["1", "2", "3"]], opts())
    assert records == [{"a": 3, "col_2": 2}]
    assert list(records[0]) == ["a", "col_2"]

def test_record_keys_follow_header_order():
    records = convert_rows([["z", "a", "m"], ["1", "2", "3"]], opts())
    assert list(records[0]) == ["z", "a", "m"]

def test_inference_off_keeps_strings():
    assert convert_rows([["a"], ["1"]], opts(infer=False)) == [{"a": "1"}]

def test_embedded_parse_off_keeps_text():
    rows = [["m"], ['{"a":1}']]
    assert convert_rows(rows, opts()) == [{"m": '{"a":1}'}]

def test_malformed_embedded_kept_as_string():
    rows = [["id", "bad"], ["1", "{notjson}"]]
    assert convert_rows(rows, opts(parse_embedded=True)) == [{"id": 1, "bad": "{notjson}"}]

def test_embedded_nan_literal_rejected():
    rows = [["v"], ["[NaN]"]]
    assert convert_rows(rows, opts(parse_embedded=True)) == [{"v": "[NaN]"}]

def test_double_encoded_json_parses_once():
    rows = [["v"], ['"{\\"a\\":1}"']]
    assert convert_rows(rows, opts(parse_embedded=True, infer=False)) == [{"v": '{"a":1}'}]

def test_unmarshal_only_applies_to_structures():
    rows = [["v", "w"], ['{"N":"5"}', "N"]]
    records = convert_rows(rows, opts(parse_embedded=True, unmarshal=True, infer=False))
    assert records == [{"v": 5, "w": "N"}]

def test_unmarshal_without_parse_leaves_text():
    rows = [["v"], ['{"N":"5"}']]
    assert convert_rows(rows, opts(unmarshal=True, infer=False)) == [{"v": '{"N":"5"}'}]

def test_inference_runs_inside_parsed_structures():
    rows = [["v"], ['{"n":"12","s":"x"}']]
    assert convert_rows(rows, opts(parse_embedded=True)) == [{"v": {"n": 12, "s": "x"}}]

def test_parse_embedded_result():
    good = parse_embedded("[1, 2]")
    assert good.ok and good.value == [1, 2]
    bad = parse_embedded("{oops")
    assert not bad.ok
    assert bad.value == "{oops"


# ---------------------------------------------------------------------------
# options
# ---------------------------------------------------------------------------

def test_options_default_to_auto_detect():
    options = ConvertOptions()
    assert options.auto_detect is True
    assert options.delimiter is None

def test_options_delimiter_turns_auto_detect_off():
    assert ConvertOptions(delimiter=";").auto_detect is False

def test_options_tab_escape():
    assert ConvertOptions(delimiter="\\t").delimiter == "\t"

@pytest.mark.parametrize(
    "kwargs",
    [
        {"delimiter": ",", "auto_detect": True},
        {"auto_detect": False},
        {"delimiter": "ab"},
    ],
)
def test_invalid_options(kwargs):
    with pytest.raises(ValidationError):
        ConvertOptions(**kwargs)


# ---------------------------------------------------------------------------
# end to end
# ---------------------------------------------------------------------------

CASES = [
    (
        "basic",
        "a,b\n1,2\n3,4",
        dict(parse_embedded=False, unmarshal=False),
        [{"a": 1, "b": 2}, {"a": 3, "b": 4}],
    ),
    (
        "nested JSON object",
        'id,name,meta\n1,Alice,"{""role"":""admin"",""tags"": [""a"",""b""]}"',
        dict(parse_embedded=True, unmarshal=False),
        [{"id": 1, "name": "Alice", "meta": {"role": "admin", "tags": ["a", "b"]}}],
    ),
    (
        "nested JSON array",
        'id,nums\n42,"[1,2,3]"',
        dict(parse_embedded=True, unmarshal=False),
        [{"id": 42, "nums": [1, 2, 3]}],
    ),
    (
        "tab autodetect",
        "a\tb\nX\tY",
        dict(parse_embedded=False, unmarshal=False),
        [{"a": "X", "b": "Y"}],
    ),
    (
        "CRLF",
        "a,b\r\n1,2\r\n",
        dict(parse_embedded=False, unmarshal=False),
        [{"a": 1, "b": 2}],
    ),
    (
        "malformed JSON tolerated",
        'id,bad\n1,"{notjson}"',
        dict(parse_embedded=True, unmarshal=False),
        [{"id": 1, "bad": "{notjson}"}],
    ),
    (
        "DynamoDB inline map",
        'facility\n"{""zip"":{""N"":""32301""},""flag"":{""BOOL"":false},""name"":{""S"":""X""},'
        '""arr"":{""L"": [{""S"":""a""},{""N"":""2""}] } }"',
        dict(parse_embedded=True, unmarshal=True),
        [{"facility": {"zip": 32301, "flag": False, "name": "X", "arr": ["a", 2]}}],
    ),
    (
        "structure-based delimiter chooses comma",
        '"userId","facility"\n"abc","{""zip"":{""N"":""1""}}"',
        dict(parse_embedded=True, unmarshal=True),
        [{"userId": "abc", "facility": {"zip": 1}}],
    ),
    (
        "type inference",
        "a,b,c,d\nnull,true,false,123.45",
        dict(parse_embedded=False, unmarshal=False),
        [{"a": None, "b": True, "c": False, "d": 123.45}],
    ),
]


@pytest.mark.parametrize("name, text, flags, expected", CASES, ids=[c[0] for c in CASES])
def test_convert_text_to_records(name, text, flags, expected):
    options = ConvertOptions(infer=True, **flags)
    assert convert_text_to_records(text, options) == expected

def test_explicit_delimiter_skips_detection():
    options = ConvertOptions(delimiter=";", infer=False)
    assert convert_text_to_records("a,b\n1,2", options) == [{"a,b": "1,2"}]

def test_convert_text_status():
    outcome = convert_text("a\tb\nX\tY\n\t\n", ConvertOptions())
    assert outcome.ok
    assert outcome.delimiter == "\t"
    assert outcome.status == 'Parsed 1 row(s) with delimiter "\\t".'
    assert outcome.rows == 3
    assert outcome.dropped_rows == 1

def test_convert_text_no_rows():
    outcome = convert_text("", ConvertOptions())
    assert outcome.ok
    assert outcome.records == []
    assert outcome.status == "No rows detected. Make sure there's a header row."

def test_convert_text_reports_unexpected_failure(monkeypatch):
    def boom(rows, options):
        raise RuntimeError("kaput")

    monkeypatch.setattr("csvjson.pipeline.convert_rows", boom)
    outcome = convert_text("a,b\n1,2", ConvertOptions())
    assert not outcome.ok
    assert outcome.status == "Error: kaput"
    assert outcome.records == []

def test_tokenize_then_convert_matches_entry_point():
    text = 'id,name\n1,"Alice, A."'
    rows = tokenize(text, ",")
    assert rows[1][1] == "Alice, A."
    assert convert_rows(rows, opts()) == convert_text_to_records(text, ConvertOptions(parse_embedded=False))

def test_convert_text_renders_output():
    outcome = convert_text("a,b\n1,x", ConvertOptions(), indent=0)
    assert outcome.content == '[\n{\n"a": 1,\n"b": "x"\n}\n]'
    assert len(outcome.sha256) == 64

def test_convert_text_unencodable_value_is_an_error():
    outcome = convert_text('id,x\n1,"[""\\ud800""]"', ConvertOptions())
    assert not outcome.ok
    assert outcome.status.startswith("Error: ")
    assert outcome.content is None


# ---------------------------------------------------------------------------
# byte order marks
# ---------------------------------------------------------------------------

def test_leading_bom_stripped_from_header():
    records = convert_text_to_records("\ufeffid,name\n1,a", ConvertOptions())
    assert list(records[0]) == ["id", "name"]
    assert records == [{"id": 1, "name": "a"}]

def test_bom_only_header_cell_gets_positional_name():
    assert header_names(["\ufeff", "b"]) == ["col_1", "b"]

def test_bom_only_row_is_blank():
    rows = [["a", "b"], ["\ufeff", " "], ["1", "2"]]
    assert convert_rows(rows, opts()) == [{"a": 1, "b": 2}]
