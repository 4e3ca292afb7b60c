import pytest

from folio.edn import Keyword, MetadataSyntaxError, dumps, loads, read_map


def test_loads_page_metadata():
    data = loads('{:title "Projects" :layout :page :page-index 0 :navbar? true}')
    assert data == {
        "title": "Projects",
        "layout": "page",
        "page-index": 0,
        "navbar?": True,
    }
    assert isinstance(data["layout"], Keyword)
    assert not isinstance(data["title"], Keyword)
    assert list(data) == ["title", "layout", "page-index", "navbar?"]


def test_loads_scalars_sequences_commas_and_comments():
    text = """{:title "Quotes \\"and\\" slashes \\\\ here\\n"  ; trailing comment
     :tags ("clojure", "schema")
     :ratio -2.5e1
     :count +7
     :draft? false
     :author nil
     :empty []}"""
    data = loads(text)
    assert data["title"] == 'Quotes "and" slashes \\ here\n'
    assert data["tags"] == ["clojure", "schema"]
    assert data["ratio"] == -25.0
    assert data["count"] == 7
    assert data["draft?"] is False
    assert data["author"] is None
    assert data["empty"] == []


def test_read_map_returns_end_offset():
    text = '  {:title "x"}\nBody'
    data, end = read_map(text)
    assert data == {"title": "x"}
    assert text[end:] == "\nBody"


@pytest.mark.parametrize(
    "text, message",
    [
        ('{:title "x"', "Unterminated map"),
        ('{:title "x}', "Unterminated string"),
        ('{"title" "x"}', "Map keys must be keywords"),
        ('{:title "a" :title "b"}', "Duplicate key :title"),
        ("{:title}", "has no value"),
        ("{:tags [[1]]}", "Nested sequences"),
        ("{:meta {:a 1}}", "Nested maps"),
        ('{:date #inst "2015-01-01"}', "Tagged literals"),
        ("{:title foo}", "Unsupported value 'foo'"),
        ('{:title "\\q"}', "Unknown string escape"),
        ("{:tags [1 2}", "Unexpected '}'"),
        ('"not a map"', "Expected '{'"),
    ],
)
def test_malformed_maps_are_rejected(text, message):
    with pytest.raises(MetadataSyntaxError) as excinfo:
        loads(text)
    assert message in str(excinfo.value)


def test_syntax_error_reports_line_and_column():
    with pytest.raises(MetadataSyntaxError) as excinfo:
        loads('{:title "x"\n :layout page}')
    assert excinfo.value.line == 2
    assert excinfo.value.column == 10


def test_loads_rejects_trailing_content():
    with pytest.raises(MetadataSyntaxError, match="after the map"):
        loads("{:a 1} {:b 2}")


def test_dumps_writes_keywords_strings_and_sequences():
    text = dumps(
        {
            "title": 'Say "hi"',
            "layout": Keyword("post"),
            "tags": ["clojure", "schema"],
            "page-index": 0,
            "navbar?": True,
            "author": None,
            "ratio": 0.5,
        }
    )
    assert text == (
        '{:title "Say \\"hi\\"" :layout :post :tags ["clojure" "schema"] '
        ":page-index 0 :navbar? true :author nil :ratio 0.5}"
    )


def test_dumps_multiline():
    text = dumps({"title": "About", "layout": Keyword("page")}, multiline=True)
    assert text == '{:title "About"\n :layout :page}'


def test_dumps_rejects_unsupported_values():
    with pytest.raises(TypeError):
        dumps({"when": object()})
    with pytest.raises(ValueError):
        dumps({"has space": 1})


@pytest.mark.parametrize(
    "mapping",
    [
        {"title": "Projects", "layout": Keyword("page"), "page-index": 0, "navbar?": True},
        {"title": "Schemas", "layout": Keyword("post"), "tags": ["clojure", "schema"]},
        {"title": 'Edge "cases"\n\t\\', "layout": "page", "page-index": 12},
        {"title": "", "layout": Keyword("home"), "navbar?": False, "tags": []},
    ],
)
def test_round_trip(mapping):
    for multiline in (False, True):
        parsed = loads(dumps(mapping, multiline=multiline))
        assert parsed == mapping
        assert [type(v) for v in parsed.values()] == [type(v) for v in mapping.values()]
