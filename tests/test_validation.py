from pathlib import Path

import pytest

from conftest import PROJECTS_PAGE, SCHEMA_POST
from folio.content import parse_document
from folio.validation import DocumentValidator, ValidationIssue, validate_documents

POST_PATH = Path("posts/2015-08-30-schemas.md")


def issues_for(text, path=None, kind=None, **kwargs):
    document = parse_document(text, path, kind)
    return DocumentValidator(**kwargs).validate(document)


def test_sample_documents_are_clean():
    assert issues_for(PROJECTS_PAGE, Path("pages/projects.md")) == []
    assert issues_for(SCHEMA_POST, POST_PATH) == []


def test_missing_title_and_layout():
    issues = issues_for("{:page-index 0}")
    assert [(i.key, i.message) for i in issues] == [
        ("title", "is required"),
        ("layout", "is required"),
    ]
    assert all(i.is_error for i in issues)


@pytest.mark.parametrize(
    "text, key, message",
    [
        ('{:title "" :layout :page :page-index 0}', "title", "non-empty string"),
        ("{:title :oops :layout :page :page-index 0}", "title", "non-empty string"),
        ("{:title 3 :layout :page :page-index 0}", "title", "non-empty string"),
        ('{:title "x" :layout 1 :page-index 0}', "layout", "must be a keyword"),
        ('{:title "x" :layout :blog :page-index 0}', "layout", "unknown layout :blog"),
        ('{:title "x" :layout :page}', "page-index", "is required for pages"),
        ('{:title "x" :layout :page :page-index -1}', "page-index", "non-negative"),
        ('{:title "x" :layout :page :page-index true}', "page-index", "non-negative"),
        ('{:title "x" :layout :page :page-index 1.5}', "page-index", "non-negative"),
        ('{:title "x" :layout :page :page-index 0 :navbar? "yes"}', "navbar?", "true or false"),
    ],
)
def test_page_errors(text, key, message):
    issues = [i for i in issues_for(text) if i.is_error]
    assert len(issues) == 1
    assert issues[0].key == key
    assert message in issues[0].message


@pytest.mark.parametrize(
    "text, message",
    [
        ('{:title "x" :layout :post}', "is required for posts"),
        ('{:title "x" :layout :post :tags "clojure"}', "must be a sequence"),
        ('{:title "x" :layout :post :tags ["clojure" ""]}', "non-empty strings"),
        ('{:title "x" :layout :post :tags ["clojure" 1]}', "non-empty strings"),
        ('{:title "x" :layout :post :tags [:clojure]}', "non-empty strings"),
    ],
)
def test_post_tag_errors(text, message):
    issues = [i for i in issues_for(text, POST_PATH) if i.is_error]
    assert [i.key for i in issues] == ["tags"]
    assert message in issues[0].message


def test_post_filename_must_carry_date():
    issues = issues_for(SCHEMA_POST, Path("posts/schemas.md"))
    assert [i.message for i in issues] == [
        "post filename must look like YYYY-MM-DD-slug.md"
    ]
    assert issues[0].key is None


def test_conventions_are_warnings():
    page = issues_for(
        '{:title "x" :layout :page :page-index 0 :tags ["a"] :toc true}',
        Path("pages/x.md"),
    )
    assert [(i.key, i.severity) for i in page] == [
        ("tags", "warning"),
        ("toc", "warning"),
    ]

    post = issues_for(
        '{:title "x" :layout :post :tags ["a" "a"] :navbar? true :page-index 3}',
        POST_PATH,
    )
    assert [(i.key, i.severity) for i in post] == [
        ("tags", "warning"),
        ("navbar?", "warning"),
        ("page-index", "warning"),
    ]


def test_errors_sort_before_warnings():
    issues = issues_for('{:extra 1 :title "x" :layout :page}')
    assert [i.severity for i in issues] == ["error", "warning"]


def test_custom_layouts():
    text = '{:title "x" :layout :blog :page-index 0}'
    assert issues_for(text, layouts=["blog"]) == []
    assert DocumentValidator(layouts=["blog"]).is_valid(parse_document(text))
    assert not DocumentValidator().is_valid(parse_document(text))


def test_issue_str_and_validate_documents():
    issue = ValidationIssue(Path("pages/a.md"), "title", "is required")
    assert str(issue) == "pages/a.md: error: :title is required"
    assert str(ValidationIssue(None, None, "oops", "warning")) == "warning: oops"

    documents = [
        parse_document("{:page-index 0}"),
        parse_document(PROJECTS_PAGE),
    ]
    assert len(validate_documents(documents)) == 2
