from datetime import datetime
from pathlib import Path

from folio import utils


def test_slugify_strips_date():
    assert utils.slugify("2024-01-02-post-title") == "post-title"
    assert utils.slugify("Mixed Case_Slug") == "mixed-case-slug"
    assert utils.slugify("!!!") == "index"


def test_extract_date_from_name():
    assert utils.extract_date_from_name("2024-01-15-cool") == datetime(2024, 1, 15)
    assert utils.extract_date_from_name("invalid") is None
    assert utils.extract_date_from_name("2024-13-32-post") is None


def test_parse_post_filename():
    assert utils.parse_post_filename("2015-08-30-schemas.md") == (
        datetime(2015, 8, 30),
        "schemas",
    )
    assert utils.parse_post_filename("2015-8-30-schemas.md") is None
    assert utils.parse_post_filename("2015-02-30-schemas.md") is None
    assert utils.parse_post_filename("2015-08-30-.md") is None
    assert utils.parse_post_filename("2015-08-30-!!.md") is None
    assert utils.parse_post_filename("schemas.md") is None


def test_path_helpers():
    assert utils.is_markdown(Path("a/b.MD"))
    assert not utils.is_markdown(Path("a/b.txt"))
    assert utils.is_internal_path(Path("_drafts/post.md"))
    assert utils.is_internal_path(Path(".git/notes.md"))
    assert not utils.is_internal_path(Path("posts/_draft.md"))
    assert not utils.is_internal_path(Path("posts/post.md"))
