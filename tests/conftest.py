from pathlib import Path

import pytest

PROJECTS_PAGE = """{:title "Projects"
 :layout :page
 :page-index 0
 :navbar? true}

### Leiningen Plugins

* [lein-monolith](https://github.com/example/lein-monolith)

### Libraries

Some prose about libraries.
"""

ABOUT_PAGE = """{:title "About" :layout :page :page-index 1 :navbar? true}

I write about Clojure.
"""

COLOPHON_PAGE = """{:title "Colophon" :layout :page :page-index 2 :navbar? false}

Built with a static site generator.
"""

SCHEMA_POST = """{:title "The Transformative Power of Schemas"
 :layout :post
 :tags ["clojure" "schema"]}

Schemas change how you think about data.

## Validation at the edges
"""

SCHEMA_POST_DRAFT = """{:title "The Transformative Power of Schemas"
 :layout :post
 :tags ["clojure" "schema" "design"]}

An earlier take on the same idea.
"""

ROUTING_POST = """{:title "Routing with Bidi" :layout :post :tags ["clojure" "routing"]}

Bidirectional routing.
"""


def write_corpus(root: Path) -> Path:
    content = root / "content" / "md"
    (content / "pages").mkdir(parents=True)
    (content / "posts").mkdir()
    (content / "_drafts").mkdir()
    (content / "pages" / "projects.md").write_text(PROJECTS_PAGE, encoding="utf-8")
    (content / "pages" / "about.md").write_text(ABOUT_PAGE, encoding="utf-8")
    (content / "pages" / "colophon.md").write_text(COLOPHON_PAGE, encoding="utf-8")
    posts = content / "posts"
    (posts / "2015-08-30-the-transformative-power-of-schemas.md").write_text(
        SCHEMA_POST, encoding="utf-8"
    )
    (posts / "2015-06-12-the-transformative-power-of-schemas.md").write_text(
        SCHEMA_POST_DRAFT, encoding="utf-8"
    )
    (posts / "2016-01-03-routing-with-bidi.md").write_text(
        ROUTING_POST, encoding="utf-8"
    )
    (content / "_drafts" / "unfinished.md").write_text("no metadata", encoding="utf-8")
    (content / "notes.txt").write_text("ignore", encoding="utf-8")
    return content


@pytest.fixture
def project(tmp_path):
    write_corpus(tmp_path)
    return tmp_path
