from pathlib import Path

import pytest

DEFAULT_TEMPLATE = (
    "<html><head><title>{{ title }}</title></head>"
    '<body><div id="page-content"></div></body></html>'
)
HOME_TEMPLATE = (
    '<html><body><header>Home</header><div id="page-content"></div></body></html>'
)


def create_project(root: Path) -> Path:
    """Write a small project with nested pages, assets and hidden files."""
    for folder in ("pages/blog", "templates", "static/img"):
        (root / folder).mkdir(parents=True, exist_ok=True)
    (root / "templates" / "default.html").write_text(DEFAULT_TEMPLATE, encoding="utf-8")
    (root / "templates" / "homepage.html").write_text(HOME_TEMPLATE, encoding="utf-8")
    (root / "templates" / "style.css").write_text("body{}", encoding="utf-8")
    (root / "templates" / ".secret").write_text("x", encoding="utf-8")
    (root / "pages" / "index.md").write_text(
        "---\ntemplate: homepage\n---\n# Hello World", encoding="utf-8"
    )
    (root / "pages" / "blog" / "post.md").write_text(
        "---\ntitle: First Post\n---\nPost body", encoding="utf-8"
    )
    (root / "pages" / "blog" / "diagram.svg").write_text("<svg/>", encoding="utf-8")
    (root / "pages" / ".draft.md").write_text("# Hidden", encoding="utf-8")
    (root / "static" / "main.js").write_text("console.log(1)", encoding="utf-8")
    (root / "static" / "img" / "logo.png").write_bytes(b"\x89PNG")
    (root / "static" / ".DS_Store").write_bytes(b"junk")
    return root


@pytest.fixture
def project(tmp_path):
    return create_project(tmp_path)
