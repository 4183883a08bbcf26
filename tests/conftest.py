"""Shared fixtures: small on-disk sites built under tmp_path."""

from __future__ import annotations

from pathlib import Path

import pytest

from polyblog.config import SiteConfig


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def post_text(title: str, **extra: object) -> str:
    lines = ["---", f"title: {title}"]
    for key, value in extra.items():
        lines.append(f"{key}: {value}")
    lines.extend(["---", "", f"Body of {title}."])
    return "\n".join(lines) + "\n"


@pytest.fixture
def config(tmp_path: Path) -> SiteConfig:
    return SiteConfig(
        {
            "app_info": {"app_name": "Demo", "app_version": "1.2.3", "app_domain": "https://example.com/"},
            "languages": {"default_language": "en", "installed_languages": ["en", "th"]},
            "locales": {"en": "en_US", "th": "th_TH"},
        },
        root=tmp_path,
    )


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """A two-language site with root posts, a nested section and templates."""
    write(
        tmp_path / "app.toml",
        "\n".join(
            [
                "[app_info]",
                'app_name = "Demo"',
                'app_version = "1.2.3"',
                'app_domain = "https://example.com"',
                "",
                "[languages]",
                'default_language = "en"',
                'installed_languages = ["en", "th"]',
                "",
                "[locales]",
                'en = "en_US"',
                'th = "th_TH"',
                "",
                "[seo]",
                'robots_content = "noindex"',
                "",
            ]
        ),
    )
    contents = tmp_path / "contents"
    write(contents / "index.yml", "title: Home\ndescription: Welcome home\nkeywords: [home, blog]\n")
    write(contents / "about.yml", "title: About\ndescription: About us\n")
    write(contents / "2025-04-26-hello-world.md", post_text("Hello"))
    write(contents / "2025-04-20-second-post.md", post_text("Second"))
    write(contents / "2024-12-31-old-post.md", post_text("Old"))
    write(contents / "2025-05-01-secret.md", post_text("Secret", draft="true"))
    write(contents / "blog" / "index.yml", "title: Blog\ndescription: Blog posts\n")
    write(contents / "blog" / "2025-01-02-nested.md", post_text("Nested"))
    write(contents / "th" / "news" / "index.yml", "lang: th\ntitle: News\ndescription: Thai news\n")
    write(contents / "th" / "news" / "2025-03-03-khao.md", post_text("Khao"))

    templates = tmp_path / "source"
    write(templates / "layouts" / "post.html", "<h1>{{ title }}</h1><p>{{ url }}</p>{{ post.contents|safe }}")
    write(
        templates / "layouts" / "articles.html",
        "<h1>{{ title }}</h1>{% for item in articles %}<a href=\"{{ item.url }}\">{{ item.title }}</a>{% endfor %}",
    )
    write(
        templates / "pages" / "index.html",
        "<title>{{ title }}</title><meta name=\"robots\" content=\"{{ robots_content }}\">"
        "{% for post in posts %}<li>{{ post.title }}</li>{% endfor %}",
    )
    write(templates / "pages" / "about.html", "<h1>{{ title }}</h1><p>{{ type_page }}</p><p>{{ path }}</p>")
    write(templates / "pages" / "blog.html", "<h1>{{ article.title }}</h1>")
    write(templates / "translations" / "th.toml", 'title = "หน้าแรก"\ndescription = "ยินดีต้อนรับ"\n')

    write(tmp_path / "public" / "robots-extra.txt", "static\n")
    return tmp_path
