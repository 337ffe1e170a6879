"""Tests for page rendering against the sample site."""

from __future__ import annotations

from pathlib import Path

import pytest

from leafpress.config.settings import LeafSettings
from leafpress.domain.errors import RenderError, UnknownComponentError
from leafpress.rendering.pages import PageRenderer
from leafpress.rendering.site import SiteData
from leafpress.services.build import BuildService
from tests.conftest import write_file


def _renderer(settings: LeafSettings) -> tuple[PageRenderer, SiteData]:
    service = BuildService(settings)
    site = service._prepare_site()
    return service.create_page_renderer(site), site


@pytest.fixture
def rendered(settings: LeafSettings) -> tuple[PageRenderer, SiteData]:
    return _renderer(settings)


class TestSampleSite:
    def test_markdown_page_in_default_layout(self, rendered) -> None:
        renderer, site = rendered
        html = renderer.render(site.index.lookup("first-post"))
        assert html.startswith("<!doctype html>")
        assert "<title>First Post</title>" in html
        assert '<link rel="canonical" href="https://example.dev/en/blog/first-post/">' in html
        assert '<time datetime="2020-01-01">January 1, 2020</time>' in html
        assert '<a class="w-author__link" href="/authors/alice/">Alice Example</a>' in html

    def test_markdown_passes(self, rendered) -> None:
        renderer, site = rendered
        body = renderer.render_body(site.index.lookup("first-post"))
        assert '<h2 id="getting-started">Getting started' in body
        assert body.count("<web-copy-code>") == 1
        assert '<div class="w-aside w-aside--note"><p>Remember <strong>this</strong>.</p>' in body

    def test_single_component_and_table(self, rendered) -> None:
        renderer, site = rendered
        body = renderer.render_body(site.index.lookup("second-post"))
        assert '<a class="w-post-card__link" href="/en/blog/first-post/">' in body
        assert '<div class="w-post-card__authors">Alice Example</div>' in body
        assert body.count('<div class="w-table-wrapper">') == 1

    def test_html_template_sees_collections(self, rendered) -> None:
        renderer, site = rendered
        assert renderer.render_body(site.index.lookup("about")) == "<p>3 posts</p>\n"

    def test_drafts_render_when_asked(self, rendered) -> None:
        renderer, site = rendered
        assert "<p>Not ready.</p>" in renderer.render(site.index.lookup("draft-post"))

    def test_globals_installed(self, rendered) -> None:
        renderer, _ = rendered
        env = renderer.environment
        assert "collections" in env.globals
        assert "PostCard" in env.globals
        assert "prettyDate" in env.filters


class TestLayouts:
    def test_empty_layout_renders_bare_body(self, site_root: Path, settings: LeafSettings) -> None:
        write_file(site_root, "content/en/bare.md", "---\nlayout: ''\n---\nJust *this*.\n")
        renderer, site = _renderer(settings)
        assert renderer.render(site.index.lookup("bare")) == "<p>Just <em>this</em>.</p>\n"

    def test_site_layout_by_short_name(self, site_root: Path, settings: LeafSettings) -> None:
        write_file(site_root, "_includes/layouts/plain.html", "[{{ page.slug }}]{{ content }}")
        write_file(site_root, "content/en/short.md", "---\nlayout: plain\n---\nHi\n")
        renderer, site = _renderer(settings)
        assert renderer.render(site.index.lookup("short")) == "[short]<p>Hi</p>\n"

    def test_site_layout_by_path(self, site_root: Path, settings: LeafSettings) -> None:
        write_file(site_root, "_includes/wrap.njk", "<main>{{ content }}</main>")
        write_file(site_root, "content/en/pathy.md", "---\nlayout: wrap.njk\n---\nHi\n")
        renderer, site = _renderer(settings)
        assert renderer.render(site.index.lookup("pathy")) == "<main><p>Hi</p>\n</main>"

    def test_missing_layout(self, site_root: Path, settings: LeafSettings) -> None:
        write_file(site_root, "content/en/lost.md", "---\nlayout: nowhere\n---\nHi\n")
        renderer, site = _renderer(settings)
        with pytest.raises(RenderError) as exc_info:
            renderer.render(site.index.lookup("lost"))
        assert exc_info.value.component == "template"
        assert exc_info.value.page == "en/lost.md"


class TestErrors:
    def test_unknown_component_names_page(self, site_root: Path, settings: LeafSettings) -> None:
        write_file(site_root, "content/en/broken.md", "{{ NoSuchThing() }}\n")
        renderer, site = _renderer(settings)
        with pytest.raises(UnknownComponentError) as exc_info:
            renderer.render(site.index.lookup("broken"))
        assert exc_info.value.name == "NoSuchThing"
        assert exc_info.value.page == "en/broken.md"

    def test_component_argument_error(self, site_root: Path, settings: LeafSettings) -> None:
        write_file(site_root, "content/en/bad.md", '{{ YouTube() }}\n')
        renderer, site = _renderer(settings)
        with pytest.raises(RenderError) as exc_info:
            renderer.render(site.index.lookup("bad"))
        assert exc_info.value.component == "YouTube"
        assert exc_info.value.page == "en/bad.md"

    def test_find_by_slug_miss_is_render_error(
        self, site_root: Path, settings: LeafSettings
    ) -> None:
        write_file(site_root, "content/en/ref.njk", "{{ ('nope' | findBySlug).title }}")
        renderer, site = _renderer(settings)
        with pytest.raises(RenderError) as exc_info:
            renderer.render(site.index.lookup("ref"))
        assert exc_info.value.component == "findBySlug"
        assert "nope" in exc_info.value.message

    def test_template_syntax_error(self, site_root: Path, settings: LeafSettings) -> None:
        write_file(site_root, "content/en/syntax.md", "{% if %}\n")
        renderer, site = _renderer(settings)
        with pytest.raises(RenderError) as exc_info:
            renderer.render(site.index.lookup("syntax"))
        assert exc_info.value.component == "template"


class TestTemplateEngines:
    def test_disabled_markdown_engine_keeps_braces(self, site_root: Path) -> None:
        write_file(site_root, "content/en/raw.md", "Literal {{ braces }}\n")
        settings = LeafSettings.from_cli(site_root=site_root, markdown_template_engine="")
        renderer, site = _renderer(settings)
        assert renderer.render_body(site.index.lookup("raw")) == "<p>Literal {{ braces }}</p>\n"


class TestComponentsInMarkdown:
    def test_fenced_code_inside_paired_component(
        self, site_root: Path, settings: LeafSettings
    ) -> None:
        write_file(
            site_root,
            "content/en/fenced.md",
            '{% call Aside("note") %}\n```\na\n\nb\n```\n{% endcall %}\n',
        )
        renderer, site = _renderer(settings)
        body = renderer.render_body(site.index.lookup("fenced"))
        assert body == (
            '<div class="w-aside w-aside--note">'
            "<web-copy-code><pre><code>a\n\nb\n</code></pre>\n</web-copy-code>"
            "</div>\n"
        )
        assert "<p>b" not in body

    def test_nested_paired_components(self, site_root: Path, settings: LeafSettings) -> None:
        write_file(
            site_root,
            "content/en/nested.md",
            '{% call Aside("note") %}\n{% call Banner("info") %}Inner **bold**{% endcall %}\n\n'
            "```\nx\n\ny\n```\n{% endcall %}\n",
        )
        renderer, site = _renderer(settings)
        body = renderer.render_body(site.index.lookup("nested"))
        assert body.startswith(
            '<div class="w-aside w-aside--note"><div class="w-banner w-banner--info">'
            "<p>Inner <strong>bold</strong></p>\n</div>\n"
            "<web-copy-code><pre><code>x\n\ny\n</code></pre>\n</web-copy-code>"
        )
        assert "leafpresscomponent" not in body

    def test_inline_component_stays_in_paragraph(
        self, site_root: Path, settings: LeafSettings
    ) -> None:
        write_file(
            site_root, "content/en/inline.md", "Hover {{ Tooltip(title='Hi') }} *here*.\n"
        )
        renderer, site = _renderer(settings)
        assert renderer.render_body(site.index.lookup("inline")) == (
            '<p>Hover <span class="w-tooltip w-tooltip--top" role="tooltip">Hi</span>'
            " <em>here</em>.</p>\n"
        )

    def test_html_pages_get_component_html_directly(
        self, site_root: Path, settings: LeafSettings
    ) -> None:
        write_file(site_root, "content/en/direct.njk", "{{ Tooltip(title='Hi') }}")
        renderer, site = _renderer(settings)
        assert renderer.render_body(site.index.lookup("direct")) == (
            '<span class="w-tooltip w-tooltip--top" role="tooltip">Hi</span>'
        )
