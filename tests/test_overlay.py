"""Tests for render_overlay()."""

from __future__ import annotations

import platform

from site_xray import __version__
from site_xray.config import LogLevel, RunMode, XrayOptions
from site_xray.overlay import render_overlay


class TestRenderOverlay:
    def test_asset_paths_are_relative_to_page(self) -> None:
        html = render_overlay("/blog/post/", "./src/post.md", "", XrayOptions())
        assert '<script src="../../_xray/xray.js" type="module"></script>' in html
        assert 'href="../../_xray/xray.css"' in html
        assert 'data-relative="../../_xray"' in html

    def test_root_page(self) -> None:
        html = render_overlay("/", "./src/index.md", "", XrayOptions(dir="debug"))
        assert '<script src="./debug/xray.js"' in html

    def test_log_level(self) -> None:
        html = render_overlay("/", "i.md", "", XrayOptions(log_level=LogLevel.NONE))
        assert 'data-loglevel="none"' in html

    def test_page_html_is_inserted_verbatim(self) -> None:
        tree = '<ul class="root"><li>x</li></ul>'
        html = render_overlay("/", "i.md", tree, XrayOptions())
        assert f'<div id="pagedata" class="active">\n<h2>Page data</h2>\n<div>{tree}</div>' in html

    def test_global_panel_is_empty(self) -> None:
        html = render_overlay("/", "i.md", "", XrayOptions())
        assert "<h2>Global data</h2>\n<div></div>" in html

    def test_page_fields_are_escaped(self) -> None:
        html = render_overlay("/<a>/", "./src/<b>.md", "", XrayOptions())
        assert '<dd class="string">/&lt;a&gt;/</dd>' in html
        assert '<dd class="string">./src/&lt;b&gt;.md</dd>' in html

    def test_system_rows(self) -> None:
        html = render_overlay(
            "/",
            "i.md",
            "",
            XrayOptions(),
            host_name="Eleventy",
            host_version="3.0.0",
            run_mode=RunMode.SERVE,
        )
        assert '<dt>Eleventy</dt>\n<dd class="string">v3.0.0 (serve)</dd>' in html
        assert f'<dt>Python</dt>\n<dd class="string">{platform.python_version()}</dd>' in html
        assert f'<dt>Xray</dt>\n<dd class="string">v{__version__}</dd>' in html

    def test_unknown_host_version(self) -> None:
        html = render_overlay("/", "i.md", "", XrayOptions())
        assert '<dt>Generator</dt>\n<dd class="string">unknown</dd>' in html

    def test_starts_hidden_in_shadow_root(self) -> None:
        html = render_overlay("/", "i.md", "", XrayOptions())
        assert 'style="display:none;"' in html
        assert '<template shadowrootmode="open">' in html
