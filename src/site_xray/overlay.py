"""render_overlay(): the inspector fragment injected into each page.

The fragment lives in a declarative shadow root so the page's own styles
never leak into it.  It is hidden until its stylesheet has loaded.  The
global-data panel is left empty: the browser fills it from the snapshot,
which is shared by every page of the build.
"""

from __future__ import annotations

import platform
from html import escape
from posixpath import join

from site_xray._version import __version__
from site_xray.config import RunMode, XrayOptions
from site_xray.paths import relative_to_root

__all__ = ["render_overlay"]

_TEMPLATE = """<script src="{script}" type="module"></script>
<div id="xray-plugin" data-relative="{relative}" data-loglevel="{loglevel}" style="display:none;">
<template shadowrootmode="open">
<link rel="stylesheet" href="{style}" onload="document.getElementById('xray-plugin').removeAttribute('style');">
<menu id="xray-tray">
<li class="xray"><a href="#" title="Xray">Xray</a></li>
<li class="buildinfo active"><a href="#" title="Build information">Build information</a></li>
<li class="pagedata active"><a href="#" title="Page data"></a></li>
<li class="globaldata active"><a href="#" title="Global data">Global data</a></li>
</menu>
<div id="xray" class="loading">
<main>
<header>
<h1><span>X</span><span>ray</span> <span>v{version}</span></h1>
</header>
<div id="buildinfo" class="active">
<h2>Build information</h2>
<div>
<h3>Page</h3>
<dl id="page">
<dt>URL</dt>
<dd class="string">{url}</dd>
<dt>Template</dt>
<dd class="string">{input_path}</dd>
</dl>
<h3>Browser</h3>
<dl id="browser">
<dt>DOM ready</dt>
<dd class="dom"></dd>
<dt>Loaded</dt>
<dd class="load"></dd>
</dl>
<h3>System</h3>
<dl>
<dt>{host_name}</dt>
<dd class="string">{host_version}</dd>
<dt>Python</dt>
<dd class="string">{python_version}</dd>
<dt>Xray</dt>
<dd class="string">v{version}</dd>
</dl>
</div>
</div>
<div id="pagedata" class="active">
<h2>Page data</h2>
<div>{page_html}</div>
</div>
<div id="globaldata" class="active">
<h2>Global data</h2>
<div></div>
</div>
</main>
</div>
</template>
</div>"""


def render_overlay(
    page_url: str,
    input_path: str,
    page_html: str,
    options: XrayOptions,
    *,
    host_name: str = "Generator",
    host_version: str = "",
    run_mode: RunMode | None = None,
) -> str:
    """Return the complete overlay markup for one page.

    Args:
        page_url: Absolute URL of the page, e.g. ``"/blog/post/"``.
        input_path: Template the page was rendered from.
        page_html: Rendered page-data tree (``render()`` output).  Inserted
            verbatim; it is already escaped.
        options: Plugin options (``dir`` and ``log_level`` are used).
        host_name: Display name of the site generator.
        host_version: Version of the site generator.
        run_mode: Run mode shown next to the host version.
    """
    relative = relative_to_root(page_url, f"/{options.dir}")
    host = f"v{host_version}" if host_version else "unknown"
    if run_mode is not None:
        host = f"{host} ({run_mode})"

    return _TEMPLATE.format(
        script=escape(join(relative, "xray.js")),
        style=escape(join(relative, "xray.css")),
        relative=escape(relative),
        loglevel=options.log_level,
        version=__version__,
        url=escape(page_url),
        input_path=escape(input_path),
        host_name=escape(host_name),
        host_version=escape(host),
        python_version=platform.python_version(),
        page_html=page_html,
    )
