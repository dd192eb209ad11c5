"""Teeny static site generator.

This package turns a tree of Markdown pages with front matter into HTML files
injected into plain HTML templates, copies static assets, and runs a local
development server that rebuilds only what a file change affects.

The main entry point is the CLI module, which provides commands for scaffolding
a project, building the site, and running the development server.

Architecture:
- PageRegistry tracks which pages depend on which template.
- TemplateEngine produces one HTML document per page.
- SiteBuilder runs full builds and the single-file operations used by the watcher.
- WatchLoop and DevServer share one asyncio event loop.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
