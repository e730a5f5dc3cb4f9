"""Scholarverse - book storefront and reader server."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import uvicorn

from scholarverse.config import AppConfig, load_config
from scholarverse.errors import NotFoundError, ScholarverseError
from scholarverse.library import catalog
from scholarverse.logging_utils import build_uvicorn_log_config, setup_logging
from scholarverse.pages.pdf import render_pdf_pages
from scholarverse.web import create_app

log = logging.getLogger(__name__)


def render_book(config: AppConfig, book_id: str, pdf_path: Optional[Path] = None) -> int:
    """Rasterize a catalog book's PDF into the static page-image directory."""
    book = catalog.get_book(book_id)
    if book is None:
        raise NotFoundError(f"Book not found: {book_id}")
    if pdf_path is None:
        if not book.pdf_path:
            raise NotFoundError(f"No PDF available for book {book_id}")
        pdf_path = config.static_dir / book.pdf_path
    return render_pdf_pages(pdf_path, config.pages_dir / book_id)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="scholarverse")
    parser.add_argument("--env", type=Path, default=None, help="Path to a .env file")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the web server (default)")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    render = sub.add_parser("render", help="Render a book's PDF into page images")
    render.add_argument("book_id")
    render.add_argument("pdf", nargs="?", type=Path, default=None)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    config = load_config(env_path=args.env)
    setup_logging(config.log_path)

    if args.command == "render":
        try:
            count = render_book(config, args.book_id, args.pdf)
        except ScholarverseError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"Rendered {count} pages into {config.pages_dir / args.book_id}")
        return 0

    host = getattr(args, "host", None) or config.host
    port = getattr(args, "port", None) or config.port
    log.info("Serving on %s:%d (static dir %s)", host, port, config.static_dir)
    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_config=build_uvicorn_log_config(config.log_path),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
