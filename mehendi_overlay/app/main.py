"""Console entry point for the pattern overlay pipeline."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from mehendi_overlay.app.container import AppContainer
from mehendi_overlay.application.apply_pattern import ApplyPatternRequest
from mehendi_overlay.domain.entities import PatternStyle
from mehendi_overlay.shared.errors import OverlayError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mehendi-overlay",
        description="Overlay a procedural henna pattern on a hand photo",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    apply = commands.add_parser("apply", help="Composite a pattern onto an image.")
    apply.add_argument("source", help="Image URL, data URI or local file path.")
    apply.add_argument(
        "--style",
        default="",
        help="Free-text style name; arabic, mandala or geometric, anything else is floral.",
    )
    apply.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the PNG here instead of printing the data URI.",
    )

    commands.add_parser("styles", help="List the available pattern styles.")

    serve = commands.add_parser("serve", help="Run the HTTP API with uvicorn.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


def _apply(container: AppContainer, args: argparse.Namespace) -> int:
    logger = container.logger()
    use_case = container.apply_pattern_use_case(loader=container.image_loader(allow_files=True))
    try:
        response = use_case.execute(ApplyPatternRequest(image_source=args.source, style_name=args.style))
    except OverlayError as exc:
        logger.error("app.failed", kind=exc.kind, stage=exc.stage, error=exc.message)
        return 1

    if args.output is not None:
        args.output.write_bytes(response.image.png_bytes())
        logger.info("app.written", path=str(args.output), style=response.style.value)
    else:
        print(response.data_uri)
    return 0


def _serve(container: AppContainer, args: argparse.Namespace) -> int:
    import uvicorn

    from mehendi_overlay.api.main import create_app

    uvicorn.run(create_app(container), host=args.host, port=args.port)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.command == "styles":
        for style in PatternStyle:
            print(style.value)
        return 0

    container = AppContainer()
    container.logging()
    if args.command == "serve":
        return _serve(container, args)
    return _apply(container, args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
