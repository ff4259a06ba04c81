"""
CLI entry point for uad-xpath-mapper.
Usage: uad-xpath-mapper generate input.xml output.txt [--include PROPERTY,IMAGE]
"""
import argparse
import logging
import sys
from typing import List, Optional

from .backend.errors import XPathMapperError

logger = logging.getLogger("uad_xpath_mapper")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uad-xpath-mapper",
        description="Flatten appraisal XML into `text : xpath` lines and related mapping tools"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate `text : xpath` lines for every leaf")
    gen.add_argument("input", help="Input XML file")
    gen.add_argument("output", help="Output text file")
    gen.add_argument("--ns", dest="namespace_prefix", help="Namespace prefix for emitted tags (default: d)")
    gen.add_argument("--include", dest="include_elements",
                     help="Comma-separated element names used in paths (default: PROPERTY,IMAGE)")
    gen.add_argument("--attr", dest="predicate_attribute_name",
                     help="Attribute used for predicates (default: ValuationUseType)")
    gen.add_argument("--filter-parent", dest="filter_parent_type",
                     help="Element type used for grouping and child-text predicates (default: IMAGE)")
    gen.add_argument("--filter-child", dest="filter_child_type",
                     help="Child whose text becomes the filter-parent predicate (default: ImageCategoryType)")
    gen.add_argument("--always-index", dest="always_show_index", action="store_true", default=None,
                     help="Always append the numeric index, including [1]")
    gen.add_argument("--no-grouping", dest="composite_grouping", action="store_false", default=None,
                     help="Disable (//outer/inner)[n] composite addressing")
    gen.add_argument("--config", "-c", dest="defaults", help="JSON defaults file")
    gen.add_argument("--debug", action="store_true", default=None,
                     help="Log configuration and leaf counts")

    maps = sub.add_parser("mappings", help="Build an <ImageMappings> XML from `KEY : VALUE` lines")
    maps.add_argument("input", help="Input mapping text file")
    maps.add_argument("output", help="Output XML file")
    maps.add_argument("--style", choices=["image", "metadata"], default="image",
                      help="Mapping layout (default: image)")
    maps.add_argument("--image-source", "-s", help="Image source element (default: d:ImageFileLocationIdentifier)")
    maps.add_argument("--wrap-prefix", "-w", help="Redirector wrapper for image style (default: tag)")

    sync = sub.add_parser("sync-images", help="Copy image categories from SOURCE into TARGET")
    sync.add_argument("source", help="XML with the reference categories")
    sync.add_argument("target", help="XML to update")
    sync.add_argument("output", help="Where to write the updated TARGET")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--port", "-p", type=int, default=8000, help="Port to run the server (default: 8000)")
    serve.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")

    return parser


def _run_generate(args) -> int:
    from .backend.config import load_options
    from .backend.xpath_generator import generate_xpaths

    options = load_options(
        args.defaults,
        namespace_prefix=args.namespace_prefix,
        include_elements=args.include_elements,
        predicate_attribute_name=args.predicate_attribute_name,
        filter_parent_type=args.filter_parent_type,
        filter_child_type=args.filter_child_type,
        always_show_index=args.always_show_index,
        composite_grouping=args.composite_grouping,
        debug=args.debug,
    )
    if options.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    result = generate_xpaths(args.input, args.output, options)
    print(f"Generated {result.count} XPath entries -> {args.output}")
    return 0


def _run_mappings(args) -> int:
    from .backend.mappings import convert_mapping_file

    count = convert_mapping_file(args.input, args.output, args.style, args.image_source, args.wrap_prefix)
    print(f"Wrote {count} mappings to {args.output}")
    return 0


def _run_sync(args) -> int:
    from .backend.image_sync import sync_image_files

    updates = sync_image_files(args.source, args.target, args.output)
    print(f"Done. {updates} image(s) updated. Output written to {args.output}")
    return 0


def _run_serve(args) -> int:
    from .backend.main import create_app
    import uvicorn

    app = create_app()
    url = "http://{}:{}".format(args.host, args.port)
    print("")
    print("UAD XPath Mapper")
    print("=" * 40)
    print("API Docs: {}/docs".format(url))
    print("=" * 40)

    uvicorn.run(app, host=args.host, port=args.port, log_level="info")
    return 0


_COMMANDS = {
    "generate": _run_generate,
    "mappings": _run_mappings,
    "sync-images": _run_sync,
    "serve": _run_serve,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        return _COMMANDS[args.command](args)
    except XPathMapperError as e:
        logger.error(str(e))
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
