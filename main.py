#!/usr/bin/env python3
"""
TaylorView - render, tabulate and plot Taylor-series results.

Entry point for the command line.

Usage:
    taylorview result.json                 # Print the report as text
    taylorview -f latex result.json        # Report as LaTeX
    taylorview result.json --plot out.png  # Also draw the approximation chart
    cat result.json | taylorview -         # Read the response from stdin
    taylorview --render "x**(n+1)"         # Render one expression
"""

import sys
import os
import argparse
import json
import logging

# Add the project root to path for imports
sys.path.insert(0, os.path.dirname(__file__))


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    from taylorview import __version__

    parser = argparse.ArgumentParser(
        prog="taylorview",
        description="Render, tabulate and plot Taylor-series results",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  taylorview result.json                    Print the report as text
  taylorview -f html -o report.html r.json  Write an HTML report
  taylorview r.json --plot chart.png --wide Plot over [-1.5pi, 1.5pi]
  taylorview --render "x**(n+1)"            Render one expression as LaTeX
  taylorview --render "x**2" --png x2.png  Also save it as an image
  taylorview --normalize "√(x)+π×2"         Convert keyboard glyphs
        """,
    )

    # Positional: service response
    parser.add_argument(
        "result",
        nargs="?",
        help="Service response as JSON file ('-' for stdin)",
    )

    # Output format
    parser.add_argument(
        "-f",
        "--format",
        choices=["text", "latex", "json", "html"],
        default="text",
        help="Output format (default: text)",
    )

    parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Write the report to FILE instead of stdout",
    )

    parser.add_argument(
        "--no-steps",
        action="store_true",
        help="Leave the per-order steps out of the report",
    )

    # Chart
    parser.add_argument(
        "--plot",
        metavar="PNG",
        help="Save the approximation chart as a PNG image",
    )

    parser.add_argument(
        "--points",
        type=int,
        metavar="N",
        help="Number of sample points (default: 300)",
    )

    parser.add_argument("--x-min", type=float, help="Left end of the x-range")
    parser.add_argument("--x-max", type=float, help="Right end of the x-range")

    parser.add_argument(
        "--wide",
        action="store_true",
        help="Sample over [-1.5pi, 1.5pi] instead of [-pi, pi]",
    )

    # Single-expression tools
    parser.add_argument(
        "--render",
        metavar="EXPR",
        help="Render one canonical expression as LaTeX and exit",
    )

    parser.add_argument(
        "--png",
        metavar="FILE",
        help="With --render, also save the markup as a PNG image",
    )

    parser.add_argument(
        "--normalize",
        metavar="EXPR",
        help="Normalize keyboard glyphs (√ π × ÷) and exit",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show detailed output",
    )

    return parser


def build_sampling_options(args):
    """Sampling options from the command line, on top of the defaults."""
    from taylorview.models import SamplingOptions

    options = SamplingOptions.wide() if args.wide else SamplingOptions()
    if args.points is not None:
        options.num_points = args.points
    if args.x_min is not None:
        options.x_min = args.x_min
    if args.x_max is not None:
        options.x_max = args.x_max
    return options


def read_payload(source: str) -> dict:
    """Read a JSON response from a file path or '-' for stdin."""
    if source == "-":
        return json.load(sys.stdin)
    with open(source, encoding="utf-8") as fh:
        return json.load(fh)


def report_cli(args) -> int:
    """Analyze a service response and print or save the report."""
    from taylorview.pipeline import analyze_response
    from taylorview.output.exporter import ReportExporter, ExportOptions
    from taylorview.output.plotter import CurvePlotter

    options = build_sampling_options(args)
    if options.num_points < 2:
        print("Error: --points must be at least 2", file=sys.stderr)
        return 1

    payload = read_payload(args.result)
    need_curve = args.plot is not None or args.format == "json"
    report = analyze_response(payload, options, include_curve=need_curve)

    if args.verbose and report.curve is not None:
        print(
            f"Sampled {len(report.curve)} points, {report.curve.nan_count} undefined",
            file=sys.stderr,
        )

    exporter = ReportExporter(
        report,
        ExportOptions(include_steps=not args.no_steps, include_curve=need_curve),
    )

    if args.output:
        with open(args.output, "w", encoding="utf-8") as fh:
            fh.write(exporter.export(args.format))
        if args.verbose:
            print(f"Wrote {args.output}", file=sys.stderr)
    else:
        print(exporter.export(args.format))

    if args.plot:
        CurvePlotter().save(
            report.curve,
            args.plot,
            function=report.request.base_function,
            expansion_point=report.request.expansion_point,
        )
        if args.verbose:
            print(f"Wrote {args.plot}", file=sys.stderr)

    return 0


def main(argv=None):
    """Main entry point."""
    from taylorview.utils.errors import TaylorViewError, format_error_for_user

    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        # Single-expression modes
        if args.normalize is not None:
            from taylorview.input.normalizer import normalize

            print(normalize(args.normalize))
            return 0

        if args.render is not None:
            from taylorview.input.normalizer import normalize
            from taylorview.output.renderer import render

            markup = render(normalize(args.render))
            print(markup)
            if args.png:
                from taylorview.output.renderer import MarkupRenderer

                with open(args.png, "wb") as fh:
                    fh.write(MarkupRenderer().render_png(markup))
            return 0

        if not args.result:
            parser.print_usage(sys.stderr)
            print("Error: No result file given", file=sys.stderr)
            return 1

        return report_cli(args)

    except (TaylorViewError, OSError, ValueError) as e:
        print(f"Error: {format_error_for_user(e)}", file=sys.stderr)
        if args.verbose and isinstance(e, TaylorViewError) and e.technical_details:
            print(e.technical_details, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
