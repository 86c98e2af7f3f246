"""CLI entry point for netguide."""

import argparse
import json
import logging
import sys
from pathlib import Path

from netguide.config import Config, load_config
from netguide.encoding import parse_guidelines
from netguide.models import FormatError, Variant
from netguide.narration import error_cue, format_cue, play, reply_script, upload_script
from netguide.render import run_views
from netguide.state import AppState


def _guideline_arg(value: str) -> frozenset:
    try:
        return parse_guidelines(value.split(","))
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _load_state(args: argparse.Namespace, config: Config) -> AppState:
    state = AppState.initial(config)
    if getattr(args, "guidelines", None) is not None:
        state = state.model_copy(update={"guidelines": args.guidelines})
    if args.file:
        return state.load_file(Path(args.file))
    return state.load_sample(seed=args.seed, config=config.sample)


def _add_dataset_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument(
        "file",
        nargs="?",
        help="Path to a .json or .csv dataset. If omitted, uses the sample network.",
    )
    p.add_argument("--seed", type=int, default=None, help="Seed for the sample network")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Network visualization with guidelines")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config", type=str, default=None, help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command")

    # preview command
    preview_parser = sub.add_parser("preview", help="Show node/edge counts and the first edges")
    _add_dataset_args(preview_parser)

    # degrees command
    degrees_parser = sub.add_parser("degrees", help="Print the degree of every node")
    _add_dataset_args(degrees_parser)

    # sample command
    sample_parser = sub.add_parser("sample", help="Write the sample network as JSON")
    sample_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sample_parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible output")
    sample_parser.add_argument("-o", "--output", type=str, default=None, help="Output file (default: stdout)")

    # render command
    render_parser = sub.add_parser("render", help="Lay out both views and write the comparison page")
    _add_dataset_args(render_parser)
    render_parser.add_argument(
        "--guidelines", type=_guideline_arg, default=None,
        help="Comma-separated active guidelines (size,color,crossings,clustering)",
    )
    render_parser.add_argument("--ticks", type=int, default=None, help="Maximum layout ticks")
    render_parser.add_argument("-o", "--output", type=str, default=None, help="HTML page path")
    render_parser.add_argument("--snapshot", type=str, default=None, help="Also write a static SVG here")
    render_parser.add_argument("--narrate", action="store_true", help="Play the agent narration")

    # chat command
    chat_parser = sub.add_parser("chat", help="Send a chat message and play the agent reply")
    chat_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    chat_parser.add_argument("message", help="Message text")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(Path(args.config) if args.config else None)

    try:
        if args.command == "preview":
            state = _load_state(args, config)
            preview = state.preview(config.preview_limit)
            print(state.dataset_info)
            print(preview.header)
            for source, target in preview.edges:
                print(f"  {source} -> {target}")

        elif args.command == "degrees":
            from netguide.degrees import compute_degrees

            state = _load_state(args, config)
            for node_id, degree in compute_degrees(state.dataset).items():
                print(f"  {node_id}: {degree}")

        elif args.command == "sample":
            state = AppState.initial(config).load_sample(seed=args.seed, config=config.sample)
            text = json.dumps(state.dataset.model_dump(), indent=2)
            if args.output:
                Path(args.output).write_text(text + "\n")
                print(f"Output: {args.output}")
            else:
                print(text)

        elif args.command == "render":
            from netguide.output.page import generate_page
            from netguide.output.svg import render_snapshot

            state = _load_state(args, config)
            if args.narrate:
                play(upload_script(state.source_name), lambda cue: print(format_cue(cue)))

            views = state.render(config, seed=args.seed)
            rounds = run_views(views.values(), max_ticks=args.ticks)
            for variant in Variant:
                sim = views[variant].simulation
                print(f"  {variant.value}: alpha={sim.alpha:.4f} after {rounds} ticks")

            page = generate_page(state, config, Path(args.output) if args.output else None)
            print(f"Output: {page}")
            if args.snapshot:
                print(f"Snapshot: {render_snapshot(views.values(), Path(args.snapshot))}")

        elif args.command == "chat":
            play(reply_script(args.message), lambda cue: print(format_cue(cue)))

        else:
            parser.print_help()

    except FormatError as e:
        print(format_cue(error_cue(str(e))), file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
