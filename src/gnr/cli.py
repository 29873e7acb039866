# src/gnr/cli.py

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

from .formatting import build_description_html, build_description_report, sort_networks_by_name
from .graphs import build_interaction_graph, export_graphml
from .messages import DEFAULT_CATALOG, load_messages
from .pipeline import gene_scores_frame, network_weights_frame, run_toy_pipeline


def add_toy_subcommand(subparsers: argparse._SubParsersAction) -> None:
    parser_toy = subparsers.add_parser(
        "toy",
        help="Assemble a search result from a CSV data directory.",
        description="Assemble and print a related-genes search result from CSV data.",
    )

    parser_toy.add_argument(
        "--toy-data-dir",
        type=str,
        default="data/toy",
        help="Directory containing the data set and response CSV files (default: data/toy).",
    )
    parser_toy.add_argument(
        "--genes",
        type=str,
        nargs="+",
        required=True,
        help="Gene symbols that were searched for.",
    )
    parser_toy.add_argument(
        "--no-normalize",
        action="store_true",
        help="Do not rescale network weights to sum to 1 before assembly.",
    )
    parser_toy.add_argument(
        "--top-k",
        type=int,
        default=20,
        help="Number of top-ranked genes to print (default: 20).",
    )
    parser_toy.add_argument(
        "--output-csv",
        type=str,
        default=None,
        help="If provided, save the full gene ranking to this CSV file.",
    )
    parser_toy.add_argument(
        "--graphml",
        type=str,
        default=None,
        help="If provided, export the interaction graph to this GraphML file.",
    )

    parser_toy.set_defaults(func=run_toy_cli)


def add_describe_subcommand(subparsers: argparse._SubParsersAction) -> None:
    parser_describe = subparsers.add_parser(
        "describe",
        help="Print descriptions of the networks in a result.",
        description="Print report or HTML descriptions of every network in a search result.",
    )

    parser_describe.add_argument(
        "--toy-data-dir",
        type=str,
        default="data/toy",
        help="Directory containing the data set and response CSV files (default: data/toy).",
    )
    parser_describe.add_argument(
        "--genes",
        type=str,
        nargs="+",
        required=True,
        help="Gene symbols that were searched for.",
    )
    parser_describe.add_argument(
        "--html",
        action="store_true",
        help="Print HTML descriptions instead of one-line reports.",
    )
    parser_describe.add_argument(
        "--messages-csv",
        type=str,
        default=None,
        help="Optional CSV (key,template) overriding the label templates.",
    )

    parser_describe.set_defaults(func=run_describe_cli)


def _check_data_dir(path: str) -> Path:
    data_dir = Path(path)
    if not data_dir.exists():
        raise SystemExit(f"Data directory does not exist: {data_dir}")
    return data_dir


def run_toy_cli(args: argparse.Namespace) -> None:
    data_dir = _check_data_dir(args.toy_data_dir)

    result = run_toy_pipeline(
        data_dir=data_dir,
        genes=args.genes,
        normalize=not args.no_normalize,
    )

    genes_df = gene_scores_frame(result)
    if genes_df.empty:
        print("No genes found for the given query.")
        return

    _print_and_maybe_save(genes_df, args.top_k, args.output_csv)

    print("\nNetwork weights:\n")
    print(network_weights_frame(result).to_string(index=False))

    if args.graphml is not None:
        out_path = export_graphml(build_interaction_graph(result), Path(args.graphml))
        print(f"\nInteraction graph saved to: {out_path.resolve()}")


def run_describe_cli(args: argparse.Namespace) -> None:
    data_dir = _check_data_dir(args.toy_data_dir)
    messages = DEFAULT_CATALOG
    if args.messages_csv is not None:
        messages = load_messages(Path(args.messages_csv))

    result = run_toy_pipeline(data_dir=data_dir, genes=args.genes)

    for network in sort_networks_by_name(result.networks.values()):
        if args.html:
            text = build_description_html(network, messages=messages)
        else:
            text = build_description_report(network, messages=messages)
        print(f"{network.name}\t{text}")


def _print_and_maybe_save(
    df: pd.DataFrame,
    top_k: int,
    output_csv: str | None,
) -> None:
    top_k = min(top_k, len(df))
    print(f"\nTop {top_k} genes:\n")

    print(df.head(top_k).to_string(index=False))

    if output_csv is not None:
        out_path = Path(output_csv)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out_path, index=False)
        print(f"\nFull ranking saved to: {out_path.resolve()}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Gene network result assembler (GNR)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING).",
    )

    subparsers = parser.add_subparsers(
        title="subcommands",
        dest="subcommand",
        required=True,
    )

    add_toy_subcommand(subparsers)
    add_describe_subcommand(subparsers)

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not hasattr(args, "func"):
        raise SystemExit("No subcommand specified. Use 'toy' or 'describe'.")
    args.func(args)


if __name__ == "__main__":
    main(sys.argv[1:])
