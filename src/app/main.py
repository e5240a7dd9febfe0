"""
Streamgraph App entrypoint.

This module provides the CLI entrypoint to launch the Streamlit UI. It defers
all UI composition to the app.ui package and exists solely to start Streamlit
programmatically or render directly when already running under Streamlit.

Usage:
    - Python execution (hands process to Streamlit):
        python -m app.main --csv data/models.csv --config streamgraph.toml
        python -m app.main --write-sample data/sample_models.csv

    - Streamlit direct:
        streamlit run src/app/main.py -- --csv data/models.csv
"""

from __future__ import annotations

import argparse
import logging
import os
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

from app.ui import streamlit_app
from app.ui.sample import write_sample_csv
from streamgraph.config import ChartSettings

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure root logging from STREAMGRAPH_LOG_LEVEL (default INFO)."""
    level_name = os.environ.get("STREAMGRAPH_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _parser(add_help: bool = True) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="LLM Streamgraph App", add_help=add_help)
    parser.add_argument("--csv", default=None, help="CSV file shown until a file is uploaded")
    parser.add_argument(
        "--config",
        default=None,
        help="TOML settings file (default: ./streamgraph.toml or [tool.streamgraph.chart]).",
    )
    parser.add_argument(
        "--write-sample",
        default=None,
        metavar="PATH",
        help="Write a sample CSV in the upload format to PATH and exit.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Console entrypoint that launches Streamlit with the streamgraph UI.

    If already executing within a Streamlit server (environment variable
    STREAMLIT_SERVER_PORT is set), this function renders the app directly.
    Otherwise, it execs "python -m streamlit run <this_module>" to leverage
    Streamlit's reloader and argument parsing, passing through any supported
    options after "--".

    Args:
        argv (list[str] | None): Optional list of CLI arguments. If None,
            sys.argv[1:] is used.

    Examples:
        python -m app.main --csv data/models.csv
        streamlit run src/app/main.py -- --csv data/models.csv
    """
    args = list(sys.argv[1:] if argv is None else argv)
    ns = _parser().parse_args(args)

    load_dotenv()
    configure_logging()

    if ns.write_sample:
        palette = ChartSettings.load(ns.config).palette
        path = write_sample_csv(Path(ns.write_sample), palette=palette)
        logger.info("sample CSV written to %s", path)
        print(path)
        return

    # If invoked within Streamlit, just render
    if os.environ.get("STREAMLIT_SERVER_PORT"):
        streamlit_app(default_csv=ns.csv, config_path=ns.config)
        return

    # Otherwise, exec streamlit run on this module to take over the process
    app_path = Path(__file__).resolve()
    cmd = [sys.executable, "-m", "streamlit", "run", str(app_path)]

    passthrough: list[str] = []
    if ns.csv:
        passthrough += ["--csv", ns.csv]
    if ns.config:
        passthrough += ["--config", ns.config]
    if passthrough:
        cmd += ["--"] + passthrough

    try:
        os.execv(sys.executable, cmd)
    except OSError:
        subprocess.run(cmd, check=False)


if __name__ == "__main__":
    # Support: --csv, --config after '--' when using `streamlit run`
    load_dotenv()
    configure_logging()
    ns, _ = _parser(add_help=False).parse_known_args(sys.argv[1:])
    streamlit_app(default_csv=ns.csv, config_path=ns.config)
