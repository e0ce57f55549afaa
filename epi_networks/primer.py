"""
This is the main module, used to render the primer on network analysis for epidemiology
"""
# pylint: disable=import-error
import argparse
import logging
import logging.config
from pathlib import Path
import sys
import time
from typing import List, Optional, Union

import matplotlib  # type: ignore

from epi_networks import chapters, common, graphs, report
from epi_networks.common import Issue, IssueSeverity, log_issue
from epi_networks.config import Config, load_config

# Default logger, used if module not called as __main__
logger = logging.getLogger(__name__)

TITLE = "Networks for epidemiology: a primer"


def main(argv):
    """
    Main function to render the primer
    """
    t0 = time.time()

    args = build_args(argv)
    setup_logger(args)
    logger.info("Parameters\n%s", "\n".join(f"\t{key}={value}" for key, value in args._get_kwargs()))  # pylint: disable=protected-access

    config = load_config(args.config, seed=args.seed)
    path = render(config, args.output)

    logger.info("Took %.2fs to render the primer.", time.time() - t0)
    logger.info("Open %s to read it.", path)


def render(config: Config, outdir: Union[str, Path]) -> Path:
    """Build the example graphs, run every configured chapter and write the document.

    Chapter names are checked before any graph is built (metric and algorithm names are checked by `load_config`), so
    a typo fails fast instead of after half the figures have been drawn.

    :param config: configuration, as returned by `config.load_config`
    :param outdir: directory in which to write the document
    :return: path of the rendered markdown file
    """
    # Figures are only ever saved to files
    matplotlib.use("Agg")

    selected = chapters.check_chapters(config["chapters"])

    issues: List[Issue] = []
    info = common.get_repo_info()
    if not info.git_sha:
        log_issue(logger, "Not rendered from a git repo, so no git_sha associated with the document", IssueSeverity.LOW,
                  issues)
    elif info.is_dirty:
        log_issue(logger, "Rendered from a dirty git repo", IssueSeverity.MEDIUM, issues)

    examples = graphs.build_example_graphs(config["graphs"], config["seed"])

    sections: List[report.Section] = []
    for chapter in selected:
        logger.info("Running chapter %s", chapter.__name__)
        sections.extend(chapter(examples, config, issues))

    return report.write_report(sections, outdir, TITLE, issues=issues, info=info, dpi=int(config["figure"]["dpi"]))


def setup_logger(args: Optional[argparse.Namespace] = None) -> None:
    """
    Configure package-level logger instance.

    :param args: argparse.Namespace
        args.logfile (pathlib.Path) is used to create a logfile if present
        args.quiet and args.debug control logging level to sys.stderr

    This function can be called without args, in which case it configures the
    package logger to write INFO and above to STDERR.

    When called with args, it uses args.logfile to determine if logs (by
    default, INFO and above) should be written to a file, and the path of
    that file. args.quiet and args.debug are used to control reporting
    level.
    """
    # Dictionary to define logging configuration
    logconf = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s",
            },
        },
        "handlers": {
            "stderr": {
                "level": "INFO",
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {__package__: {"handlers": ["stderr"], "level": "DEBUG"}},
    }

    # If args.logpath is specified, add logfile
    if args is not None and args.logfile is not None:
        logdir = args.logfile.parents[0]
        # If the logfile is going in another directory, we must
        # create/check if the directory is there
        try:
            if not logdir == Path.cwd():
                logdir.mkdir(parents=True, exist_ok=True)
        except OSError:
            logger.error("Could not create %s for logging", logdir, exc_info=True)
            raise SystemExit(1)  # pylint: disable=raise-missing-from
        # Add logfile configuration
        logconf["handlers"]["logfile"] = {  # type: ignore
            "class": "logging.FileHandler",
            "level": "INFO",
            "formatter": "standard",
            "filename": str(args.logfile),
            "encoding": "utf8",
        }
        logconf["loggers"][__package__]["handlers"].append("logfile")  # type: ignore

    # Set STDERR/logfile levels if args.quiet/args.debug specified
    if args is not None and args.quiet:
        logconf["handlers"]["stderr"]["level"] = "WARNING"  # type: ignore
    elif args is not None and args.debug:
        logconf["handlers"]["stderr"]["level"] = "DEBUG"  # type: ignore
        if "logfile" in logconf["handlers"]:  # type: ignore
            logconf["handlers"]["logfile"]["level"] = "DEBUG"  # type: ignore

    # Configure logger
    logging.config.dictConfig(logconf)


def build_args(argv):
    """Return parsed CLI arguments as argparse.Namespace.

    :param argv: CLI arguments
    :type argv: list
    """

    parser = argparse.ArgumentParser(
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        description="Renders a primer on network analysis for epidemiology: graph construction, network models, "
                    "centrality and community detection",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        type=Path,
        help="YAML file overriding the default configuration",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=Path("primer"),
        type=Path,
        help="Directory in which to write the document",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Overrides the random seed of the configuration",
    )
    parser.add_argument(
        "-l",
        "--logfile",
        dest="logfile",
        default=None,
        type=Path,
        help="Path for logging output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        dest="quiet",
        action="store_true",
        help="Prints only warnings to stderr",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Provide debug output to STDERR"
    )

    return parser.parse_args(argv)


if __name__ == "__main__":
    # The logger name inherits from the package, if called as __main__
    logger = logging.getLogger(f"{__package__}.{__name__}")
    main(sys.argv[1:])
