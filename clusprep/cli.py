"""
Command line entry point.

Convert a dataset on its own:
    clusprep transcode emotions.arff /tmp/clus/emotions-train.arff --labels 6

Prepare everything CLUS needs (data files and settings):
    clusprep prepare emotions.arff --working-dir /tmp/clus/ --name emotions \
        --settings emotions.s --labels 6
"""
import argparse
import logging
import sys

from clusprep.config import ClusConfig
from clusprep.ml.arff_reader import load_arff
from clusprep.ml.arff_transcoder import transcode
from clusprep.ml.preparer import ClusInputPreparer
from clusprep.utils.json_logging import setup_logging

logger = logging.getLogger(__name__)


def _add_label_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--labels", type=int, help="Number of label attributes at the end of the file")
    group.add_argument("--label-names", help="Comma separated names of the label attributes")


def _load(path, args):
    label_names = args.label_names.split(",") if args.label_names else None
    return load_arff(path, label_names=label_names, num_labels=args.labels)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="clusprep", description="Prepare multi-label data for CLUS.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    subparsers = parser.add_subparsers(dest="command", required=True)

    transcode_parser = subparsers.add_parser("transcode", help="Convert a dataset to CLUS compliant ARFF")
    transcode_parser.add_argument("input", help="Input ARFF file")
    transcode_parser.add_argument("output", help="Output ARFF file")
    _add_label_arguments(transcode_parser)

    prepare_parser = subparsers.add_parser("prepare", help="Write CLUS data and settings files")
    prepare_parser.add_argument("input", help="Training set ARFF file")
    prepare_parser.add_argument("--working-dir", required=True, help="CLUS working directory")
    prepare_parser.add_argument("--name", required=True, help="Dataset name used for generated files")
    prepare_parser.add_argument("--settings", help="Existing settings file to rewrite")
    prepare_parser.add_argument("--test", help="Optional test set ARFF file")
    prepare_parser.add_argument("--progress", action="store_true", help="Show progress bars")
    _add_label_arguments(prepare_parser)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level.upper(), json_format=args.json_logs)

    if args.command == "transcode":
        transcode(_load(args.input, args), args.output)
        return 0

    config = ClusConfig(args.working_dir, args.name, args.settings)
    train = _load(args.input, args)
    test = _load(args.test, args) if args.test else None
    outcome = ClusInputPreparer(config, show_progress=args.progress).prepare(train, test)
    if not outcome.ok:
        logger.error("Could not prepare CLUS inputs (stage: %s)", outcome.stage.value)
        return 1
    logger.info("CLUS inputs ready in %s", config.working_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
