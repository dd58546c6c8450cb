"""
Fear & Greed command line runner.

============================================================
USAGE
============================================================
    fear-greed --input payload.json
    fear-greed --input payload.json --config config/fear_greed.yaml
    fear-greed --input - --max-position-size 50 < payload.json
    fear-greed --input payload.json --summary

============================================================
PAYLOAD
============================================================
    {
      "subScores": {
        "price":  {"value": 77.8,  "group": "internal"},
        "whales": {"value": 80.45, "group": "external"}
      },
      "maxPositionSize": 100
    }

"subScores" may also be a list of {name, value, group, scale}.

============================================================
EXIT CODES
============================================================
    0  success, evaluation JSON on stdout
    2  invalid payload / configuration / scores, error JSON on stderr

============================================================
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from .config import load_config
from .engine import FearGreedEngine, format_fear_greed_summary
from .exceptions import FearGreedError
from .schemas import EvaluationRequest, EvaluationResponse


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 2


# ============================================================
# LOGGING
# ============================================================

def setup_logging(level: str = "INFO") -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _read_payload(source: str) -> Dict[str, Any]:
    if source == "-":
        return json.load(sys.stdin)
    with open(source, "r") as f:
        return json.load(f)


def _fail(error: Dict[str, Any]) -> int:
    print(json.dumps(error), file=sys.stderr)
    return EXIT_INVALID


def run(args: argparse.Namespace) -> int:
    """Evaluate one payload and print the result."""
    try:
        request = EvaluationRequest.model_validate(_read_payload(args.input))
        config = load_config(args.config)

        max_position_size = (
            args.max_position_size
            if args.max_position_size is not None
            else request.max_position_size
        )
        if max_position_size is not None:
            config = config.with_max_position_size(max_position_size)

        engine = FearGreedEngine(config=config)
        evaluation = engine.evaluate(request.to_sub_scores())

    except FearGreedError as e:
        logger.error(f"Evaluation failed: {e}")
        return _fail(e.to_dict())
    except ValidationError as e:
        return _fail({"error_type": "ValidationError", "message": str(e)})
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        return _fail({"error_type": e.__class__.__name__, "message": str(e)})

    response = EvaluationResponse.from_evaluation(evaluation)
    print(json.dumps(response.model_dump(by_alias=True), indent=2))

    if args.summary:
        print(format_fear_greed_summary(evaluation.composite, evaluation.plan), file=sys.stderr)

    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Compute the Fear & Greed composite and trade plan",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--input",
        required=True,
        help="Path to the JSON payload, or '-' for stdin",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file (default: built-in weights)",
    )
    parser.add_argument(
        "--max-position-size",
        type=float,
        default=None,
        help="Override the position size ceiling",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Also print a human-readable summary to stderr",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)",
    )

    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
