"""Entry point — wires Config → completion backend → MealAnalysisService."""
import argparse
import asyncio
import base64
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from mealvision.config import Config
from mealvision.constants import LANGUAGE_ENGLISH, LANGUAGE_HEBREW
from mealvision.errors import MealAnalysisError
from mealvision.models import MealAnalysisResult
from mealvision.service import MealAnalysisService


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True, console=Console(stderr=True)))


def encode_image(path: Path) -> str:
    return base64.standard_b64encode(path.read_bytes()).decode()


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="mealvision", description="Estimate nutrition from a meal photo.")
    parser.add_argument("image", type=Path, help="JPEG photo of the meal")
    parser.add_argument(
        "--language",
        choices=(LANGUAGE_ENGLISH, LANGUAGE_HEBREW),
        default=LANGUAGE_ENGLISH,
    )
    parser.add_argument("--update", dest="update_text", default=None, help="user feedback to incorporate")
    args = parser.parse_args(argv)
    if not args.image.is_file():
        parser.error(f"image not found: {args.image}")
    return args


async def run(service: MealAnalysisService, args: argparse.Namespace) -> MealAnalysisResult:
    return await service.analyze_image(
        encode_image(args.image),
        language=args.language,
        update_text=args.update_text,
    )


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    config = Config.from_env()
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    service = MealAnalysisService.from_config(config)
    console = Console()
    try:
        result = asyncio.run(run(service, args))
    except MealAnalysisError as exc:
        logger.error("%s", exc)
        console.print(str(exc), style="red", markup=False)
        return 1
    console.print_json(json.dumps(result.to_dict(), ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
