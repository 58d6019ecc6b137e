"""Command-line entry point for the research engine."""
import argparse
import asyncio
import sys
import logging
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from src.config.settings import Settings
from src.costs import format_cost
from src.models import CompositeReport, ResearchRequest
from src.orchestrator import ResearchEngine


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='[%(asctime)s] %(levelname)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Research a ticker across social, news and web-research providers."
    )
    parser.add_argument("symbol", help="Ticker symbol, e.g. ATYR")
    parser.add_argument("--company", required=True, help="Company name")
    parser.add_argument("--sector", default=None, help="Sector (default: Unknown)")
    parser.add_argument("--price", required=True, type=float, help="Current share price")
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Settings file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    return parser.parse_args(argv)


def load_and_validate_config(config_path: Path) -> Settings:
    """Load environment variables and settings.

    A missing settings file falls back to defaults.

    Raises:
        SystemExit: If the settings file cannot be parsed.
    """
    load_dotenv()

    if not config_path.exists():
        logger.warning(f"{config_path} not found, using default settings")
        return Settings()

    try:
        settings = Settings.from_yaml(config_path)
        logger.info(f"✓ Settings loaded from {config_path}")
    except Exception as e:
        logger.error(f"Failed to parse {config_path}: {e}")
        sys.exit(1)

    return settings


def format_report(report: CompositeReport) -> str:
    """Render a composite report as plain text."""
    lines = [
        "=" * 60,
        f"{report.symbol} - {report.company_name} ({report.company_type.value})",
        "=" * 60,
    ]
    if report.aggregate is None:
        lines.append("Aggregate sentiment: no providers succeeded")
    else:
        contributors = ", ".join(p.value for p in report.aggregate.contributors)
        lines.append(
            f"Aggregate sentiment: {report.aggregate.label.value.upper()} "
            f"({report.aggregate.score:+.2f}, from {contributors})"
        )

    source = "fallback" if report.instructions_source == "fallback" else "orchestrator"
    lines.append(f"Prompts: {source}; key topics: {', '.join(report.key_topics)}")
    lines.append("")
    lines.append("Providers:")
    for provider_id, status in report.provider_status.items():
        error = report.errors.get(provider_id)
        detail = f" ({error.kind.value}: {error.message})" if error else ""
        lines.append(f"  {provider_id.value:<8} {status.value}{detail}")

    for summary in report.summaries.values():
        lines += ["", summary]

    lines += [
        "",
        f"Orchestration cost: {format_cost(report.orchestration_cost)}",
        f"Total cost: {format_cost(report.total_cost)}",
    ]
    return "\n".join(lines)


async def run(args: argparse.Namespace, settings: Settings) -> CompositeReport:
    request = ResearchRequest(
        symbol=args.symbol,
        company_name=args.company,
        sector=args.sector,
        current_price=args.price,
        credentials=settings.api_keys.to_credentials(),
    )

    engine = ResearchEngine.from_settings(settings)
    try:
        return await engine.run(request)
    finally:
        await engine.aclose()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = load_and_validate_config(args.config)

    try:
        report = asyncio.run(run(args, settings))
    except ValidationError as e:
        logger.error(f"Invalid request: {e}")
        return 2

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print(format_report(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
