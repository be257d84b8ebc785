"""CLI job that resolves the current location into a postal address."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from address_finder.core.config import ConfigError, Settings, get_settings
from address_finder.core.location import CoordinateSource, IpCoordinateSource, ReportedCoordinateSource
from address_finder.core.orchestrator import ResolutionOrchestrator
from address_finder.core.resolvers import FallbackResolver, PrimaryResolver

logger = logging.getLogger(__name__)

_DETAIL_FIELDS = ("state", "city", "district", "neighbourhood", "road", "building", "postcode", "country")


def build_orchestrator(source: CoordinateSource, settings: Optional[Settings] = None) -> ResolutionOrchestrator:
    settings = settings or get_settings()
    return ResolutionOrchestrator(
        source,
        PrimaryResolver(settings),
        FallbackResolver(settings),
        locale=settings.locale,
    )


def build_source(args: argparse.Namespace) -> CoordinateSource:
    if args.error_code is not None:
        return ReportedCoordinateSource.from_error(args.error_code)
    if args.latitude is not None and args.longitude is not None:
        return ReportedCoordinateSource.from_values(args.latitude, args.longitude, args.accuracy)
    logger.info("No coordinates given; falling back to IP geolocation")
    return IpCoordinateSource()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve GPS coordinates into a postal address")
    parser.add_argument("--lat", dest="latitude", type=float, help="Latitude of the reported fix")
    parser.add_argument("--lon", dest="longitude", type=float, help="Longitude of the reported fix")
    parser.add_argument("--accuracy", dest="accuracy", type=float, help="Accuracy of the fix in metres")
    parser.add_argument(
        "--error-code",
        dest="error_code",
        type=int,
        help="Report a platform geolocation error instead of a fix (1 = permission denied)",
    )
    parser.add_argument("--json", dest="as_json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--share", dest="share", action="store_true", help="Print the share payload")
    return parser


def render_text(orchestrator: ResolutionOrchestrator) -> str:
    address = orchestrator.address
    lines = [orchestrator.summary_text() or ""]
    for field in _DETAIL_FIELDS:
        value = getattr(address, field)
        lines.append(f"{field:>14}: {value or '-'}")
    return "\n".join(lines)


def run(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.latitude is None) != (args.longitude is None):
        parser.error("--lat and --lon must be given together")

    orchestrator = build_orchestrator(build_source(args))
    outcome = orchestrator.start()

    if not outcome.ok:
        if args.as_json:
            print(json.dumps({"state": orchestrator.state.value, "error": outcome.message}, ensure_ascii=False))
        else:
            print(outcome.message, file=sys.stderr)
        return 1

    share = orchestrator.share_data() if args.share else None
    if args.as_json:
        payload = {
            "state": orchestrator.state.value,
            "coordinates": orchestrator.coordinates.to_dict(),
            "address": outcome.address.to_dict(),
        }
        if share is not None:
            payload["share"] = share.to_dict()
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        print(render_text(orchestrator))
        if share is not None:
            print()
            print(share.title)
            print(share.text)
            print(share.url)
    return 0


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    try:
        code = run()
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    raise SystemExit(code)


if __name__ == "__main__":
    main()
