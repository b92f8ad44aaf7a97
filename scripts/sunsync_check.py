"""Check the Home Assistant connection and optionally push one batch of readings.

Usage:
    python scripts/sunsync_check.py --diagnose
    python scripts/sunsync_check.py --device 2211229948 --readings readings.json
"""

import sys
import json
import argparse
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sunsync_bridge.config import load_settings
from sunsync_bridge.core.logging import get_logger, set_log_level
from sunsync_bridge.core.utils.http_pool import close_all
from sunsync_bridge.core.hass_ops import (
    diagnose_ha_setup,
    ensure_connectivity,
    sync_entities,
)

_log = get_logger("scripts.check")


def load_readings(path: Path) -> dict:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object of key -> value")
    return {str(k): "" if v is None else str(v) for k, v in data.items()}


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="SunSync -> Home Assistant connection check")
    parser.add_argument("--diagnose", action="store_true", help="Print diagnostic information first")
    parser.add_argument("--device", help="Inverter serial used in entity ids")
    parser.add_argument("--readings", type=Path, help="JSON file with sensor key -> value")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    if bool(args.device) != bool(args.readings):
        parser.error("--device and --readings go together")

    if args.verbose:
        set_log_level("DEBUG")

    settings = load_settings()
    if args.verbose:
        settings.verbose = True

    try:
        if args.diagnose:
            report = diagnose_ha_setup(settings)
            print(json.dumps(report, indent=2))

        result = ensure_connectivity(settings)
        if not result.success:
            _log.error("Home Assistant unreachable", err=str(result.error))
            return 1

        if args.device:
            readings = load_readings(args.readings)
            sync = sync_entities(settings, args.device, readings)
            if not sync.success:
                _log.error("Sync finished with failures", **(sync.data or {}))
                return 2
        return 0
    finally:
        close_all()


if __name__ == "__main__":
    sys.exit(main())
