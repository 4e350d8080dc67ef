import logging
import os
import sys
from typing import List, Optional

from config import EngineConfig
from errors import ConfigurationError, SourceReadFailure
from payments_engine import PaymentsEngine
from report import write_report

LOG_LEVEL_ENV = "PAYMENTS_LOG_LEVEL"


def configure_logging() -> None:
    level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ConfigurationError(f"{LOG_LEVEL_ENV} must be a logging level name, got {level_name!r}")

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: payments-ledger <input.csv>", file=sys.stderr)
        return 1

    try:
        configure_logging()
        engine = PaymentsEngine(EngineConfig.from_env())
        engine.process_file(argv[0])
    except (ConfigurationError, SourceReadFailure) as e:
        logging.getLogger(__name__).error(str(e))
        return 1

    snapshots = sorted(engine.ledger.snapshots(), key=lambda snapshot: snapshot.client)
    write_report(snapshots, sys.stdout)
    print(engine.stats, file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
