import json
import signal
import sys
from pathlib import Path
from typing import Any

from docbatch.bootstrap import build_dispatcher
from docbatch.config.settings import Settings
from docbatch.dispatch.cancellation import CancellationToken
from docbatch.logging.logger import Log
from docbatch.trigger.adapter import TriggerAdapter
from docbatch.worker.batch_runner import BatchRunner


def _read_events(args: list[str]) -> list[Any]:
    raw = Path(args[0]).read_text(encoding="utf-8") if args else sys.stdin.read()
    parsed = json.loads(raw)
    return parsed if isinstance(parsed, list) else [parsed]


def _install_signal_handlers(cancellation: CancellationToken) -> None:
    def _cancel(signum: int, _frame: object) -> None:
        Log.warning(f"Received signal {signum}, cancelling batch run")
        cancellation.cancel()

    signal.signal(signal.SIGTERM, _cancel)
    signal.signal(signal.SIGINT, _cancel)


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> dispatcher -> read event(s) -> run each batch."""
    settings = Settings()
    Log.configure(settings.log_level)
    args = sys.argv[1:] if argv is None else argv

    try:
        events = _read_events(args)
    except (OSError, json.JSONDecodeError) as exc:
        Log.error(f"Could not read trigger event: {exc}")
        return 1

    runner = BatchRunner(build_dispatcher(settings), TriggerAdapter())
    cancellation = CancellationToken()
    _install_signal_handlers(cancellation)

    exit_code = 0
    for event in events:
        if not isinstance(event, dict):
            Log.error(f"Trigger event must be a JSON object, got {type(event).__name__}")
            exit_code = 1
            continue
        outcome = runner.run(event, cancellation)
        if outcome is None or not outcome.success:
            exit_code = 1
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
