from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from duoload import logging_conf


def test_events_are_written_as_json_lines(fresh_logging, tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "duoload.log"
    logger = logging_conf.configure_logging(log_file=log_file)

    logger.info("transfer_done", pages=3, admitted=29)
    logger.debug("page_fetched", page=1)

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry["message"] == "transfer_done"
    assert entry["pages"] == 3
    assert entry["admitted"] == 29
    assert entry["levelname"] == "INFO"
    assert entry["name"] == "duoload"


def test_console_handler_targets_stderr(fresh_logging) -> None:
    logging_conf.configure_logging(verbose=True)

    handlers = logging.getLogger("duoload").handlers
    assert len(handlers) == 1
    assert handlers[0].level == logging.DEBUG
    assert handlers[0].stream is sys.stderr
