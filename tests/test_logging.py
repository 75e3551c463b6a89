import json
import logging

from rebalance_logging import StructuredFormatter, configure_root_logger, get_current_run, rebalance_run
from app_config import LoggingConfig

WALLET = "0x1111111111111111111111111111111111111111"


def make_record(**extra):
    record = logging.LogRecord("oneinch_connector.rebalancer", logging.INFO, __file__, 1,
                               "Generated %d swaps", (3,), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_format_includes_extra_fields_and_run():
    formatter = StructuredFormatter("json")

    with rebalance_run(WALLET) as run:
        line = formatter.format(make_record(event="swaps_generated", swap_count=3))

    payload = json.loads(line)
    assert payload["message"] == "Generated 3 swaps"
    assert payload["level"] == "INFO"
    assert payload["event"] == "swaps_generated"
    assert payload["swap_count"] == 3
    assert payload["run_id"] == run.run_id
    assert payload["wallet_address"] == WALLET


def test_text_format():
    line = StructuredFormatter("text").format(make_record(event="rebalance_noop"))

    assert "oneinch_connector.rebalancer - INFO - Generated 3 swaps" in line
    assert "[event=rebalance_noop]" in line
    assert "run_id" not in line


def test_run_context_is_restored():
    with rebalance_run(WALLET) as outer:
        with rebalance_run("0x2222222222222222222222222222222222222222") as inner:
            assert get_current_run() is inner
        assert get_current_run() is outer
    assert get_current_run() is None


def test_configure_root_logger(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_root_logger(LoggingConfig(level="warning", format="json"), log_dir=str(tmp_path))

        assert root.level == logging.WARNING
        assert len(root.handlers) == 2
        assert all(isinstance(h.formatter, StructuredFormatter) for h in root.handlers)
        assert (tmp_path / "rebalancer.log").exists()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
