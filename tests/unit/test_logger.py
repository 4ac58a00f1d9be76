import json
import logging

import pytest

from component_locator.core.assertions import exist
from component_locator.core.errors import LocateTimeoutError
from component_locator.core.options import LocateOptions
from component_locator.core.resolver import CommandLog, RetryableResolver
from component_locator.dom.soup import SoupDom
from component_locator.utils.logger import PACKAGE_LOGGER, get_logger, log_with_context, set_log_level


def read_records(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_settled_lookup_is_one_json_record(json_log, form_dom, plain_input, settings, clock):
    resolver = RetryableResolver(form_dom, settings, clock=clock, sleep=clock.sleep)
    resolver.resolve(
        lambda: [form_dom.root()],
        plain_input,
        None,
        LocateOptions(timeout_ms=0),
        [exist()],
        command_log=CommandLog(component="PlainInput"),
    )

    settled = [r for r in read_records(json_log) if r["logger"] == "component_locator.core.resolver"]
    assert len(settled) == 1
    record = settled[0]
    assert record["level"] == "INFO"
    assert record["component"] == "PlainInput"
    assert record["state"] == "settled_success"
    assert record["attempts"] == 1
    assert record["elements"] == 1
    assert "-> ok" in record["msg"]


def test_retries_leave_debug_breadcrumbs(json_log, plain_input, settings, clock):
    dom = SoupDom("<p></p>")
    resolver = RetryableResolver(dom, settings, clock=clock, sleep=clock.sleep)
    with pytest.raises(LocateTimeoutError):
        resolver.resolve(
            lambda: [dom.root()],
            plain_input,
            None,
            LocateOptions(timeout_ms=100),
            [exist()],
            command_log=CommandLog(component="PlainInput"),
        )

    records = read_records(json_log)
    retries = [r for r in records if r["level"] == "DEBUG" and "retrying in" in r["msg"]]
    assert len(retries) == 2
    assert records[-1]["state"] == "settled_failure"


def test_log_with_context_merges_fields(json_log):
    base = log_with_context(get_logger("component_locator.session"), run="r1")
    log_with_context(base, component="Input").info("hello")

    (record,) = read_records(json_log)
    assert record["msg"] == "hello"
    assert record["run"] == "r1"
    assert record["component"] == "Input"


def test_set_log_level_filters_handlers(json_log):
    set_log_level("warning")
    pkg = logging.getLogger(PACKAGE_LOGGER)
    assert pkg.level == logging.WARNING
    assert all(handler.level == logging.WARNING for handler in pkg.handlers)

    log = get_logger("component_locator.session")
    log.info("dropped")
    log.warning("kept")
    assert [r["msg"] for r in read_records(json_log)] == ["kept"]
