import re

from component_locator.core.options import (
    LocateOptions,
    default_options,
    get_options,
    get_text,
    normalize_options,
)


def test_no_arguments_gives_defaults(settings):
    opts = normalize_options([], settings)
    assert opts == LocateOptions(all=False, log=True, timeout_ms=200)
    assert get_text([]) is None


def test_single_text_argument_is_text_not_options(settings):
    rest = ["First Name"]
    assert get_text(rest) == "First Name"
    assert get_options(rest) is None
    assert normalize_options(rest, settings).timeout_ms == 200


def test_single_pattern_argument_is_text():
    pattern = re.compile(r"Create|Save")
    assert get_text([pattern]) is pattern
    assert get_options([pattern]) is None


def test_single_mapping_argument_is_options(settings):
    rest = [{"all": True}]
    assert get_text(rest) is None
    opts = normalize_options(rest, settings)
    assert opts.all is True
    # missing fields come from defaults
    assert opts.log is True
    assert opts.timeout_ms == 200


def test_second_argument_is_always_options(settings):
    opts = normalize_options(["Name", {"log": False, "timeout_ms": 10}], settings)
    assert opts.log is False
    assert opts.timeout_ms == 10
    assert opts.all is False


def test_timeout_is_an_alias_in_milliseconds(settings):
    assert normalize_options([{"timeout": 4000}], settings).timeout_ms == 4000
    assert normalize_options(["Name", {"timeout": 0}], settings).timeout_ms == 0
    assert LocateOptions(timeout=1500).timeout_ms == 1500


def test_timeout_ms_wins_over_timeout(settings):
    assert normalize_options([{"timeout": 4000, "timeout_ms": 10}], settings).timeout_ms == 10


def test_malformed_options_fall_back_to_defaults(settings):
    assert normalize_options(["Name", 42], settings) == normalize_options([], settings)
    assert normalize_options([{"timeout_ms": -5}], settings).timeout_ms == 200
    assert normalize_options([None], settings).all is False


def test_empty_string_is_no_text():
    assert get_text([""]) is None


def test_defaults_are_fresh_per_call(settings):
    first = default_options(settings)
    first["all"] = True
    assert default_options(settings)["all"] is False

    supplied = {"all": True}
    normalize_options([supplied], settings)
    assert supplied == {"all": True}
    assert normalize_options([], settings).all is False


def test_locate_options_instance_is_accepted(settings):
    opts = LocateOptions(all=True, log=False, timeout_ms=0)
    assert normalize_options(["x", opts], settings) == opts
