import re
import textwrap

import pytest

from component_locator import (
    ActionError,
    ComponentLocator,
    Descriptor,
    LocateTimeoutError,
    SoupDom,
    TextCapabilityError,
    Traversal,
    contain_text,
    have_length,
    have_value,
    not_exist,
)

SELECT_HTML = textwrap.dedent(
    """
    <div class="form-group">
      <label for="hero">some label</label>
      <select id="hero">
        <option value="alpha" selected>alpha</option>
        <option value="bravo">bravo</option>
      </select>
    </div>
    """
)

SECTIONS_HTML = textwrap.dedent(
    """
    <section id="billing"><label>Name <input id="billing-name"></label></section>
    <section id="shipping"><label>Name <input id="shipping-name"></label></section>
    """
)

Select = Descriptor(
    name="Select",
    structural_query="select",
    text_query="label",
    traverse_via_text=Traversal(control=True),
)
Section = Descriptor(name="Section", structural_query="section")


@pytest.fixture
def locator(form_dom, settings, clock):
    return ComponentLocator(form_dom, settings, clock=clock, sleep=clock.sleep)


def test_get_yields_candidate_set(locator, input_descriptor):
    found = locator.component(input_descriptor, "Last Name").get()
    assert [el["id"] for el in found] == ["last"]


def test_should_passes_and_returns_settled_chain(locator, input_descriptor):
    chain = locator.component(input_descriptor, "First Name").should(have_value("Ada"))
    assert chain.elements[0]["id"] == "first"
    assert len(chain) == 1


def test_should_accepts_plain_callables(locator, input_descriptor):
    def two_fields(found):
        assert len(found) == 2

    locator.component(input_descriptor, re.compile("Name"), {"all": True}).should(two_fields)


def test_should_times_out_with_last_candidates(locator, input_descriptor, clock):
    with pytest.raises(LocateTimeoutError) as exc_info:
        locator.component(input_descriptor, "First Name").should(have_value("Grace"))
    assert exc_info.value.last_candidates[0]["id"] == "first"
    assert "the value was 'Ada'" in str(exc_info.value)
    assert clock.now == 200


def test_should_waits_for_rerender(input_descriptor, settings, clock):
    dom = SoupDom("<div>spinner</div>")
    clock.on_sleep = lambda n: n == 3 and dom.load(
        "<label for='q'>Search</label><input id='q' value='done'>"
    )
    locator = ComponentLocator(dom, settings, clock=clock, sleep=clock.sleep)
    chain = locator.component(input_descriptor, "Search").should(have_value("done"))
    assert chain.elements[0]["id"] == "q"
    assert len(clock.sleeps) == 3


def test_options_only_call_finds_all(locator, plain_input):
    locator.component(plain_input, {"all": True}).should(have_length(3))


def test_zero_timeout_disables_retrying(locator, input_descriptor, clock):
    with pytest.raises(LocateTimeoutError):
        locator.component(input_descriptor, "Phone", {"timeout_ms": 0}).should(have_length(1))
    assert clock.sleeps == []


def test_not_exist(locator, input_descriptor):
    locator.component(input_descriptor, "Phone").should(not_exist())


def test_programmer_errors_raise_at_call_time(locator, plain_input):
    with pytest.raises(TextCapabilityError):
        locator.component(plain_input, "First Name")
    with pytest.raises(TypeError):
        locator.component(plain_input, "a", {}, "extra")


def test_clear_twice_is_a_no_op_the_second_time(settings, clock):
    dom = SoupDom(SELECT_HTML)
    locator = ComponentLocator(dom, settings, clock=clock, sleep=clock.sleep)

    locator.component(Select, "some label").clear()
    assert dom.value(dom.soup.find(id="hero")) is None

    locator.component(Select, "some label").clear()
    assert [e[0] for e in dom.events] == ["clear", "clear"]


def test_fill_then_assert(locator, input_descriptor, form_dom):
    locator.component(input_descriptor, "Email").clear().fill("ada@example.com")
    locator.component(input_descriptor, "Email").should(have_value("ada@example.com"))
    assert form_dom.soup.find(id="email")["value"] == "ada@example.com"


def test_fill_select_option(settings, clock):
    dom = SoupDom(SELECT_HTML)
    locator = ComponentLocator(dom, settings, clock=clock, sleep=clock.sleep)
    locator.component(Select, "some label").fill("bravo")
    locator.component(Select, "some label").should(have_value("bravo"))


def test_action_on_missing_component_times_out(locator, input_descriptor):
    with pytest.raises(LocateTimeoutError, match="exist"):
        locator.component(input_descriptor, "Phone").click()


def test_action_errors_are_wrapped(locator):
    group = Descriptor(name="Group", structural_query=".form-group")
    with pytest.raises(ActionError) as exc_info:
        locator.component(group).clear()
    assert exc_info.value.action == "clear"
    assert isinstance(exc_info.value.cause, ValueError)


def test_within_scopes_lookups(settings, clock):
    dom = SoupDom(SECTIONS_HTML)
    locator = ComponentLocator(dom, settings, clock=clock, sleep=clock.sleep)
    name = Descriptor(name="Input", structural_query="input", text_query="label",
                      traverse_via_text=Traversal(control=True))

    assert locator.component(name, "Name").elements[0]["id"] == "billing-name"

    shipping = dom.soup.find(id="shipping")
    with locator.within(shipping):
        assert locator.component(name, "Name").elements[0]["id"] == "shipping-name"
    assert locator.component(name, "Name").elements[0]["id"] == "billing-name"


def test_child_lookup_and_scope_argument(settings, clock):
    dom = SoupDom(SECTIONS_HTML)
    locator = ComponentLocator(dom, settings, clock=clock, sleep=clock.sleep)
    name = Descriptor(name="Input", structural_query="input", text_query="label",
                      traverse_via_text=Traversal(control=True))
    sections = locator.component(Section, {"all": True})

    child = sections.component(name, "Name", {"all": True})
    assert [el["id"] for el in child.get()] == ["billing-name", "shipping-name"]

    last = sections.get()[-1]
    assert locator.component(name, "Name", scope=last).elements[0]["id"] == "shipping-name"
    assert [el["id"] for el in sections.find("input")] == ["billing-name", "shipping-name"]


def test_command_log_one_record_per_lookup(locator, input_descriptor):
    locator.component(input_descriptor, "Last Name", {"timeout_ms": 100}).should(contain_text(""))
    locator.component(input_descriptor, "First Name", {"log": False}).get()

    assert len(locator.command_log) == 1
    record = locator.command_log[0]
    assert record.component == "Input"
    assert record.text == "'Last Name'"
    assert record.options == {"timeout_ms": 100}
    assert record.elements == 1


def test_action_after_rerender_targets_the_live_element(settings, clock):
    html = "<label for='a'>Query</label><input id='a' value='x'>"
    dom = SoupDom(html)
    locator = ComponentLocator(dom, settings, clock=clock, sleep=clock.sleep)
    field = Descriptor(name="Input", structural_query="input", text_query="label",
                       traverse_via_text=Traversal(control=True))

    chain = locator.component(field, "Query")
    detached = chain.get()[0]
    dom.load(html)
    chain.clear()

    assert dom.soup.find(id="a")["value"] == ""
    assert detached["value"] == "x"
    assert len(locator.command_log) == 2


def test_action_reuses_a_settled_result_while_attached(locator, input_descriptor, form_dom):
    chain = locator.component(input_descriptor, "Email")
    chain.get()
    chain.fill("ada@example.com")

    assert len(locator.command_log) == 1
    assert form_dom.soup.find(id="email")["value"] == "ada@example.com"
