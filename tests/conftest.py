import textwrap

import pytest

from component_locator.core.descriptor import Descriptor, Traversal
from component_locator.dom.soup import SoupDom
from component_locator.utils.config import Settings
from component_locator.utils.logger import configure_logging


FORM_HTML = textwrap.dedent(
    """
    <html><body>
      <form id="profile">
        <div class="form-group">
          <label for="first">First Name</label>
          <input id="first" value="Ada">
        </div>
        <div class="form-group">
          <label for="last">Last Name</label>
          <input id="last" value="Lovelace">
        </div>
        <div class="form-group">
          <label>Email <input id="email" value=""></label>
        </div>
      </form>
    </body></html>
    """
)


class FakeClock:
    """Millisecond clock that only moves when `sleep` is called."""

    def __init__(self):
        self.now = 0
        self.sleeps = []
        self.on_sleep = None

    def __call__(self) -> int:
        return self.now

    def sleep(self, ms: int) -> None:
        self.sleeps.append(ms)
        self.now += ms
        if self.on_sleep is not None:
            self.on_sleep(len(self.sleeps))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(DEFAULT_COMMAND_TIMEOUT_MS=200, RETRY_INTERVAL_MS=50)


@pytest.fixture
def json_log(tmp_path):
    """Send package logging to a JSON-lines file for one test, then restore it."""
    log_file = tmp_path / "logs" / "locator.jsonl"
    configure_logging(Settings(LOG_TO_FILE=True, LOG_FILE=log_file, LOG_LEVEL="DEBUG"), force=True)
    yield log_file
    configure_logging(force=True)


@pytest.fixture
def form_dom():
    return SoupDom(FORM_HTML)


@pytest.fixture
def input_descriptor():
    return Descriptor(
        name="Input",
        structural_query="input, textarea",
        text_query="label",
        traverse_via_text=Traversal(control=True),
    )


@pytest.fixture
def plain_input():
    return Descriptor(name="PlainInput", structural_query="input")
