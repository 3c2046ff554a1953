"""
Embedded-state locator.
Finds the Apollo SSR data transport script in a page and cuts out its events array.
"""
import json
import re
from typing import Any, List, Union

from bs4 import BeautifulSoup

from launchscope.config import DEFAULT_SITE, SiteConfig
from launchscope.exceptions import PayloadParseError, StateNotFoundError
from launchscope.layers.repair import repair_json
from launchscope.models.events import RawEventRecord, parse_events
from launchscope.utils.logger import StageLogger


def make_soup(html: Union[str, BeautifulSoup]) -> BeautifulSoup:
    if isinstance(html, BeautifulSoup):
        return html
    return BeautifulSoup(html, "lxml")


class EmbeddedStateLocator:
    """Locates, repairs and decodes the embedded events payload."""

    def __init__(self, site: SiteConfig = DEFAULT_SITE):
        self.site = site
        self.events_regex = re.compile(site.events_pattern)
        self.logger = StageLogger("state_locator")

    def locate(self, html: Union[str, BeautifulSoup]) -> str:
        """
        Return the raw text of the events array.

        Raises StateNotFoundError when no script carries the transport marker,
        or the marker script has no events array. This means the page shape is
        unsupported; retrying will not help.
        """
        soup = make_soup(html)

        script_text = None
        for script in soup.find_all("script"):
            text = script.string or script.get_text()
            if text and self.site.state_marker in text:
                script_text = text
                break

        if script_text is None:
            self.logger.log_decision(
                decision="state_missing",
                reason=f"No script contains {self.site.state_marker}",
            )
            raise StateNotFoundError("Could not extract Apollo data from the page")

        match = self.events_regex.search(script_text)
        if not match:
            self.logger.log_decision(
                decision="events_missing",
                reason="Transport script has no events array",
                script_length=len(script_text),
            )
            raise StateNotFoundError("Could not extract Apollo data from the page")

        payload = match.group(1)
        self.logger.log_action("locate_events", "completed", payload_length=len(payload))
        return payload

    def decode(self, payload: str) -> List[Any]:
        """Repair and strictly parse the events payload."""
        repaired = repair_json(payload)
        if not repaired:
            raise PayloadParseError("Failed to sanitize Apollo data")

        try:
            data = json.loads(repaired)
        except (json.JSONDecodeError, RecursionError) as e:
            self.logger.log_error(str(e), error_type="payload_parse", payload_length=len(payload))
            raise PayloadParseError(f"Failed to parse Apollo data: {str(e)}") from e

        if not isinstance(data, list):
            raise PayloadParseError("Failed to parse Apollo data: events payload is not an array")

        return data

    def load_events(self, html: Union[str, BeautifulSoup]) -> List[RawEventRecord]:
        """locate -> repair -> parse -> typed event records."""
        records = parse_events(self.decode(self.locate(html)))
        self.logger.log_action(
            "load_events",
            "completed",
            event_count=len(records),
            feeds=[r.feed for r in records],
        )
        return records
