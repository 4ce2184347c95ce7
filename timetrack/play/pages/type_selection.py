"""
Strategies for picking the event type in the time event form.

The type field renders differently across sessions and locales, so no single
way of selecting a value is reliable. Strategies are tried in order, cheapest
and most specific first; the first one that reports success wins.
"""
from typing import Callable, Dict, List, NamedTuple, Tuple

from timetrack.errors import SelectionError
from timetrack.events import EventSink
from timetrack.models import EntryKind, SelectorSet
from timetrack.play.pages.base_page import BasePage

# Rendered ids of the dropdown items, per event type
CANDIDATE_SELECTORS: Dict[EntryKind, Tuple[str, ...]] = {
    EntryKind.CLOCK_IN: (
        "#__item15-titleText",
        "#__item15-content > div",
        "#__item15",
        "#sap\\.sf\\.attendancerecording\\.timesheets---timeRecordingView--vh-timeEventTypeCode-popup",
    ),
    EntryKind.CLOCK_OUT: (
        "#__item19",
        "#__item19-titleText",
        "#__item19-content > div",
    ),
}

# Generic option-like elements scanned by text, in this order
OPTION_SELECTORS: Tuple[str, ...] = (
    'li[role="option"]',
    "ui5-li",
    '[role="option"]',
    "li",
    ".sapMSelectListItem",
    ".sapMListItem",
    '[id*="item"]',
)

CLICK_OPTION_BY_TEXT = """
({ selectors, target }) => {
  const wanted = target.toLowerCase();
  for (const selector of selectors) {
    for (const option of Array.from(document.querySelectorAll(selector))) {
      const text = (option.textContent || '').toLowerCase().trim();
      if (text === wanted || text.includes(wanted)) {
        option.click();
        return true;
      }
    }
  }
  return false;
}
"""


def select_by_direct_input(page: BasePage, selectors: SelectorSet, kind: EntryKind, events: EventSink) -> bool:
    """Type the label into the combo box and confirm with Enter."""
    page.wait_for_element(selectors.type_dropdown, timeout=10000)
    page.click(selectors.type_dropdown)
    page.wait_for_idle(500)
    page.fill_text(selectors.type_dropdown, kind.display_text, delay=100)
    events.info("entry.type_typed", f'Typed "{kind.display_text}" in dropdown input')
    page.wait_for_idle(1000)
    page.press_key("Enter")
    page.wait_for_idle(500)
    return True


def select_by_candidate_selectors(page: BasePage, selectors: SelectorSet, kind: EntryKind, events: EventSink) -> bool:
    """Open the dropdown and click the first known item id that exists."""
    page.click(selectors.type_dropdown)
    page.wait_for_idle(1000)

    for candidate in CANDIDATE_SELECTORS[kind]:
        try:
            element = page.query_element(candidate)
            if element is None:
                events.info("entry.candidate_missing", "Selector not found", selector=candidate)
                continue
            page.click(element)
            events.info("entry.candidate_clicked", "Clicked selector", selector=candidate)
            return True
        except Exception as e:
            events.info("entry.candidate_failed", f"Selector failed: {e}", selector=candidate)
    return False


def select_by_text_search(page: BasePage, selectors: SelectorSet, kind: EntryKind, events: EventSink) -> bool:
    """Open the dropdown and click the first option whose text matches the label."""
    page.click(selectors.type_dropdown)
    page.wait_for_idle(1000)
    found = page.evaluate(
        CLICK_OPTION_BY_TEXT,
        {"selectors": list(OPTION_SELECTORS), "target": kind.display_text},
    )
    return bool(found)


Strategy = Callable[[BasePage, SelectorSet, EntryKind, EventSink], bool]


class NamedStrategy(NamedTuple):
    name: str
    run: Strategy


STRATEGIES: List[NamedStrategy] = [
    NamedStrategy("direct_input", select_by_direct_input),
    NamedStrategy("candidate_selectors", select_by_candidate_selectors),
    NamedStrategy("text_search", select_by_text_search),
]


def select_event_type(
    page: BasePage,
    selectors: SelectorSet,
    kind: EntryKind,
    events: EventSink,
    strategies: List[NamedStrategy] = STRATEGIES,
) -> str:
    """
    Select kind in the type field.

    Returns:
        Name of the strategy that succeeded

    Raises:
        SelectionError: If every strategy raised or reported no match
    """
    for strategy in strategies:
        events.info("entry.strategy", f"Trying type selection strategy {strategy.name}", kind=kind.display_text)
        try:
            if strategy.run(page, selectors, kind, events):
                events.info("entry.strategy_success", f"Type selected using {strategy.name}")
                return strategy.name
            events.info("entry.strategy_no_match", f"Strategy {strategy.name} found no match")
        except Exception as e:
            events.info("entry.strategy_failed", f"Strategy {strategy.name} failed: {e}")
    raise SelectionError(kind)
