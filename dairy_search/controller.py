"""
Query controller and plain-text rendering for establishment search results.
"""
import asyncio
from typing import List, Optional, Sequence
from loguru import logger

from dairy_search.config import SEARCH_LIMIT, SEARCH_THRESHOLD
from dairy_search.matchers.ranker import search
from dairy_search.models import EstablishmentRecord, SearchIndex

NO_MATCH_MESSAGE = "No establishment matched"

HELP_TEXT = """\
What is a Dairy Establishment Registration Number:
  In Canada, a dairy processing plant must have a Dairy Establishment
  Registration Number in order to sell the products made there in other
  provinces or export them internationally. The number is printed on all
  dairy products manufactured by these plants, and lets food inspectors link
  a product to a specific plant in case of contamination or spoilage.

  Because the number identifies a processing plant, it can also tell you
  which company makes a grocery chain's generic brand dairy products, or how
  far a product travelled to reach the shelf.

Where to find it on a product:
  There are no set rules on where it must be displayed. Common locations:
  - Printed with the "best before" date, often prefixed with "REG." or "AGRT"
  - Inside a small rectangle on the back label
  - Next to other food certification labels such as organic certification

  Products imported from outside Canada, or made by producers who only sell
  within their home province, may not carry a registration number.

Where does this data come from:
  The list of registered dairy establishments published by the
  Canadian Dairy Commission in September 2017.
"""


def render_record(record: EstablishmentRecord) -> str:
    """Render one establishment as a multi-line text card."""
    lines = [record.name]
    if record.adba:
        lines.append(f"  Also known as: {record.adba}")
    lines.append(f"  Registration #: {record.reg_no}")
    if record.street_addr:
        lines.append(f"  {record.street_addr}")
    locality = ", ".join(part for part in (record.city, record.province) if part)
    if record.postal_code:
        locality = f"{locality} {record.postal_code}".strip()
    if locality:
        lines.append(f"  {locality}")
    if record.telephone:
        lines.append(f"  {record.telephone}")
    return "\n".join(lines)


def render_results(query: str, records: Sequence[EstablishmentRecord]) -> str:
    """
    Render a result list for display.

    Returns an empty string for an empty query, and the no-match message
    when a non-empty query found nothing.
    """
    if not query or not query.strip():
        return ""
    if not records:
        return NO_MATCH_MESSAGE
    return "\n\n".join(render_record(r) for r in records)


def render_lookup(index: SearchIndex, reg_no: str) -> str:
    """Render the establishment with exactly this registration number."""
    record = index.get(reg_no)
    if record is None:
        return f"No establishment registered as {reg_no.strip()!r}"
    return render_record(record)


class QueryController:
    """
    Runs searches for successive query edits against a shared index.

    Each submission is numbered; when a newer query has been submitted by the
    time a search finishes, the older result is dropped instead of returned.
    """

    def __init__(
        self,
        index: SearchIndex,
        threshold: float = SEARCH_THRESHOLD,
        limit: int = SEARCH_LIMIT,
    ):
        self.index = index
        self.threshold = threshold
        self.limit = limit
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    async def submit(self, query: str) -> Optional[List[EstablishmentRecord]]:
        """
        Search for a query on a worker thread.

        Args:
            query (str): Current contents of the search input.

        Returns:
            Optional[List[EstablishmentRecord]]: Ranked records, or None if the
            query was superseded while it ran.
        """
        self._generation += 1
        generation = self._generation

        results = await asyncio.to_thread(search, self.index, query, self.threshold, self.limit)

        if generation != self._generation:
            logger.debug(f"Discarding stale results for {query!r}")
            return None
        return results
