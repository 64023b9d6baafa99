import asyncio
import sys
from typing import List
from loguru import logger

from dairy_search.catalog import load_catalog
from dairy_search.config import CATALOG_PATH, LOG_LEVEL, SEARCH_LIMIT, SEARCH_THRESHOLD
from dairy_search.controller import HELP_TEXT, QueryController, render_lookup, render_results
from dairy_search.models import SearchIndex
from dairy_search.preparer import prepare

PROMPT = "Enter reg. number, name, or city (:help, :reg <number>, :quit)> "


def build_index(file_path: str) -> SearchIndex:
    """Load the catalog and prepare the search index once at startup."""
    records = load_catalog(file_path)
    index = prepare(records)
    logger.info(f"Search index ready: {len(index)} establishments from {file_path}")
    return index


async def interactive(controller: QueryController):
    """
    Prompt for queries until ':quit' or end of input.

    Reading stdin happens on a worker thread so the event loop stays free.
    """
    print("Canada Dairy Establishment Search")
    while True:
        try:
            query = await asyncio.to_thread(input, PROMPT)
        except EOFError:
            break

        command = query.strip().lower()
        if command in (":quit", ":q"):
            break
        if command == ":help":
            print(HELP_TEXT)
            continue
        if command.startswith(":reg "):
            print(render_lookup(controller.index, query.strip()[5:]))
            continue

        results = await controller.submit(query)
        if results is not None:
            print(render_results(query, results))


async def main(argv: List[str]) -> int:
    """
    Entry point.

    - With arguments: search once for the joined arguments and print the results.
    - Without arguments: run the interactive prompt.
    """
    # Initialize logs
    logger.remove()  # Remove default handler
    logger.add(sys.stderr, level=LOG_LEVEL, format="<green>{time:HH:mm:ss}</green> | <level>{message}</level>")

    try:
        index = build_index(CATALOG_PATH)
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Cannot build search index: {e}")
        return 1

    controller = QueryController(index, threshold=SEARCH_THRESHOLD, limit=SEARCH_LIMIT)

    if argv:
        query = " ".join(argv)
        results = await controller.submit(query)
        print(render_results(query, results or []))
        return 0

    await interactive(controller)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))
