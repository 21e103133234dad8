"""
Page pipeline: walk a paginated "book", render each page, merge, save.

The browser and PDF tools are in-memory fakes; the shape of the calls is the
point. Everything is composed into one Task that is forked once by Runtime.

Run: python examples/page_pipeline.py learnYouAHaskell
"""
import asyncio
import sys
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List

from adtpy import (
    NONE,
    Option,
    Runtime,
    Task,
    attempt,
    from_async,
    from_callback,
    log_progress,
    option_from_nullable,
    resolve,
)

BOOK_OPTIONS: Dict[str, Dict[str, Any]] = {
    "learnYouAHaskell": {
        "start_page": "http://learnyouahaskell.com/introduction",
        "output_filename": "LearnYouAHaskell.pdf",
        "pages": ["introduction", "starting-out", "types-and-typeclasses"],
    },
    "sicp": {
        "start_page": "https://mitpress.mit.edu/sicp/book.html",
        "output_filename": "StructureAndInterpretationOfComputerPrograms.pdf",
        "pages": ["contents", "chapter-1"],
    },
}


class FakePage:
    def __init__(self, pages: List[str]):
        self.pages = pages; self.index = 0

    async def goto(self, url: str) -> None:
        await asyncio.sleep(0); self.index = 0

    async def pdf(self) -> bytes:
        await asyncio.sleep(0)
        return f"%PDF {self.pages[self.index]}".encode()

    async def next_button(self):
        await asyncio.sleep(0)
        return self.index + 1 if self.index + 1 < len(self.pages) else None

    async def click(self, target: int) -> None:
        await asyncio.sleep(0); self.index = target


@dataclass(frozen=True)
class AppState:
    page: FakePage
    book: Dict[str, Any]
    rendered: List[bytes] = field(default_factory=list)
    next_button: Option[int] = NONE


def create_app_state(book_name: str, page_factory) -> Task[AppState]:
    def pick() -> Dict[str, Any]:
        if book_name not in BOOK_OPTIONS:
            raise KeyError(f"Unknown book to build: {book_name!r}")
        return BOOK_OPTIONS[book_name]
    return attempt(pick).map(lambda book: AppState(page=page_factory(book["pages"]), book=book))


def go_to_site(state: AppState) -> Task[AppState]:
    return from_async(lambda: state.page.goto(state.book["start_page"])).map(lambda _: state)


def create_pdf(state: AppState) -> Task[AppState]:
    return from_async(state.page.pdf).map(lambda doc: replace(state, rendered=state.rendered + [doc]))


def find_next_button(state: AppState) -> Task[AppState]:
    return (
        from_async(state.page.next_button)
        .map(option_from_nullable)
        .map(lambda button: replace(state, next_button=button))
    )


def click_button(state: AppState) -> Task[AppState]:
    return state.next_button.fold(
        lambda: resolve(state).chain(log_progress("No further next button found")),
        lambda button: from_async(lambda: state.page.click(button)).chain(lambda _: build_page_pdf(state)),
    )


def build_page_pdf(state: AppState) -> Task[AppState]:
    return (
        create_pdf(state)
        .chain(log_progress("PDF page rendered"))
        .chain(find_next_button)
        .chain(click_button)
    )


def save_merged_file(state: AppState, store: Dict[str, bytes]) -> Task[AppState]:
    # errback-style writer, as many I/O APIs expose
    def write(done) -> None:
        store[state.book["output_filename"]] = b"\n".join(state.rendered)
        done(None)
    return from_callback(write).map(lambda _: state)


def main(args: List[str], store: Dict[str, bytes]) -> Task[AppState]:
    book_name = args[1] if len(args) > 1 else ""
    return (
        create_app_state(book_name, FakePage)
        .chain(log_progress("AppState initialized"))
        .chain(go_to_site)
        .chain(log_progress("Start page visited"))
        .chain(build_page_pdf)
        .chain(log_progress("Building of PDF finished"))
        .chain(lambda state: save_merged_file(state, store))
        .chain(log_progress("Merged PDF file saved"))
    )


if __name__ == "__main__":
    sys.exit(Runtime().main(main(sys.argv, {})))
