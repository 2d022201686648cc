"""Search Deck - interactive TUI for querying an ingested corpus."""

from __future__ import annotations

from datetime import datetime

from rich.markup import escape
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.message import Message
from textual.widgets import DataTable, Footer, Header, Input, Label, Log, Rule, Static

from ragsearch.errors import RagSearchError
from ragsearch.models import SearchResult
from ragsearch.service import RetrievalService
from ragsearch.utils.text import split_sentences, tokenize

DEFAULT_TOP_K = 5
HIGHLIGHT_STYLE = "bold yellow"


def highlight_best_sentence(text: str, query: str) -> str:
    """Render chunk text as Rich markup with the best-matching sentence styled.

    The best sentence shares the most distinct query terms; ties go to the
    earliest one. Text is escaped, so brackets in the corpus stay literal.
    """
    sentences = split_sentences(text)
    if not sentences:
        return escape(text)

    query_terms = set(tokenize(query))
    if not query_terms:
        return escape(" ".join(sentences))

    overlaps = [len(query_terms & set(tokenize(s))) for s in sentences]
    best = overlaps.index(max(overlaps))
    parts = [escape(s) for s in sentences]
    parts[best] = f"[{HIGHLIGHT_STYLE}]{parts[best]}[/]"
    return " ".join(parts)


class ResultsTable(DataTable):
    """Ranked results as a table."""

    def on_mount(self) -> None:
        self.add_columns("#", "Score", "Chunk", "Snippet")
        self.cursor_type = "row"

    def show(self, results: list[SearchResult]) -> None:
        self.clear()
        for rank, r in enumerate(results, 1):
            snippet = r.chunk.text.replace("\n", " ")
            if len(snippet) > 60:
                snippet = snippet[:57] + "..."
            self.add_row(str(rank), f"{r.score:.3f}", escape(r.chunk.chunk_id), escape(snippet))


class SearchDeck(App):
    """Query console over a RetrievalService."""

    class ResultsReady(Message):
        def __init__(self, query: str, results: list[SearchResult]) -> None:
            self.query = query
            self.results = results
            super().__init__()

    class LogMessage(Message):
        def __init__(self, message: str) -> None:
            self.message = message
            super().__init__()

    CSS = """
    #main-container {
        layout: vertical;
        height: 100%;
        padding: 1;
    }

    #summary {
        height: auto;
        max-height: 8;
        padding: 1;
        background: $surface-darken-2;
        border: round $accent;
        margin-bottom: 1;
    }

    #query-input {
        margin-bottom: 1;
    }

    ResultsTable {
        height: 1fr;
        border: round $primary-darken-1;
    }

    #detail {
        height: auto;
        max-height: 10;
        padding: 1;
        border: round $secondary;
    }

    #log-panel {
        height: 6;
        border: round $primary-darken-2;
        background: $surface-darken-2;
    }

    .section-title {
        text-style: bold;
        color: $text;
    }
    """

    BINDINGS = [
        Binding("escape", "clear", "Clear", show=True),
        Binding("ctrl+q", "quit", "Quit", show=True),
    ]

    TITLE = "ragsearch"
    SUB_TITLE = "Search Deck"

    def __init__(self, service: RetrievalService, summary: str = "", top_k: int = DEFAULT_TOP_K):
        super().__init__()
        self.service = service
        self.summary = summary
        self.top_k = top_k
        self._results: list[SearchResult] = []
        self._last_query = ""

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Container(id="main-container"):
            yield Label("SUMMARY", classes="section-title")
            yield Static(escape(self.summary) if self.summary else "[dim]No summary[/]", id="summary")
            yield Input(placeholder="Type query and press Enter", id="query-input")
            with Vertical():
                yield ResultsTable(id="results")
                yield Static("[dim]Select a result to see its full text[/]", id="detail")
            yield Rule()
            yield Log(id="log-panel", auto_scroll=True)
        yield Footer()

    def on_mount(self) -> None:
        self._log(f"Loaded {len(self.service.chunks)} chunks. Type to search.")
        self.query_one("#query-input", Input).focus()

    def _log(self, message: str) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S")
        self.query_one("#log-panel", Log).write_line(f"[{timestamp}] {message}")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        query = event.value.strip()
        if not query:
            return
        self.run_query(query)

    def on_search_deck_results_ready(self, event: ResultsReady) -> None:
        self._results = event.results
        self._last_query = event.query
        self.query_one("#results", ResultsTable).show(event.results)
        self._log(f"{len(event.results)} results for: {event.query}")

    def on_search_deck_log_message(self, event: LogMessage) -> None:
        self._log(event.message)

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if 0 <= event.cursor_row < len(self._results):
            r = self._results[event.cursor_row]
            self.query_one("#detail", Static).update(
                f"[b]{escape(r.chunk.chunk_id)}[/]  score {r.score:.3f}\n"
                + highlight_best_sentence(r.chunk.text, self._last_query)
            )

    def action_clear(self) -> None:
        self._results = []
        self.query_one("#results", ResultsTable).clear()
        self.query_one("#query-input", Input).value = ""
        self.query_one("#detail", Static).update("")

    @work(exclusive=True, thread=True)
    def run_query(self, query: str) -> None:
        """Run the query in a background thread."""
        try:
            results = self.service.query(query, self.top_k)
        except RagSearchError as e:
            self.post_message(self.LogMessage(f"ERROR: {e}"))
            return
        self.post_message(self.ResultsReady(query, results))


def run_deck(service: RetrievalService, summary: str, top_k: int = DEFAULT_TOP_K) -> None:
    """Run the Search Deck TUI."""
    SearchDeck(service, summary, top_k).run()
