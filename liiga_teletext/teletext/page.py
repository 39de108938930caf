"""
The teletext page: header texts, content rows and pagination.

Rows are packed greedily into pages of ``screen_height - 5`` lines (header,
subheader, a spacer, the footer and the season-countdown line). In wide
mode the limit applies to the taller of the two columns. A row taller than a
whole page still gets a page of its own, so there is always at least one
page.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..constants import DEFAULT_SUBHEADER, PAGE_NUMBER
from ..logging import logger
from ..models import GameData, ScoreType
from .layout import can_fit_wide, compact_columns, split_for_wide

CHROME_HEIGHT = 5
DEFAULT_SCREEN_WIDTH = 80
DEFAULT_SCREEN_HEIGHT = 24


@dataclass(frozen=True)
class GameResultRow:
    game: GameData


@dataclass(frozen=True)
class ErrorMessageRow:
    message: str


@dataclass(frozen=True)
class FutureGamesHeaderRow:
    text: str


TeletextRow = GameResultRow | ErrorMessageRow | FutureGamesHeaderRow


def game_row_height(game: GameData) -> int:
    """Game line, one line per scorer pair, and a spacer."""
    if game.score_type is ScoreType.SCHEDULED:
        scorer_lines = 0
    else:
        scorer_lines = max(len(game.home_goal_events), len(game.away_goal_events))
    return 1 + scorer_lines + 1


def row_height(row: TeletextRow) -> int:
    if isinstance(row, GameResultRow):
        return game_row_height(row.game)
    if isinstance(row, ErrorMessageRow):
        return 2
    return 1


def wide_column_height(rows: Sequence[TeletextRow]) -> int:
    """Lines used by the taller column when ``rows`` are split across wide mode's halves."""
    left, right = split_for_wide(rows)
    return max(sum(row_height(row) for row in left), sum(row_height(row) for row in right))



def subheader_for(games: Iterable[GameData]) -> str:
    """Label of the most important tournament on the page."""
    series = {game.serie for game in games}
    if not series:
        return DEFAULT_SUBHEADER
    return min(series, key=lambda serie: serie.priority).label


class TeletextPage:
    """Content rows plus the state needed to paginate and draw them."""

    def __init__(
        self,
        page_number: int = PAGE_NUMBER,
        header: str = DEFAULT_SUBHEADER,
        subheader: str = DEFAULT_SUBHEADER,
        *,
        disable_video_links: bool = False,
        show_footer: bool = True,
        ignore_height_limit: bool = False,
        compact_mode: bool = False,
        wide_mode: bool = False,
        screen_width: int = DEFAULT_SCREEN_WIDTH,
        screen_height: int = DEFAULT_SCREEN_HEIGHT,
    ) -> None:
        if compact_mode and wide_mode:
            raise ValueError("compact and wide mode cannot be used together")
        self.page_number = page_number
        self.header = header
        self.subheader = subheader
        self.disable_video_links = disable_video_links
        self.show_footer = show_footer
        self.ignore_height_limit = ignore_height_limit
        self.compact_mode = compact_mode
        self.wide_mode = wide_mode
        self.screen_width = screen_width
        self.screen_height = screen_height
        self.date_label = ""
        self.auto_refresh_disabled = False
        self.error_warning = False
        self.season_countdown: str | None = None
        self.loading_message: str | None = None
        self.rows: list[TeletextRow] = []
        self.current_page = 0
        self._pages: list[list[TeletextRow]] | None = None

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def _add(self, row: TeletextRow) -> None:
        self.rows.append(row)
        self._pages = None

    def add_game_result(self, game: GameData) -> None:
        self._add(GameResultRow(game))

    def add_error_message(self, message: str) -> None:
        self._add(ErrorMessageRow(message))

    def add_future_games_header(self, text: str) -> None:
        self._add(FutureGamesHeaderRow(text))

    @property
    def games(self) -> list[GameData]:
        return [row.game for row in self.rows if isinstance(row, GameResultRow)]

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------

    def set_compact_mode(self, enabled: bool) -> None:
        """Turning compact mode on turns wide mode off."""
        if enabled and self.wide_mode:
            logger.info("display_mode_switched", from_mode="wide", to_mode="compact")
            self.wide_mode = False
        self.compact_mode = enabled
        self._repaginate()

    def set_wide_mode(self, enabled: bool) -> None:
        """Turning wide mode on turns compact mode off."""
        if enabled and self.compact_mode:
            logger.info("display_mode_switched", from_mode="compact", to_mode="wide")
            self.compact_mode = False
        self.wide_mode = enabled
        self._repaginate()

    @property
    def uses_wide_layout(self) -> bool:
        """Wide mode needs room for two columns; narrower screens fall back to normal."""
        return self.wide_mode and can_fit_wide(self.screen_width)

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    @property
    def available_height(self) -> int:
        return max(self.screen_height - CHROME_HEIGHT, 0)

    def _paginate(self) -> list[list[TeletextRow]]:
        if not self.rows:
            return [[]]
        if self.ignore_height_limit:
            return [list(self.rows)]
        if self.compact_mode:
            return self._paginate_compact()
        if self.uses_wide_layout:
            return self._paginate_wide()

        pages: list[list[TeletextRow]] = []
        current: list[TeletextRow] = []
        used = 0
        for row in self.rows:
            height = row_height(row)
            if current and used + height > self.available_height:
                pages.append(current)
                current, used = [], 0
            current.append(row)
            used += height
        pages.append(current)
        return pages

    def _paginate_wide(self) -> list[list[TeletextRow]]:
        """A row joins the page only if the taller of the two columns still fits."""
        pages: list[list[TeletextRow]] = []
        current: list[TeletextRow] = []
        for row in self.rows:
            if current and wide_column_height(current + [row]) > self.available_height:
                pages.append(current)
                current = []
            current.append(row)
        pages.append(current)
        return pages

    def _paginate_compact(self) -> list[list[TeletextRow]]:
        """Games share lines, ``compact_columns`` to a line; other rows take their own."""
        columns = compact_columns(self.screen_width)
        pages: list[list[TeletextRow]] = []
        current: list[TeletextRow] = []
        used = 0
        slot = 0
        for row in self.rows:
            if isinstance(row, GameResultRow):
                height = 1 if slot == 0 else 0
                slot = (slot + 1) % columns
            else:
                height = row_height(row)
                slot = 0
            if current and height and used + height > self.available_height:
                pages.append(current)
                current, used = [], 0
            current.append(row)
            used += height
        pages.append(current)
        return pages

    def _all_pages(self) -> list[list[TeletextRow]]:
        if self._pages is None:
            self._pages = self._paginate()
        return self._pages

    def _repaginate(self) -> None:
        self._pages = None
        self.current_page = min(self.current_page, self.total_pages - 1)

    @property
    def total_pages(self) -> int:
        return max(len(self._all_pages()), 1)

    def get_current_page(self) -> int:
        return self.current_page

    def set_current_page(self, page: int) -> None:
        self.current_page = max(0, min(page, self.total_pages - 1))

    def next_page(self) -> None:
        self.current_page = (self.current_page + 1) % self.total_pages

    def previous_page(self) -> None:
        self.current_page = (self.current_page - 1) % self.total_pages

    def page_rows(self, index: int) -> list[TeletextRow]:
        return list(self._all_pages()[index])

    def visible_rows(self) -> list[TeletextRow]:
        return self.page_rows(self.current_page)

    def has_more(self) -> bool:
        """True when rows follow the last visible one."""
        visible = self.visible_rows()
        return bool(visible) and visible[-1] is not self.rows[-1]

    # ------------------------------------------------------------------
    # Resize
    # ------------------------------------------------------------------

    def handle_resize(self, width: int, height: int) -> None:
        """Repaginate for a new terminal size, keeping the current page in range."""
        if (width, height) == (self.screen_width, self.screen_height):
            return
        self.screen_width = width
        self.screen_height = height
        self._repaginate()
        logger.debug("page_resized", width=width, height=height, pages=self.total_pages, current=self.current_page)


def build_page(
    games: Sequence[GameData],
    *,
    date_label: str = "",
    future_header: str | None = None,
    empty_message: str | None = None,
    error_message: str | None = None,
    **options,
) -> TeletextPage:
    """Page with the standard header texts for ``games``."""
    page = TeletextPage(subheader=subheader_for(games), **options)
    page.date_label = date_label
    if error_message:
        page.add_error_message(error_message)
    elif not games and empty_message:
        page.add_error_message(empty_message)
    if future_header and games:
        page.add_future_games_header(future_header)
    for game in games:
        page.add_game_result(game)
    return page

