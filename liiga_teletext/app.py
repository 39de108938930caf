"""
The two ways of running the viewer: print one page and exit, or keep a
page on screen and refresh it.
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from typing import TextIO

from rich.console import Console

from .api.fetcher import days_until_regular_season, fetch_liiga_data, fetch_rosters_for_game, find_date_with_games
from .api.season import determine_fetch_date
from .context import AppContext
from .errors import LiigaError, user_message
from .logging import logger
from .models import FetchResult, GameData, Tournament
from .processors import PlayerFetchQueue
from .refresh import RefreshController, is_starting_soon
from .teletext import ResizeHandler, TeletextPage, build_page, render_frame, render_once, should_update_layout
from .terminal import Key, Terminal, terminal_size
from .utils.datetime_utils import format_display_date

ONCE_MODE_WIDTH = 80
ONCE_MODE_WIDE_WIDTH = 136

NO_GAMES_TODAY = "Ei otteluita tänään"
NO_GAMES_ON_DATE = "Ei otteluita {date} päivälle"
NEXT_GAMES = "Seuraavat ottelut {date}"
FETCH_ERROR = "Virhe haettaessa otteluita: {message}"
SEASON_COUNTDOWN = "Runkosarjan alkuun {days} päivää"
PREVIOUS_SEARCH = "Etsitään edellisiä otteluita..."
NEXT_SEARCH = "Etsitään seuraavia otteluita..."


@dataclass
class ViewOptions:
    date: str | None = None
    compact: bool = False
    wide: bool = False
    disable_video_links: bool = False
    min_refresh_interval: float | None = None


def page_for_result(
    result: FetchResult | None,
    options: ViewOptions,
    *,
    requested_date: str | None,
    size: tuple[int, int],
    interactive: bool,
    error: LiigaError | None = None,
) -> TeletextPage:
    """Build the page for a fetch result, or for a failed fetch."""
    games: list[GameData] = result.games if result else []
    date = result.date if result else (requested_date or "")
    date_label = format_display_date(date) if date else ""
    if requested_date:
        empty = NO_GAMES_ON_DATE.format(date=format_display_date(requested_date))
    else:
        empty = NO_GAMES_TODAY
    future_header = None
    if result is not None and result.is_future and requested_date is None:
        future_header = NEXT_GAMES.format(date=date_label)

    width, height = size
    page = build_page(
        games,
        date_label=date_label,
        future_header=future_header,
        empty_message=empty,
        error_message=FETCH_ERROR.format(message=user_message(error)) if error else None,
        disable_video_links=options.disable_video_links,
        show_footer=interactive,
        ignore_height_limit=not interactive,
        compact_mode=options.compact,
        wide_mode=options.wide,
        screen_width=width,
        screen_height=height,
    )
    page.auto_refresh_disabled = bool(result and result.is_historical)
    return page


async def run_once(context: AppContext, options: ViewOptions, out: TextIO | None = None) -> int:
    """Fetch once, print the page and return the exit code."""
    out = out or sys.stdout
    result: FetchResult | None = None
    error: LiigaError | None = None
    try:
        result = await fetch_liiga_data(context, options.date)
    except LiigaError as exc:
        logger.error("fetch_failed", kind=exc.kind.value, error=str(exc))
        error = exc

    width, _ = terminal_size(out)
    if width <= 0:
        width = ONCE_MODE_WIDE_WIDTH if options.wide else ONCE_MODE_WIDTH
    page = page_for_result(
        result, options, requested_date=options.date, size=(width, 0), interactive=False, error=error
    )
    console = Console(file=out, highlight=False, soft_wrap=True)
    console.print(render_once(page))
    out.flush()
    return 0


async def _cancel(task: asyncio.Task | None) -> None:
    if task is None or task.done():
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


class InteractiveApp:
    """Keyboard-driven refresh loop around one ``TeletextPage``.

    Fetches and date searches run as background tasks so keys are read while
    a request is in flight.
    """

    def __init__(self, context: AppContext, options: ViewOptions, terminal: Terminal) -> None:
        self.context = context
        self.options = options
        self.terminal = terminal
        self.clock = context.clock
        self.date = options.date
        self.controller = RefreshController(clock=self.clock, min_refresh_interval=options.min_refresh_interval)
        self.resize = ResizeHandler(self._measure(), clock=self.clock)
        self.result: FetchResult | None = None
        self.page: TeletextPage | None = None
        self.running = True
        self.fetch_task: asyncio.Task | None = None
        self.search_task: asyncio.Task | None = None

    def _measure(self) -> tuple[int, int]:
        return self.terminal.size()

    @property
    def games(self) -> list[GameData]:
        return self.result.games if self.result else []

    async def invalidate_starting_games(self) -> None:
        """Drop cached listings for the shown date when one of its games is about to start."""
        if self.result is None:
            return
        now = self.clock.now()
        if any(is_starting_soon(game, now) for game in self.games):
            await self.context.cache.invalidate_tournaments_for_date(self.result.date)

    async def update_season_countdown(self) -> None:
        if self.page is None or self.options.compact:
            return
        games = self.games
        if not games or any(game.serie is Tournament.REGULAR_SEASON for game in games):
            return
        days = await days_until_regular_season(self.context)
        if days is not None:
            self.page.season_countdown = SEASON_COUNTDOWN.format(days=days)

    async def refresh(self) -> None:
        self.controller.begin_fetch()
        previous_page = self.page.current_page if self.page else 0
        await self.invalidate_starting_games()
        try:
            result = await fetch_liiga_data(self.context, self.date, current_games=self.games)
        except LiigaError as exc:
            logger.error("refresh_failed", kind=exc.kind.value, error=str(exc))
            if self.page is not None and self.games:
                self.page.error_warning = True
            else:
                self.page = page_for_result(
                    None, self.options, requested_date=self.date, size=self.resize.current, interactive=True, error=exc
                )
        else:
            self.result = result
            self.page = page_for_result(
                result, self.options, requested_date=self.date, size=self.resize.current, interactive=True
            )
            self.page.set_current_page(previous_page)
            self.controller.auto_refresh = not result.is_historical
            await self.update_season_countdown()
        self.controller.begin_render()
        self.draw()
        self.controller.schedule(self.games)

    def draw(self) -> None:
        if self.page is not None:
            self.terminal.write(render_frame(self.page, clear=not self.context.settings.debug))

    def _search_base(self) -> str:
        if self.date:
            return self.date
        if self.result is not None:
            return self.result.date
        date, _ = determine_fetch_date(None, self.clock.now().astimezone())
        return date

    async def search_date(self, direction: int) -> None:
        """Jump to the nearest date with games in ``direction``; stay put when none is found."""
        message = PREVIOUS_SEARCH if direction < 0 else NEXT_SEARCH
        if self.page is not None:
            self.page.loading_message = message
            self.draw()
        try:
            found = await find_date_with_games(self.context, self._search_base(), direction)
        finally:
            if self.page is not None:
                self.page.loading_message = None
        if found is None:
            logger.warning("no_date_with_games", direction=direction)
            self.draw()
            return
        self.date = found
        logger.info("date_changed", date=self.date)
        if self.page is not None:
            self.page.set_current_page(0)
        self.controller.request_refresh()

    def start_date_search(self, direction: int) -> None:
        if self.search_task is not None and not self.search_task.done():
            logger.debug("date_search_in_progress")
            return
        self.search_task = asyncio.create_task(self.search_date(direction), name="date-search")

    def handle_key(self, key: Key) -> None:
        self.controller.register_input()
        if key is Key.QUIT:
            self.running = False
        elif key is Key.REFRESH:
            self.controller.request_manual_refresh()
        elif key is Key.SHIFT_LEFT:
            self.start_date_search(-1)
        elif key is Key.SHIFT_RIGHT:
            self.start_date_search(1)
        elif self.page is not None and self.page.total_pages > 1:
            if key is Key.RIGHT:
                self.page.next_page()
            else:
                self.page.previous_page()
            self.draw()

    def check_resize(self) -> None:
        self.resize.observe(*self._measure())
        previous = (self.page.screen_width, self.page.screen_height) if self.page else self.resize.current
        size = self.resize.poll()
        if size is None or self.page is None:
            return
        if should_update_layout(previous, size):
            logger.info("layout_update", width=size[0], height=size[1])
        self.page.handle_resize(*size)
        self.draw()

    def collect_tasks(self) -> None:
        """Forget finished tasks, re-raising anything they did not handle."""
        if self.fetch_task is not None and self.fetch_task.done():
            task, self.fetch_task = self.fetch_task, None
            task.result()
        if self.search_task is not None and self.search_task.done():
            task, self.search_task = self.search_task, None
            task.result()

    async def cancel_tasks(self) -> None:
        await _cancel(self.fetch_task)
        await _cancel(self.search_task)
        self.fetch_task = self.search_task = None

    async def step(self) -> None:
        """One pass of the loop: start a due fetch, read keys, follow resizes."""
        if self.fetch_task is None and self.controller.due():
            self.fetch_task = asyncio.create_task(self.refresh(), name="refresh")
        for key in self.terminal.read_keys(0):
            self.handle_key(key)
            if not self.running:
                return
        self.collect_tasks()
        self.check_resize()
        await self.clock.sleep(self.controller.poll_interval())

    async def run(self) -> int:
        queue = PlayerFetchQueue(
            lambda season, game_id: fetch_rosters_for_game(self.context, season, game_id), clock=self.clock
        )
        self.context.player_queue = queue
        queue.start()
        try:
            with self.terminal:
                while self.running:
                    await self.step()
        finally:
            await self.cancel_tasks()
            await queue.stop()
        return 0
