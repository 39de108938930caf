"""
Turns a ``TeletextPage`` into screen placements and then into output text.

A frame is a list of ``Placement`` records. Interactive mode writes them in
one burst with cursor positioning; once mode lays them out as plain lines.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass

from rich.cells import cell_len
from rich.color import ColorSystem
from rich.control import Control
from rich.style import Style
from rich.text import Text

from ..constants import PAGE_TITLE
from ..models import GameData, GoalEventData, ScoreType
from ..processors.game_status import format_played_time, score_display
from .abbreviations import get_team_abbreviation
from .colors import (
    COUNTDOWN_FG,
    GOAL_TYPE_FG,
    HEADER_BG,
    HEADER_FG,
    RESULT_FG,
    SCORER_FG,
    SUBHEADER_FG,
    TEXT_FG,
    TITLE_BG,
    WARNING_FG,
    WINNING_GOAL_FG,
    style,
    truncate_to_width,
)
from .layout import (
    COMPACT_COLUMN_WIDTH,
    CONTENT_MARGIN,
    NAME_OFFSET,
    LayoutConfig,
    compact_columns,
    compute_layout,
    compute_wide_layout,
    fit_goal_types,
    split_for_wide,
    wide_column_offsets,
)
from .page import ErrorMessageRow, FutureGamesHeaderRow, GameResultRow, TeletextPage, TeletextRow, game_row_height

CONTENT_START_ROW = 4
PLAY_ICON = "▶"
WARNING_MARKER = "⚠"

FOOTER_QUIT = "q=Lopeta"
FOOTER_PAGES = " ←→=Sivut"
FOOTER_NO_REFRESH = " (Ei päivity)"


@dataclass(frozen=True)
class Placement:
    row: int
    column: int
    text: str
    style: Style = Style.null()
    link: str | None = None

    @property
    def width(self) -> int:
        return cell_len(self.text)

    @property
    def full_style(self) -> Style:
        """The palette style, carrying the hyperlink when there is one."""
        return self.style + Style(link=self.link) if self.link else self.style

    def styled(self) -> str:
        return self.full_style.render(self.text, color_system=ColorSystem.EIGHT_BIT)


def _games_of(rows: Sequence[TeletextRow]) -> list[GameData]:
    return [row.game for row in rows if isinstance(row, GameResultRow)]


def _align_right(text: str, width: int) -> str:
    return " " * max(width - cell_len(text), 0) + text


def _center(text: str, width: int) -> str:
    spare = max(width - cell_len(text), 0)
    return " " * (spare // 2) + text + " " * (spare - spare // 2)



def scorer_color(event: GoalEventData, game: GameData) -> int:
    decided_late = event.is_winning_goal and (game.is_overtime or game.is_shootout)
    return WINNING_GOAL_FG if decided_late or "VL" in event.raw_goal_types else SCORER_FG


# ---------------------------------------------------------------------------
# Page chrome
# ---------------------------------------------------------------------------


def header_placements(page: TeletextPage) -> list[Placement]:
    width = page.screen_width
    title = PAGE_TITLE
    right = " ".join(part for part in (page.header, str(page.page_number), page.date_label) if part)
    rest = max(width - cell_len(title), 0)
    return [
        Placement(1, 1, title, style(HEADER_FG, TITLE_BG)),
        Placement(1, 1 + cell_len(title), _align_right(truncate_to_width(right, rest), rest), style(TEXT_FG, HEADER_BG)),
    ]


def subheader_placements(page: TeletextPage) -> list[Placement]:
    placements = [Placement(2, 1, page.subheader, style(SUBHEADER_FG))]
    if page.total_pages > 1 and not page.ignore_height_limit:
        indicator = f"{page.current_page + 1}/{page.total_pages}"
        placements.append(Placement(2, page.screen_width - len(indicator) + 1, indicator, style(TEXT_FG)))
    return placements


def footer_text(page: TeletextPage) -> str:
    text = FOOTER_QUIT
    if page.total_pages > 1:
        text += FOOTER_PAGES
    if page.auto_refresh_disabled:
        text += FOOTER_NO_REFRESH
    if page.loading_message:
        text += f" {page.loading_message}"
    return text


def footer_placements(page: TeletextPage) -> list[Placement]:
    width = page.screen_width
    row = page.screen_height
    bar_width = max(width - 2, 0)
    marker = f" {WARNING_MARKER}" if page.error_warning else "  "
    placements = [
        Placement(row, 1, _center(footer_text(page), bar_width), style(TEXT_FG, HEADER_BG)),
        Placement(row, bar_width + 1, marker, style(WARNING_FG, HEADER_BG)),
    ]
    if page.season_countdown:
        placements.append(Placement(row - 1, 1, _center(page.season_countdown, width), style(COUNTDOWN_FG)))
    return placements


# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------


def goal_event_placements(
    page: TeletextPage, game: GameData, event: GoalEventData, row: int, layout: LayoutConfig, offset: int
) -> list[Placement]:
    start = offset + (layout.home_start if event.is_home_team else layout.away_start)
    color = style(scorer_color(event, game))
    placements = [
        Placement(row, start, f"{event.minute:2}", color),
        Placement(row, start + NAME_OFFSET, truncate_to_width(event.scorer_name, layout.max_player_name_width), color),
    ]
    if event.video_clip_url:
        link = None if page.disable_video_links else event.video_clip_url
        placements.append(Placement(row, offset + layout.icon_column(event.is_home_team), PLAY_ICON, style(TEXT_FG), link))
    types = fit_goal_types(event.goal_types, layout.max_goal_types_width)
    if types:
        placements.append(Placement(row, offset + layout.types_column(event.is_home_team), types, style(GOAL_TYPE_FG)))
    return placements


def game_placements(page: TeletextPage, game: GameData, row: int, layout: LayoutConfig, offset: int = 0) -> list[Placement]:
    text = style(TEXT_FG)
    home_start = offset + layout.home_start
    placements = [
        Placement(row, home_start, truncate_to_width(game.home_team, layout.home_team_width), text),
        Placement(row, home_start + layout.home_team_width + layout.separator_width // 2, "-", text),
        Placement(row, offset + layout.away_start, truncate_to_width(game.away_team, layout.away_team_width), text),
    ]
    if game.score_type is ScoreType.SCHEDULED:
        placements.append(Placement(row, offset + layout.time_column, game.time, text))
    elif game.score_type is ScoreType.ONGOING:
        placements.append(Placement(row, offset + layout.time_column, format_played_time(game.played_time), text))
        placements.append(Placement(row, offset + layout.score_column, score_display(game), text))
    else:
        placements.append(Placement(row, offset + layout.score_column, score_display(game), style(RESULT_FG)))

    if game.score_type is not ScoreType.SCHEDULED:
        home_events = game.home_goal_events
        away_events = game.away_goal_events
        for index in range(max(len(home_events), len(away_events))):
            for events in (home_events, away_events):
                if index < len(events):
                    placements.extend(goal_event_placements(page, game, events[index], row + 1 + index, layout, offset))
    return placements


def row_placements(
    page: TeletextPage, rows: Sequence[TeletextRow], layout: LayoutConfig, start_row: int, offset: int = 0
) -> list[Placement]:
    placements: list[Placement] = []
    line = start_row
    column = offset + CONTENT_MARGIN + 1
    for row in rows:
        if isinstance(row, GameResultRow):
            placements.extend(game_placements(page, row.game, line, layout, offset))
            line += game_row_height(row.game)
        elif isinstance(row, ErrorMessageRow):
            placements.append(Placement(line, column, row.message, style(TEXT_FG)))
            line += 2
        elif isinstance(row, FutureGamesHeaderRow):
            placements.append(Placement(line, column, row.text, style(SUBHEADER_FG)))
            line += 1
    return placements


def compact_placements(page: TeletextPage, rows: Sequence[TeletextRow], start_row: int) -> list[Placement]:
    columns = compact_columns(page.screen_width)
    placements: list[Placement] = []
    line = start_row
    slot = 0
    for row in rows:
        if not isinstance(row, GameResultRow):
            if slot:
                line += 1
                slot = 0
            text = row.message if isinstance(row, ErrorMessageRow) else row.text
            color = TEXT_FG if isinstance(row, ErrorMessageRow) else SUBHEADER_FG
            placements.append(Placement(line, CONTENT_MARGIN + 1, text, style(color)))
            line += 1
            continue
        game = row.game
        column = CONTENT_MARGIN + 1 + slot * COMPACT_COLUMN_WIDTH
        teams = f"{get_team_abbreviation(game.home_team)}-{get_team_abbreviation(game.away_team)}"
        result = game.time if game.score_type is ScoreType.SCHEDULED else score_display(game)
        placements.append(Placement(line, column, teams, style(TEXT_FG)))
        placements.append(Placement(line, column + cell_len(teams) + 1, result, style(RESULT_FG)))
        slot += 1
        if slot == columns:
            slot = 0
            line += 1
    return placements


def content_layout(page: TeletextPage, rows: Sequence[TeletextRow]) -> LayoutConfig:
    games = _games_of(rows)
    if page.uses_wide_layout:
        return compute_wide_layout(games)
    return compute_layout(page.screen_width, games)


def render_placements(page: TeletextPage) -> list[Placement]:
    """Every placement of the current frame, header to footer."""
    placements = header_placements(page) + subheader_placements(page)
    rows = page.visible_rows()
    if page.compact_mode:
        placements.extend(compact_placements(page, rows, CONTENT_START_ROW))
    elif page.uses_wide_layout:
        layout = content_layout(page, rows)
        left, right = split_for_wide(rows)
        for half, offset in zip((left, right), wide_column_offsets()):
            placements.extend(row_placements(page, half, layout, CONTENT_START_ROW, offset))
    else:
        placements.extend(row_placements(page, rows, content_layout(page, rows), CONTENT_START_ROW))

    if page.show_footer and not page.ignore_height_limit:
        bottom = page.screen_height - 1 if page.season_countdown else page.screen_height
        placements = [p for p in placements if p.row < bottom]
        placements.extend(footer_placements(page))
    return placements


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def to_screen(placements: Sequence[Placement], *, clear: bool = True) -> str:
    """One buffered string that redraws the whole frame."""
    parts = [str(Control.home()) + str(Control.clear())] if clear else []
    for placement in placements:
        parts.append(str(Control.move_to(placement.column - 1, placement.row - 1)))
        parts.append(placement.styled())
    return "".join(parts)


def to_lines(placements: Sequence[Placement]) -> Text:
    """Line-by-line output for once mode, styled but without cursor movement."""
    by_row: dict[int, list[Placement]] = defaultdict(list)
    for placement in placements:
        by_row[placement.row].append(placement)
    lines: list[Text] = []
    for row in range(1, max(by_row, default=0) + 1):
        line = Text()
        for placement in sorted(by_row.get(row, []), key=lambda p: p.column):
            if placement.column > line.cell_len + 1:
                line.append(" " * (placement.column - line.cell_len - 1))
            line.append(placement.text, placement.full_style)
        lines.append(line)
    return Text("\n").join(lines)


def render_frame(page: TeletextPage, *, clear: bool = True) -> str:
    return to_screen(render_placements(page), clear=clear)


def render_once(page: TeletextPage) -> Text:
    return to_lines(render_placements(page))
