"""Tests for turning pages into placements and text."""

from __future__ import annotations

from rich.cells import cell_len

from liiga_teletext.models import GoalType, ScoreType, Tournament
from liiga_teletext.teletext import TeletextPage, render_frame, render_once, render_placements
from liiga_teletext.teletext.colors import style, truncate_to_width
from liiga_teletext.teletext.renderer import (
    PLAY_ICON,
    Placement,
    content_layout,
    footer_placements,
    footer_text,
    scorer_color,
)


def make_page(games, **options) -> TeletextPage:
    options.setdefault("screen_width", 80)
    options.setdefault("screen_height", 24)
    page = TeletextPage(**options)
    page.date_label = "15.01.2024"
    for game in games:
        page.add_game_result(game)
    return page


def texts(placements) -> list[str]:
    return [placement.text for placement in placements]


class TestChrome:
    """Tests for header, subheader and footer."""

    def test_header(self, game_data):
        placements = render_placements(make_page([game_data()]))
        assert placements[0].text == "JÄÄKIEKKO"
        assert placements[0].row == 1
        assert placements[1].text.endswith("SM-LIIGA 221 15.01.2024")

    def test_footer_single_page(self, game_data):
        page = make_page([game_data()])
        assert footer_text(page) == "q=Lopeta"
        footer = [p for p in render_placements(page) if p.row == page.screen_height]
        assert "q=Lopeta" in footer[0].text

    def test_footer_with_pages_and_no_refresh(self, game_data, goal_event):
        games = [game_data(events=(goal_event(),)) for _ in range(10)]
        page = make_page(games)
        page.auto_refresh_disabled = True
        assert footer_text(page) == "q=Lopeta ←→=Sivut (Ei päivity)"
        assert "1/2" in texts(render_placements(page))

    def test_warning_marker(self, game_data):
        page = make_page([game_data()])
        page.error_warning = True
        assert " ⚠" in texts(render_placements(page))

    def test_content_stays_above_footer(self, game_data, goal_event):
        games = [game_data(events=tuple(goal_event() for _ in range(30)))]
        page = make_page(games)
        placements = render_placements(page)
        assert [p for p in placements if p.row >= page.screen_height] == footer_placements(page)

    def test_season_countdown_above_footer(self, game_data):
        page = make_page([game_data(serie=Tournament.PRESEASON)])
        page.season_countdown = "Runkosarjan alkuun 12 päivää"
        countdown = next(p for p in render_placements(page) if "Runkosarjan" in p.text)
        assert countdown.row == page.screen_height - 1
        assert countdown.text.strip() == "Runkosarjan alkuun 12 päivää"
        assert countdown.width == page.screen_width

    def test_no_countdown_by_default(self, game_data):
        page = make_page([game_data()])
        assert not any("Runkosarjan" in p.text for p in render_placements(page))

    def test_loading_message_in_footer(self, game_data):
        page = make_page([game_data()])
        page.loading_message = "Etsitään edellisiä otteluita..."
        assert footer_text(page) == "q=Lopeta Etsitään edellisiä otteluita..."



class TestGameRows:
    """Tests for game and goal lines."""

    def test_play_icons_share_a_column(self, game_data, goal_event):
        events = (
            goal_event("Koivu", video="https://video/1"),
            goal_event("Granlund Mi.", video="https://video/2", goal_types=(GoalType.POWER_PLAY,)),
            goal_event("Laine", is_home=False, video="https://video/3"),
        )
        page = make_page([game_data(events=events)])
        layout = content_layout(page, page.visible_rows())

        icons = [p for p in render_placements(page) if p.text == PLAY_ICON]

        icon = layout.play_icon_column
        assert sorted(p.column for p in icons) == [icon, icon, icon + layout.side_offset]

    def test_video_link_uses_osc8(self, game_data, goal_event):
        page = make_page([game_data(events=(goal_event(video="https://video/1"),))])
        frame = render_frame(page)
        assert ";https://video/1\x1b\\" in frame

    def test_wide_character_names_stay_left_of_icon(self, game_data, goal_event):
        events = (
            goal_event("漢字漢字漢字漢字漢字", video="https://video/1"),
            goal_event("Koivu", video="https://video/2"),
        )
        page = make_page([game_data(events=events)])
        layout = content_layout(page, page.visible_rows())
        placements = render_placements(page)

        name = next(p for p in placements if p.text.startswith("漢"))
        icons = [p for p in placements if p.text == PLAY_ICON]
        assert name.width <= layout.max_player_name_width
        assert name.column + name.width < layout.play_icon_column
        assert {p.column for p in icons} == {layout.play_icon_column}

    def test_frame_positions_with_rich_controls(self, game_data):
        frame = render_frame(make_page([game_data()]))
        assert frame.startswith("\x1b[H\x1b[2J")
        assert "\x1b[1;1H" in frame
        assert "\x1b[38;5;46m" in frame

    def test_plain_mode_has_no_links(self, game_data, goal_event):
        page = make_page([game_data(events=(goal_event(video="https://video/1"),))], disable_video_links=True)
        frame = render_frame(page)
        assert "\x1b]8;;" not in frame
        assert PLAY_ICON in frame

    def test_scheduled_game_shows_start_time(self, game_data):
        page = make_page([game_data(score_type=ScoreType.SCHEDULED, time_text="18.30")])
        layout = content_layout(page, page.visible_rows())
        time_placement = next(p for p in render_placements(page) if p.text == "18.30")
        assert time_placement.column == layout.time_column

    def test_final_score_suffix(self, game_data):
        page = make_page([game_data(result="3-2", is_overtime=True)])
        assert "3-2 ja" in texts(render_placements(page))

    def test_ongoing_game_shows_clock(self, game_data):
        page = make_page([game_data(score_type=ScoreType.ONGOING, played_time=1234, result="1-1")])
        rendered = texts(render_placements(page))
        assert "20:34" in rendered
        assert "1-1" in rendered


class TestScorerColor:
    """Tests for scorer_color."""

    def test_overtime_winner_is_magenta(self, game_data, goal_event):
        event = goal_event(winning=True)
        assert scorer_color(event, game_data(is_overtime=True)) == 201

    def test_regulation_winner_is_cyan(self, game_data, goal_event):
        assert scorer_color(goal_event(winning=True), game_data()) == 51

    def test_deciding_shootout_goal(self, game_data, goal_event):
        assert scorer_color(goal_event(raw_goal_types=("VL",)), game_data()) == 201


class TestModes:
    """Tests for compact, wide and once output."""

    def test_compact_uses_abbreviations(self, game_data):
        page = make_page([game_data("Tappara", "HIFK", result="3-1")], compact_mode=True)
        rendered = texts(render_placements(page))
        assert "TAP-IFK" in rendered
        assert "3-1" in rendered

    def test_wide_mode_uses_right_half(self, game_data, goal_event):
        games = [game_data(f"Home {index}", "Away", events=(goal_event(),)) for index in range(4)]
        page = make_page(games, wide_mode=True, screen_width=140)
        home_names = [p for p in render_placements(page) if p.text.startswith("Home")]
        assert [p.column for p in home_names] == [3, 3, 71, 71]

    def test_once_output_is_plain_lines(self, game_data):
        page = make_page([game_data("Tappara", "HIFK", result="2-1")], show_footer=False, ignore_height_limit=True)
        lines = render_once(page).plain.splitlines()
        assert lines[0].startswith("JÄÄKIEKKO")
        assert any("Tappara" in line and "HIFK" in line and "2-1" in line for line in lines)
        assert not any("Lopeta" in line for line in lines)

    def test_wide_mode_draws_every_goal_line(self, game_data, goal_event):
        """Two 10-goal games side by side keep all their scorer lines on screen."""
        busy = [
            game_data(f"Busy {index}", "Away", events=tuple(goal_event(f"Scorer{index}") for _ in range(10)))
            for index in range(2)
        ]
        quiet = [game_data(f"Quiet {index}", "Away", result="0-0") for index in range(2)]
        page = make_page(busy + quiet, wide_mode=True, screen_width=140)

        placements = render_placements(page)

        for index in range(2):
            assert len([p for p in placements if p.text == f"Scorer{index}"]) == 10
        assert all(p.row < page.screen_height - 1 for p in placements if p.text.startswith("Scorer"))


class TestCells:
    """Tests for cell-width handling of styled placements."""

    def test_truncate_counts_cells(self):
        assert truncate_to_width("Koivu", 3) == "Koi"
        assert truncate_to_width("漢字漢", 5) == "漢字"
        assert cell_len(truncate_to_width("漢字漢", 5)) == 4
        assert truncate_to_width("Selänne", 0) == ""

    def test_placement_width(self):
        assert Placement(1, 1, "漢字").width == 4
        assert Placement(1, 1, "Kärpät").width == 6

    def test_styled_placement(self):
        placement = Placement(1, 1, "Koivu", style(51))
        assert placement.styled() == "\x1b[38;5;51mKoivu\x1b[0m"

    def test_link_rides_on_style(self):
        placement = Placement(1, 1, PLAY_ICON, style(231), "https://video/9")
        assert placement.full_style.link == "https://video/9"
        assert Placement(1, 1, PLAY_ICON, style(231)).full_style.link is None
