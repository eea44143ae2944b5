"""Tests for the key-driven project list state machine."""

from __future__ import annotations

import random
import unittest

from vercelx.api.models import Domain, ProjectDetails, ProjectRecord, Team
from vercelx.cache import TTLCache, deployment_key, project_details_key
from vercelx.listing.controller import (
    CopyText,
    FetchDetails,
    ListController,
    OpenUrl,
    Resolve,
    SaveSetting,
    dashboard_url,
)
from vercelx.listing.state import ActionKind, DetailView, ListItem, ListResult, ListView, SettingsView


def _records(count: int) -> list[ProjectRecord]:
    return [
        ProjectRecord(id=f"prj_{index:02d}", name=f"app-{index:02d}", account_id=None, created_at=0, updated_at=0)
        for index in range(count)
    ]


def _item(record: ProjectRecord) -> ListItem:
    return ListItem(id=record.id, display_text=record.name, source_key=record.name)


def _controller(
    count: int = 25,
    page_size: int = 10,
    *,
    cache: TTLCache | None = None,
    records: list[ProjectRecord] | None = None,
) -> ListController:
    records = records if records is not None else _records(count)
    return ListController(
        [_item(record) for record in records],
        records,
        page_size,
        _item,
        "acme",
        cache if cache is not None else TTLCache(),
        team_options=(Team(id="team_1", name="Acme", slug="acme"),),
        current_team_id="team_1",
    )


def _ids(controller: ListController) -> list[str]:
    return [item.id for item in controller.state.items]


def _type(controller: ListController, text: str) -> None:
    for char in text:
        controller.handle_key(char)


class CursorAndPagingTests(unittest.TestCase):
    def assert_window_invariants(self, controller: ListController) -> None:
        state = controller.state
        if not state.items:
            self.assertEqual(state.cursor_index, 0)
            self.assertEqual(state.page_start, 0)
            return
        self.assertGreaterEqual(state.cursor_index, 0)
        self.assertLess(state.cursor_index, len(state.items))
        self.assertLessEqual(state.page_start, state.cursor_index)
        self.assertLess(state.cursor_index, state.page_start + state.page_size)
        self.assertLessEqual(state.page_start, state.max_page_start)

    def test_down_across_page_boundary(self) -> None:
        controller = _controller(25, 10)
        for _ in range(9):
            controller.handle_key("DOWN")
        self.assertEqual((controller.state.cursor_index, controller.state.page_start), (9, 0))

        controller.handle_key("DOWN")

        self.assertEqual(controller.state.cursor_index, 10)
        self.assertEqual(controller.state.page_start, 10)

    def test_up_across_page_boundary(self) -> None:
        controller = _controller(25, 10)
        for _ in range(10):
            controller.handle_key("DOWN")
        controller.handle_key("UP")
        self.assertEqual((controller.state.cursor_index, controller.state.page_start), (9, 0))

    def test_cursor_stops_at_both_ends(self) -> None:
        controller = _controller(3, 10)
        controller.handle_key("UP")
        self.assertEqual(controller.state.cursor_index, 0)
        for _ in range(5):
            controller.handle_key("DOWN")
        self.assertEqual(controller.state.cursor_index, 2)

    def test_page_keys_move_cursor_and_window(self) -> None:
        controller = _controller(25, 10)
        controller.handle_key("PAGE_DOWN")
        self.assertEqual((controller.state.cursor_index, controller.state.page_start), (10, 10))
        controller.handle_key("END")
        self.assertEqual(controller.state.cursor_index, 20)
        self.assert_window_invariants(controller)
        controller.handle_key("HOME")
        controller.handle_key("PAGE_UP")
        controller.handle_key("PAGE_UP")
        self.assertEqual((controller.state.cursor_index, controller.state.page_start), (0, 0))

    def test_page_size_is_at_least_one(self) -> None:
        controller = _controller(3, 0)
        self.assertEqual(controller.state.page_size, 1)
        controller.handle_key("DOWN")
        self.assertEqual((controller.state.cursor_index, controller.state.page_start), (1, 1))

    def test_empty_list_ignores_navigation(self) -> None:
        controller = _controller(0)
        for key in ("DOWN", "UP", "PAGE_DOWN", "END", "ENTER", "RIGHT", "CTRL_A", "CTRL_O"):
            self.assertEqual(controller.handle_key(key), [])
        self.assertIsNone(controller.result)
        self.assert_window_invariants(controller)

    def test_invariants_hold_for_random_key_sequences(self) -> None:
        keys = ["UP", "DOWN", "PAGE_UP", "PAGE_DOWN", "HOME", "END", "ENTER", "RIGHT", "LEFT", "ESC", "BACKSPACE", "TAB"]
        keys += ["a", "p", "0", "1", "2", "-"]
        rng = random.Random(1234)
        for count in (0, 1, 7, 25):
            controller = _controller(count, 4)
            for step in range(400):
                controller.handle_key(rng.choice(keys))
                if step % 50 == 49:
                    shuffled = list(controller.state.baseline)
                    rng.shuffle(shuffled)
                    controller.apply_update(shuffled[: rng.randint(0, len(shuffled))])
                self.assertIsNone(controller.result)
                self.assert_window_invariants(controller)


class SearchTests(unittest.TestCase):
    def test_typing_filters_and_backspace_widens(self) -> None:
        controller = _controller(25)
        _type(controller, "app-1")
        self.assertEqual(_ids(controller), [f"prj_{index}" for index in range(10, 20)])

        controller.handle_key("BACKSPACE")
        self.assertEqual(controller.state.search_query, "app-")
        self.assertEqual(len(controller.state.items), 25)

    def test_same_query_twice_gives_same_items(self) -> None:
        controller = _controller(25)
        _type(controller, "app-2")
        first = list(controller.state.items)

        controller.handle_key("BACKSPACE")
        controller.handle_key("2")

        self.assertEqual(controller.state.items, first)

    def test_clearing_query_restores_baseline_order(self) -> None:
        for clear_key in ("ESC", "LEFT"):
            controller = _controller(25)
            baseline = list(controller.state.baseline)
            _type(controller, "app-0")
            self.assertEqual(len(controller.state.items), 10)

            controller.handle_key(clear_key)

            self.assertEqual(controller.state.search_query, "")
            self.assertEqual(controller.state.items, baseline)

    def test_filter_keeps_focused_item_when_still_visible(self) -> None:
        controller = _controller(25)
        for _ in range(12):
            controller.handle_key("DOWN")
        _type(controller, "app-1")
        self.assertEqual(controller.state.cursor_item.id, "prj_12")

    def test_filter_resets_cursor_when_focused_item_is_hidden(self) -> None:
        controller = _controller(25)
        for _ in range(22):
            controller.handle_key("DOWN")
        _type(controller, "app-0")
        self.assertEqual((controller.state.cursor_index, controller.state.page_start), (0, 0))

    def test_undecodable_input_is_not_added_to_query(self) -> None:
        controller = _controller(5)
        _type(controller, "app�")

        self.assertEqual(controller.state.search_query, "app")
        self.assertEqual(len(controller.state.items), 5)

    def test_query_without_matches_empties_items(self) -> None:
        controller = _controller(5)
        _type(controller, "zzz")
        self.assertEqual(controller.state.items, [])
        self.assertEqual(controller.handle_key("ENTER"), [])


class SelectionTests(unittest.TestCase):
    def test_enter_toggles_cursor_item(self) -> None:
        controller = _controller(5)
        controller.handle_key("ENTER")
        self.assertEqual(controller.state.selection, {"prj_00"})
        controller.handle_key("ENTER")
        self.assertEqual(controller.state.selection, set())

    def test_toggle_twice_is_identity(self) -> None:
        controller = _controller(5)
        controller.toggle_selection("prj_03")
        before = set(controller.state.selection)
        controller.toggle_selection("prj_01")
        controller.toggle_selection("prj_01")
        self.assertEqual(controller.state.selection, before)

    def test_invert_flips_displayed_items(self) -> None:
        controller = _controller(3)
        controller.toggle_selection("prj_00")
        controller.toggle_selection("prj_01")

        controller.handle_key("CTRL_A")

        self.assertEqual(controller.state.selection, {"prj_02"})

    def test_invert_keeps_hidden_selection(self) -> None:
        controller = _controller(25)
        controller.toggle_selection("prj_00")
        _type(controller, "app-1")

        controller.handle_key("CTRL_A")

        expected = {"prj_00"} | {f"prj_{index}" for index in range(10, 20)}
        self.assertEqual(controller.state.selection, expected)

    def test_selected_ids_follow_record_order(self) -> None:
        controller = _controller(5)
        for item_id in ("prj_04", "prj_01", "prj_03"):
            controller.toggle_selection(item_id)
        self.assertEqual(controller.selected_ids(), ("prj_01", "prj_03", "prj_04"))


class ResolutionTests(unittest.TestCase):
    def test_delete_requires_selection(self) -> None:
        controller = _controller(5)
        self.assertEqual(controller.handle_key("CTRL_D"), [])
        self.assertIsNone(controller.result)
        self.assertIn("Select projects", controller.state.notice)

    def test_delete_resolves_with_selection(self) -> None:
        controller = _controller(5)
        controller.toggle_selection("prj_02")
        controller.toggle_selection("prj_00")

        effects = controller.handle_key("CTRL_D")

        expected = ListResult(("prj_00", "prj_02"), ActionKind.DELETE)
        self.assertEqual(controller.result, expected)
        self.assertEqual(effects, [Resolve(expected)])

    def test_open_uses_selection_or_cursor(self) -> None:
        controller = _controller(5)
        controller.handle_key("DOWN")
        controller.handle_key("CTRL_O")
        self.assertEqual(controller.result, ListResult(("prj_01",), ActionKind.OPEN))

        controller = _controller(5)
        controller.toggle_selection("prj_03")
        controller.handle_key("CTRL_O")
        self.assertEqual(controller.result, ListResult(("prj_03",), ActionKind.OPEN))

    def test_refresh_invalidates_cached_data(self) -> None:
        cache = TTLCache()
        cache.set(deployment_key("prj_00"), [])
        cache.set(project_details_key("prj_00"), ProjectDetails())
        cache.set("unrelated", 1)
        controller = _controller(5, cache=cache)

        controller.handle_key("CTRL_R")

        self.assertEqual(controller.result, ListResult((), ActionKind.REFRESH))
        self.assertIsNone(cache.get(deployment_key("prj_00")))
        self.assertIsNone(cache.get(project_details_key("prj_00")))
        self.assertEqual(cache.get("unrelated"), 1)

    def test_interrupt_resolves_once_with_nothing_selected(self) -> None:
        controller = _controller(5)
        controller.toggle_selection("prj_01")

        controller.handle_key("CTRL_C")

        self.assertEqual(controller.result, ListResult((), ActionKind.NONE))
        self.assertEqual(controller.handle_key("CTRL_D"), [])
        controller.interrupt()
        self.assertEqual(controller.result, ListResult((), ActionKind.NONE))

    def test_notice_is_cleared_by_next_key(self) -> None:
        controller = _controller(5)
        controller.handle_key("CTRL_D")
        controller.handle_key("DOWN")
        self.assertEqual(controller.state.notice, "")


class BackgroundUpdateTests(unittest.TestCase):
    def test_update_is_ignored_while_filtering(self) -> None:
        controller = _controller(5)
        _type(controller, "app-0")
        before = list(controller.state.items)
        fresh = _records(8)

        controller.apply_update([_item(record) for record in fresh], fresh)

        self.assertEqual(controller.state.items, before)
        self.assertEqual(controller.state.records, fresh)

    def test_whitespace_query_still_accepts_updates(self) -> None:
        controller = _controller(3)
        controller.handle_key(" ")
        self.assertEqual(_ids(controller), ["prj_00", "prj_01", "prj_02"])

        controller.apply_update(list(reversed(controller.state.items)))

        self.assertEqual(_ids(controller), ["prj_02", "prj_01", "prj_00"])

    def test_records_from_ignored_update_are_searched_next(self) -> None:
        controller = _controller(5)
        _type(controller, "app-")
        fresh = _records(8)
        controller.apply_update([_item(record) for record in fresh], fresh)

        controller.handle_key("0")

        self.assertEqual(len(controller.state.items), 8)

    def test_update_keeps_cursor_on_same_item(self) -> None:
        controller = _controller(5)
        for _ in range(3):
            controller.handle_key("DOWN")
        self.assertEqual(controller.state.cursor_item.id, "prj_03")
        items = list(controller.state.items)
        reordered = [items[3]] + items[:3] + items[4:]

        controller.apply_update(reordered)

        self.assertEqual(controller.state.cursor_index, 0)
        self.assertEqual(controller.state.cursor_item.id, "prj_03")

    def test_update_clamps_when_item_disappears(self) -> None:
        controller = _controller(5, 2)
        for _ in range(4):
            controller.handle_key("DOWN")

        controller.apply_update(controller.state.items[:2])

        self.assertEqual((controller.state.cursor_index, controller.state.page_start), (1, 0))


class DetailViewTests(unittest.TestCase):
    def test_right_opens_detail_and_fetches(self) -> None:
        controller = _controller(5)

        effects = controller.handle_key("RIGHT")

        self.assertEqual(controller.state.view, DetailView("prj_00", 0))
        self.assertEqual(effects, [FetchDetails(("prj_00",))])
        self.assertTrue(controller.detail_entry("prj_00").loading)

    def test_right_skips_fetch_already_in_flight(self) -> None:
        controller = _controller(5)
        controller.start()
        controller.handle_key("DOWN")

        self.assertEqual(controller.handle_key("RIGHT"), [])
        self.assertEqual(controller.state.view, DetailView("prj_01", 0))

    def test_right_skips_fetch_when_cached(self) -> None:
        cache = TTLCache()
        cache.set(project_details_key("prj_00"), ProjectDetails(commit_message="fix"))
        controller = _controller(5, cache=cache)

        self.assertEqual(controller.handle_key("RIGHT"), [])
        self.assertEqual(controller.detail_entry("prj_00").commit_message, "fix")

    def test_escape_returns_to_list_from_any_action(self) -> None:
        for presses in range(4):
            controller = _controller(5)
            controller.handle_key("RIGHT")
            for _ in range(presses):
                controller.handle_key("TAB")
            controller.handle_key("ESC")
            self.assertEqual(controller.state.view, ListView())

    def test_tab_cycles_actions(self) -> None:
        controller = _controller(5)
        controller.handle_key("RIGHT")
        controller.handle_key("SHIFT_TAB")
        self.assertEqual(controller.state.view, DetailView("prj_00", 3))
        controller.handle_key("TAB")
        self.assertEqual(controller.state.view, DetailView("prj_00", 0))

    def test_enter_opens_and_c_copies_action_url(self) -> None:
        controller = _controller(5)
        controller.handle_key("RIGHT")
        controller.handle_key("TAB")

        opened = controller.handle_key("ENTER")
        copied = controller.handle_key("c")

        url = "https://vercel.com/acme/app-00/settings"
        self.assertEqual(opened, [OpenUrl(url)])
        self.assertEqual(copied, [CopyText(url)])
        self.assertEqual(controller.state.notice, f"Copied {url}")
        self.assertIsNone(controller.result)

    def test_ctrl_o_resolves_with_active_action(self) -> None:
        controller = _controller(5)
        controller.handle_key("RIGHT")
        controller.handle_key("SHIFT_TAB")

        controller.handle_key("CTRL_O")

        self.assertEqual(controller.result, ListResult(("prj_00",), ActionKind.OPEN_LOGS))

    def test_typing_in_detail_does_not_search(self) -> None:
        controller = _controller(5)
        controller.handle_key("RIGHT")
        controller.handle_key("x")
        self.assertEqual(controller.state.search_query, "")

    def test_dashboard_url(self) -> None:
        self.assertEqual(dashboard_url("acme", "web"), "https://vercel.com/acme/web")
        self.assertEqual(dashboard_url("acme", "web", "/logs"), "https://vercel.com/acme/web/logs")


class PrefetchTests(unittest.TestCase):
    def test_start_prefetches_first_page(self) -> None:
        controller = _controller(25, 10)
        effects = controller.start()
        self.assertEqual(effects, [FetchDetails(tuple(f"prj_{index:02d}" for index in range(10)))])

    def test_moving_within_page_does_not_refetch(self) -> None:
        controller = _controller(25, 10)
        controller.start()
        self.assertEqual(controller.handle_key("DOWN"), [])

    def test_new_page_fetches_only_missing_details(self) -> None:
        cache = TTLCache()
        cache.set(project_details_key("prj_10"), ProjectDetails())
        controller = _controller(25, 10, cache=cache)
        controller.start()

        effects = controller.handle_key("PAGE_DOWN")

        self.assertEqual(effects, [FetchDetails(tuple(f"prj_{index}" for index in range(11, 20)))])

    def test_detail_results_are_cached(self) -> None:
        cache = TTLCache()
        controller = _controller(5, cache=cache)
        controller.start()
        details = ProjectDetails(domains=(Domain(name="app.dev"),), commit_message="ship it")

        controller.apply_detail_result("prj_00", details)
        controller.apply_detail_result("prj_01", None)

        self.assertEqual(cache.get(project_details_key("prj_00")), details)
        self.assertEqual(controller.detail_entry("prj_00").domains, (Domain(name="app.dev"),))
        failed = controller.detail_entry("prj_01")
        self.assertFalse(failed.loading)
        self.assertEqual(failed.domains, ())
        self.assertNotIn("prj_01", controller.state.in_flight)


class SettingsTests(unittest.TestCase):
    def test_settings_overlay(self) -> None:
        controller = _controller(5)
        controller.handle_key("CTRL_S")
        self.assertEqual(controller.state.view, SettingsView())

        effects = controller.handle_key("i")
        self.assertEqual(effects, [SaveSetting("icons", True)])
        self.assertTrue(controller.state.icons)

        controller.handle_key("x")
        self.assertEqual(controller.state.search_query, "")
        controller.handle_key("ESC")
        self.assertEqual(controller.state.view, ListView())

    def test_change_team(self) -> None:
        controller = _controller(5)
        controller.handle_key("CTRL_S")
        controller.handle_key("t")
        self.assertEqual(controller.result, ListResult((), ActionKind.CHANGE_TEAM))

    def test_current_team_name(self) -> None:
        controller = _controller(1)
        self.assertEqual(controller.current_team_name(), "Acme")
        controller.current_team_id = None
        self.assertEqual(controller.current_team_name(), "Personal")


if __name__ == "__main__":
    unittest.main()
