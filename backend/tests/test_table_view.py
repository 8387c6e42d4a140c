import asyncio

from assetflow.schemas.search import EntityType
from assetflow.services.highlight_service import EMPHASIS_CLASSES, HighlightScroller, HighlightState, HighlightTarget
from assetflow.services.search_service import SOURCES_BY_TYPE, match_collection
from assetflow.services.table_view import TableView, find_index
from assetflow.utils.pagination import clamp_page, page_number, total_pages


def _table(**kwargs) -> TableView:
    table = TableView(page_size=10, **kwargs)
    table.scroller = HighlightScroller(
        table.get_element_by_id, retry_interval=0.005, max_attempts=25, settle_delay=0, duration=0.02
    )
    return table


class TestPagination:
    def test_page_number(self):
        assert page_number(0, 10) == 1
        assert page_number(9, 10) == 1
        assert page_number(10, 10) == 2
        assert page_number(23, 10) == 3

    def test_total_pages(self):
        assert total_pages(0, 10) == 0
        assert total_pages(10, 10) == 1
        assert total_pages(11, 10) == 2

    def test_clamp_page(self):
        assert clamp_page(5, 30, 10) == 3
        assert clamp_page(0, 30, 10) == 1
        assert clamp_page(4, 0, 10) == 1

    def test_link_and_table_agree_on_every_index(self, make_assets):
        items = make_assets(57)
        source = SOURCES_BY_TYPE[EntityType.asset]
        results = match_collection(source, items, "cash dispenser", page_size=10)
        assert len(results) == 57

        for result in results:
            table = TableView(page_size=10)
            table.load(items)
            table.apply_target(HighlightTarget(highlight_id=str(result.id)))
            assert table.current_page == result.page_number
            assert table.get_element_by_id(f"highlight-{result.id}") is not None


    def test_find_index_skips_non_objects(self):
        assert find_index([None, {"id": 1}], 1) == 1
        assert find_index(["1", 1], 1) is None

class TestTableView:
    def test_self_selects_page_and_highlights_row(self, make_assets):
        items = make_assets(30, start_id=28)  # id 42 sits at index 14
        items.insert(15, items.pop(14))
        assert find_index(items, 42) == 15

        async def run():
            table = _table()
            table.load(items)
            task = table.mount(HighlightTarget(highlight_id="42"))
            assert table.current_page == 2
            element = table.get_element_by_id("highlight-42")
            await asyncio.sleep(0.01)
            classes_during = set(element.classes)
            found = await task
            return table, element, classes_during, found

        table, element, classes_during, found = asyncio.run(run())
        assert found is True
        assert classes_during == set(EMPHASIS_CLASSES)
        assert element.scroll_history == [("smooth", "center")]
        assert element.classes == set()

    def test_explicit_page_wins(self, make_assets):
        table = _table()
        table.load(make_assets(30))
        table.apply_target(HighlightTarget(highlight_id="1", page=3))
        assert table.current_page == 3
        assert table.get_element_by_id("highlight-1") is None

    def test_waits_for_data_loaded_after_mount(self, make_assets):
        async def run():
            table = _table()
            task = table.mount(HighlightTarget(highlight_id="25"))
            assert table.is_loading is True
            assert table.rows == []
            await asyncio.sleep(0.03)
            table.load(make_assets(30))
            found = await task
            return table, found

        table, found = asyncio.run(run())
        assert found is True
        assert table.current_page == 3
        assert table.scroller.attempts > 1

    def test_unknown_highlight_keeps_default_page(self, make_assets):
        async def run():
            table = _table()
            table.load(make_assets(30))
            found = await table.mount(HighlightTarget(highlight_id="999"))
            return table, found

        table, found = asyncio.run(run())
        assert found is False
        assert table.current_page == 1
        assert table.scroller.state == HighlightState.exhausted

    def test_mount_without_target_is_noop(self, make_assets):
        table = _table()
        table.load(make_assets(5))
        assert table.mount(HighlightTarget()) is None
        assert table.scroller.state == HighlightState.idle

    def test_page_beyond_range_is_clamped(self, make_assets):
        table = _table()
        table.load(make_assets(25))
        table.apply_target(HighlightTarget(page=9))
        assert table.current_page == 3
        assert [row.item["id"] for row in table.rows] == [21, 22, 23, 24, 25]

    def test_rows_carry_highlight_ids(self, make_assets):
        table = _table()
        table.load(make_assets(12))
        assert [row.element_id for row in table.rows] == [f"highlight-{i}" for i in range(1, 11)]

    def test_rows_without_id_use_position(self):
        table = _table()
        table.load([{"name": "a"}, {"name": "b"}])
        assert [row.element_id for row in table.rows] == ["highlight-0", "highlight-1"]

    def test_non_object_items_are_skipped(self):
        table = _table(search_key="name")
        table.load([None, {"id": 2, "name": "ATM"}, "x", {"id": 4, "name": "Kiosk"}])
        assert [row.element_id for row in table.rows] == ["highlight-2", "highlight-4"]
        assert table.pagination.total_items == 4

        table.set_filter("kiosk")
        assert [row.item["id"] for row in table.rows] == [4]

    def test_unmount_stops_scroller(self, make_assets):
        async def run():
            table = _table()
            table.load(make_assets(3))
            task = table.mount(HighlightTarget(highlight_id="99"))
            await asyncio.sleep(0)
            table.unmount()
            await asyncio.gather(task, return_exceptions=True)
            return table

        table = asyncio.run(run())
        assert table.scroller.state == HighlightState.idle

    def test_filter_resets_to_first_page(self, make_assets):
        table = _table(search_key="name")
        table.load(make_assets(30))
        table.go_to_page(3)
        table.set_filter("dispenser 2")
        assert table.current_page == 1
        # "Cash Dispenser 2" and 20..29
        assert len(table.filtered_items) == 11
        assert table.total_pages == 2

    def test_filter_without_search_key_is_ignored(self, make_assets):
        table = _table()
        table.load(make_assets(30))
        table.set_filter("dispenser 2")
        assert len(table.filtered_items) == 30

    def test_summary(self, make_assets):
        table = _table()
        assert table.summary() is None
        table.load(make_assets(25))
        assert table.summary() == "Showing 1 to 10 of 25 results"
        table.go_to_page(3)
        assert table.summary() == "Showing 21 to 25 of 25 results"

    def test_summary_hidden_for_single_page(self, make_assets):
        table = _table()
        table.load(make_assets(4))
        assert table.summary() is None

    def test_rerender_keeps_elements(self, make_assets):
        items = make_assets(10)
        table = _table()
        table.load(items)
        element = table.get_element_by_id("highlight-3")
        element.classes.add("ring-2")
        table.load(items)
        assert table.get_element_by_id("highlight-3") is element

    def test_pagination_state(self, make_assets):
        table = _table()
        table.load(make_assets(30))
        table.go_to_page(2)
        state = table.pagination
        assert (state.current_page, state.page_size, state.total_items) == (2, 10, 30)
