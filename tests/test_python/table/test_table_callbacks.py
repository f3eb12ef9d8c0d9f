import logging

import pytest

from regommend import Item, KeyNotFoundError, KeyNotLoadableError, Table


def test_loader_called_once_per_miss_and_result_becomes_resident(tbl):
    calls = []

    def loader(key):
        calls.append(key)
        return Item(key, {"loaded": 1.0})

    tbl.set_data_loader(loader)
    got = tbl.value("k")

    assert calls == ["k"]
    assert tbl.exists("k")
    assert got is tbl.value("k")
    assert got.data == {"loaded": 1.0}
    # second lookup is a hit
    assert calls == ["k"]


def test_loader_result_is_stored_as_new_item(tbl):
    loaded = Item("k", {"a": 1.0})
    tbl.set_data_loader(lambda key: loaded)

    got = tbl.value("k")

    assert got is not loaded
    assert got.key == "k"
    assert got.data == loaded.data


def test_loader_item_is_stored_under_requested_key(tbl):
    tbl.set_data_loader(lambda key: Item("something-else", {"a": 1.0}))
    got = tbl.value("k")

    assert got.key == "k"
    assert tbl.exists("k")
    assert not tbl.exists("something-else")


def test_loader_returning_none_raises_not_loadable(tbl):
    calls = []

    def loader(key):
        calls.append(key)
        return None

    tbl.set_data_loader(loader)
    with pytest.raises(KeyNotLoadableError) as exc:
        tbl.value("k")
    assert isinstance(exc.value, KeyNotFoundError)
    assert "could not be loaded" in str(exc.value)

    with pytest.raises(KeyNotFoundError):
        tbl.value("k")
    assert calls == ["k", "k"]
    assert tbl.count() == 0


def test_loader_returning_wrong_type_raises(tbl):
    tbl.set_data_loader(lambda key: {"a": 1.0})
    with pytest.raises(TypeError):
        tbl.value("k")
    assert not tbl.exists("k")


def test_exists_never_calls_loader(tbl):
    calls = []
    tbl.set_data_loader(lambda key: calls.append(key))
    assert not tbl.exists("k")
    assert calls == []


def test_loaded_item_triggers_added_callback(tbl):
    added = []
    tbl.set_added_item_callback(added.append)
    tbl.set_data_loader(lambda key: Item(key, {"a": 1.0}))

    got = tbl.value("k")
    assert added == [got]


def test_exists_after_delete_ignores_loader(tbl):
    tbl.set_data_loader(lambda key: Item(key, {"a": 1.0}))
    tbl.value("k")
    tbl.delete("k")
    assert not tbl.exists("k")
    # value goes through the loader again
    assert tbl.value("k").data == {"a": 1.0}


def test_added_callback_sees_new_item(tbl):
    seen = []

    def on_added(item):
        seen.append((item.key, tbl.exists(item.key), tbl.value(item.key) is item))

    tbl.set_added_item_callback(on_added)
    tbl.add("k", {"a": 1.0})

    assert seen == [("k", True, True)]


def test_about_to_delete_sees_live_item_before_removal(tbl):
    item = tbl.add("k", {"a": 1.0})
    seen = []

    def on_delete(it):
        seen.append((it, tbl.exists(it.key)))

    tbl.set_about_to_delete_item_callback(on_delete)
    tbl.delete("k")

    assert seen == [(item, True)]
    assert not tbl.exists("k")


def test_about_to_delete_not_called_for_missing_key(tbl):
    seen = []
    tbl.set_about_to_delete_item_callback(seen.append)
    with pytest.raises(KeyNotFoundError):
        tbl.delete("missing")
    assert seen == []


def test_callbacks_can_reenter_table(tbl):
    def on_added(item):
        if item.key == "parent":
            tbl.add("child", {"a": 1.0})

    def on_delete(item):
        if item.key == "parent":
            tbl.delete("child")

    tbl.set_added_item_callback(on_added)
    tbl.set_about_to_delete_item_callback(on_delete)

    tbl.add("parent", {"a": 1.0})
    assert sorted(tbl.keys()) == ["child", "parent"]

    tbl.delete("parent")
    assert tbl.count() == 0


def test_loader_can_reenter_table(tbl):
    def loader(key):
        tbl.add("side-effect", {"a": 1.0})
        return Item(key, {"b": 1.0})

    tbl.set_data_loader(loader)
    tbl.value("k")
    assert sorted(tbl.keys()) == ["k", "side-effect"]


def test_callback_exception_propagates(tbl):
    def boom(item):
        raise RuntimeError("callback failed")

    tbl.set_added_item_callback(boom)
    with pytest.raises(RuntimeError, match="callback failed"):
        tbl.add("k", {"a": 1.0})
    # item was stored before the callback ran
    assert tbl.exists("k")

    tbl.set_about_to_delete_item_callback(boom)
    with pytest.raises(RuntimeError, match="callback failed"):
        tbl.delete("k")
    # aborted delete leaves the item in place
    assert tbl.exists("k")


def test_flush_skips_about_to_delete(scenario_table):
    seen = []
    scenario_table.set_about_to_delete_item_callback(seen.append)
    scenario_table.flush()

    assert seen == []
    assert scenario_table.count() == 0


def test_setters_replace_and_clear(tbl):
    first, second = [], []
    tbl.set_added_item_callback(first.append)
    tbl.add("a", {})
    tbl.set_added_item_callback(second.append)
    tbl.add("b", {})
    tbl.set_added_item_callback(None)
    tbl.add("c", {})

    assert [it.key for it in first] == ["a"]
    assert [it.key for it in second] == ["b"]

    tbl.set_data_loader(lambda key: Item(key, {}))
    tbl.set_data_loader(None)
    with pytest.raises(KeyNotFoundError):
        tbl.value("missing")


def test_setters_reject_non_callables(tbl):
    with pytest.raises(TypeError):
        tbl.set_data_loader("not callable")
    with pytest.raises(TypeError):
        tbl.set_added_item_callback(42)
    with pytest.raises(TypeError):
        tbl.set_about_to_delete_item_callback(object())
    with pytest.raises(TypeError):
        Table("x", data_loader=1)


def test_constructor_keywords_configure_callbacks():
    added, deleted = [], []
    t = Table(
        "configured",
        data_loader=lambda key: Item(key, {"a": 1.0}),
        added_item=added.append,
        about_to_delete_item=deleted.append,
    )

    item = t.value("k")
    t.delete("k")

    assert added == [item]
    assert deleted == [item]


def test_logger_receives_diagnostics(tbl, table_logger, caplog):
    tbl.set_logger(table_logger)
    tbl.add("k", {"a": 1.0})
    tbl.delete("k")
    tbl.flush()

    messages = [r.getMessage() for r in caplog.records if r.name == "regommend.test"]
    assert messages == [
        "[test] added item 'k'",
        "[test] deleted item 'k'",
        "[test] flushed 0 items",
    ]
    flush_record = [r for r in caplog.records if r.name == "regommend.test"][-1]
    assert flush_record.levelno == logging.INFO


def test_no_logger_discards_diagnostics(tbl, table_logger, caplog):
    tbl.add("k", {"a": 1.0})
    tbl.flush()
    assert [r for r in caplog.records if r.name == "regommend.test"] == []

    tbl.set_logger(table_logger)
    tbl.set_logger(None)
    tbl.flush()
    assert [r for r in caplog.records if r.name == "regommend.test"] == []
