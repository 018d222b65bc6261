import logging

from qirk.util.log import CallOrderFilter, get_logger, reset_call_order


def test_logger_names():
    root = get_logger()
    assert root.name == "qirk"
    assert get_logger("qirk") is root
    assert get_logger("ir.quantum").name == "qirk.ir.quantum"
    assert get_logger("qirk.ir.quantum") is get_logger("ir.quantum")
    assert root.propagate is False
    assert root.handlers


def test_call_order_filter_counts_from_one_after_reset():
    reset_call_order()
    call_filter = CallOrderFilter()
    records = [logging.LogRecord("qirk", logging.DEBUG, __file__, 1, "msg", None, None) for _ in range(3)]
    for record in records:
        assert call_filter.filter(record)
    assert [r.call_order for r in records] == [1, 2, 3]
    reset_call_order()
    record = logging.LogRecord("qirk", logging.DEBUG, __file__, 1, "msg", None, None)
    call_filter.filter(record)
    assert record.call_order == 1
