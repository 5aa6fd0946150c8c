import reactivex as rx

from conftest import read_records
from scopelog.fields import field
from scopelog.opt import log_each, log_errors, log_redirect_to


def test_log_each(log, sink, scope):
    forwarded = []
    rx.from_([1, 2]).pipe(log_each(log, scope, "tick", key="n")).subscribe(forwarded.append)

    assert forwarded == [1, 2]
    records = read_records(sink)
    assert [(r["msg"], r["n"], r["level"]) for r in records] == [("tick", 1, "info"), ("tick", 2, "info")]


def test_log_each_to_value(log, sink, scope):
    rx.from_([b"abcd"]).pipe(log_each(log, scope, "chunk", key="size", to_value=len)).subscribe()
    assert read_records(sink)[0]["size"] == 4


def test_log_errors(log, sink, scope, collector):
    rx.throw(ValueError("broken pipe")).pipe(log_errors(log, scope, "stream failed")).subscribe(collector)

    assert len(collector.errors) == 1
    (record,) = read_records(sink)
    assert record["msg"] == "stream failed"
    assert record["error"] == "broken pipe"
    assert record["level"] == "error"


def test_log_redirect_to(log, sink, scope):
    output = []
    rx.from_([1, "warn", 2]).pipe(log_redirect_to(log, lambda x: isinstance(x, str), scope)).subscribe(output.append)

    assert output == [1, 2]
    assert read_records(sink)[0]["msg"] == "warn"


def test_log_redirect_to_fields(log, sink, scope):
    def to_fields(x):
        return "odd", (field("value", x),)

    output = []
    rx.from_([1, 2, 3]).pipe(log_redirect_to(log, lambda x: x % 2 == 1, scope, to_fields)).subscribe(output.append)

    assert output == [2]
    assert [r["value"] for r in read_records(sink)] == [1, 3]
