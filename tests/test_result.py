"""Tests for the Ok/Err result type."""

from typedroute.core.result import Err, Ok


def test_ok_combinators_touch_only_the_success_value():
    ok = Ok(2)
    assert ok.map(lambda v: v * 10) == Ok(20)
    assert ok.map_err(lambda e: "never") is ok
    assert ok.bimap(len, str) == Ok("2")
    assert ok.fold(lambda e: "err", lambda v: f"ok:{v}") == "ok:2"
    assert ok.is_ok()


def test_err_combinators_touch_only_the_failure_value():
    err = Err(["a", "b"])
    assert err.map(lambda v: "never") is err
    assert err.map_err(len) == Err(2)
    assert err.bimap(len, str) == Err(2)
    assert err.fold(lambda e: f"err:{len(e)}", lambda v: "ok") == "err:2"
    assert not err.is_ok()
