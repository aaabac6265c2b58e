"""Text and JSON views over cause chains."""

import json

import pytest

from chainerr import ChainedError, dumps, extend_native_error, print_cause_chain, to_structured
from chainerr.core import native
from chainerr.utils.settings import configure


def _raised(error: BaseException) -> BaseException:
    try:
        raise error
    except BaseException as exc:  # noqa: BLE001 - test helper
        return exc


def _chain(*messages: str) -> ChainedError:
    """Build ``messages[0] -> messages[1] -> ...`` with the last one as root."""
    error = None
    for message in reversed(messages):
        error = ChainedError(message, cause=error)
    return error


class Node:
    """Error-like object that is not an exception."""

    def __init__(self, name, message, cause=None):
        self.name = name
        self.message = message
        self.cause = cause


def test_to_string_wraps_root_failure() -> None:
    err = ChainedError("Wrapping error", {"cause": RuntimeError("Root failure")})
    text = err.to_string()
    assert text.startswith("ChainedError: Wrapping error")
    head, _, tail = text.partition("\nCaused by...\n")
    assert "Wrapping error" in head
    assert "Root failure" in tail
    assert "RuntimeError: Root failure" in tail


def test_to_string_indentation_compounds_with_depth() -> None:
    configure(profile="compact")
    err = _chain("Outer", "Mid", "Root")
    assert err.to_string().split("\n") == [
        "ChainedError: Outer",
        "Caused by...",
        "  ChainedError: Mid",
        "  Caused by...",
        "    ChainedError: Root",
    ]


def test_to_string_indents_own_stack() -> None:
    err = ChainedError("boom")
    lines = err.to_string().split("\n")
    assert lines[0] == "ChainedError: boom"
    assert lines[1] == "  Traceback (most recent call last):"
    assert all(line.startswith("  ") for line in lines[1:])


def test_to_string_omits_empty_message() -> None:
    configure(profile="compact")
    assert ChainedError("").to_string() == "ChainedError"


def test_to_string_renders_raw_cause_values() -> None:
    configure(profile="compact", overrides={"errors": {"cause_storage": "native"}})
    err = ChainedError("wrap", "upstream returned 503")
    assert err.to_string() == "ChainedError: wrap\nCaused by...\n  upstream returned 503"


def test_str_keeps_python_convention() -> None:
    err = ChainedError("wrap", ValueError("root"))
    assert str(err) == "wrap"


def test_full_stack_lists_every_link_in_order() -> None:
    root = _raised(ValueError("Root"))
    mid = ChainedError("Mid", root)
    outer = ChainedError("Outer", mid)
    full = outer.full_stack
    assert full.startswith(outer.stack)
    positions = [full.index(outer.stack), full.index(mid.stack), full.index("ValueError: Root")]
    assert positions == sorted(positions)
    assert full.count("\nCaused by: ") == 2


def test_full_stack_falls_back_to_message() -> None:
    configure(profile="compact")
    err = _chain("Outer", "Mid", "Root")
    assert err.full_stack == "\nCaused by: Mid\nCaused by: Root"


def test_full_stack_is_flat() -> None:
    err = _chain("A", "B", "C", "D")
    for line in err.full_stack.split("\n"):
        if "Caused by:" in line:
            assert line.startswith("Caused by: ")


def test_to_json_reproduces_nested_records() -> None:
    err = _chain("Outer", "Mid", "Root")
    record = err.to_json()
    assert record["message"] == "Outer"
    assert record["cause"]["message"] == "Mid"
    assert record["cause"]["cause"]["message"] == "Root"
    assert record["cause"]["cause"]["cause"] is None


def test_to_json_depth_matches_chain_length() -> None:
    links = [f"level-{index}" for index in range(6)]
    err = _chain(*links)
    record = err.to_json()
    current = err
    depth = 0
    while record is not None:
        assert set(record) == {"name", "type", "timestamp", "message", "stack", "cause"}
        assert record["message"] == current.message
        assert record["name"] == current.name
        assert record["timestamp"] == current.isoformat_timestamp()
        record = record["cause"]
        current = current.cause
        depth += 1
    assert depth == len(links)


def test_to_json_is_json_serializable() -> None:
    record = _chain("Outer", "Root").to_json()
    assert json.loads(json.dumps(record)) == record


def test_to_json_embeds_foreign_cause_raw_without_extension() -> None:
    root = ValueError("root")
    assert ChainedError("wrap", root).to_json()["cause"] is root


def test_to_json_uses_cause_to_json_method() -> None:
    class Reported(Exception):
        def to_json(self):
            return {"reported": True}

    assert ChainedError("wrap", Reported()).to_json()["cause"] == {"reported": True}


def test_extend_native_error_structures_foreign_causes() -> None:
    extend_native_error()
    inner = _raised(KeyError("id"))
    root = ValueError("root")
    root.__cause__ = inner
    record = ChainedError("wrap", root).to_json()
    assert record["cause"]["name"] == "ValueError"
    assert record["cause"]["type"] == "ValueError"
    assert record["cause"]["message"] == "root"
    assert record["cause"]["stack"] is None
    assert record["cause"]["cause"] is inner


def test_native_record_omits_missing_cause() -> None:
    serializer = extend_native_error()
    assert "cause" not in serializer(ValueError("lonely"))


def test_extend_native_error_is_idempotent() -> None:
    first = extend_native_error()
    second = ChainedError.extend_native_error()
    assert first is second
    assert native.native_serializer() is first


def test_extend_native_error_does_not_overwrite(monkeypatch: pytest.MonkeyPatch) -> None:
    custom = lambda error: {"custom": str(error)}  # noqa: E731
    monkeypatch.setattr(native, "_installed", custom)
    assert extend_native_error() is custom
    assert ChainedError("wrap", ValueError("x")).to_json()["cause"] == {"custom": "x"}


def test_print_cause_chain_indents_by_depth() -> None:
    err = ChainedError("Outer", ChainedError("Mid", ValueError("Root")))
    lines = print_cause_chain(err).split("\n")
    assert lines == [
        "ChainedError: Outer",
        "  ChainedError: Mid",
        "    ValueError: Root",
    ]
    for depth, line in enumerate(lines):
        assert len(line) - len(line.lstrip(" ")) == 2 * depth


def test_print_cause_chain_uses_literal_fallbacks() -> None:
    chain = Node(None, "", Node("Timeout", None))
    assert print_cause_chain(chain) == "Error: (no message)\n  Timeout: (no message)"


def test_print_cause_chain_follows_native_exception_causes() -> None:
    try:
        try:
            raise KeyError("id")
        except KeyError as inner:
            raise LookupError("lookup failed") from inner
    except LookupError as outer:
        assert print_cause_chain(outer) == "LookupError: lookup failed\n  KeyError: 'id'"


def test_print_cause_chain_accepts_serialized_records() -> None:
    record = _chain("Outer", "Root").to_json()
    assert ChainedError.print_cause_chain(record) == "ChainedError: Outer\n  ChainedError: Root"


def test_print_cause_chain_has_no_trailing_newline() -> None:
    assert not print_cause_chain(ValueError("x")).endswith("\n")


def test_cyclic_chain_is_cut_with_marker() -> None:
    configure(profile="compact")
    a = Node("A", "first")
    b = Node("B", "second", a)
    a.cause = b
    outer = ChainedError("Outer", CycleCarrier(a))
    assert print_cause_chain(a) == "A: first\n  B: second\n    [Circular] A: first"
    assert outer.full_stack.endswith("Caused by: [Circular] A: first")
    assert outer.to_string().endswith("[Circular] A: first")


class CycleCarrier(Exception):
    """Exception whose cause attribute points into a cycle of plain objects."""

    def __init__(self, node):
        super().__init__("carrier")
        self.cause = node


def test_cyclic_chained_errors_in_json() -> None:
    configure(overrides={"errors": {"cause_storage": "native"}})
    first = ChainedError("first")
    second = ChainedError("second", first)
    first.__cause__ = second
    record = first.to_json()
    assert record["cause"]["message"] == "second"
    assert record["cause"]["cause"] == "[Circular] ChainedError: first"


def test_depth_cap_truncates_long_chains() -> None:
    configure(profile="compact", overrides={"rendering": {"max_depth": 2}})
    err = _chain("A", "B", "C", "D")
    assert print_cause_chain(err) == "ChainedError: A\n  ChainedError: B\n    [Truncated] ChainedError: C"
    assert err.to_json()["cause"]["cause"] == "[Truncated] ChainedError: C"


def test_to_structured_recurses_through_foreign_causes() -> None:
    try:
        try:
            raise KeyError("id")
        except KeyError as inner:
            raise LookupError("lookup failed") from inner
    except LookupError as outer:
        record = to_structured(outer)
    assert record["name"] == "LookupError"
    assert "LookupError: lookup failed" in record["stack"]
    assert record["cause"]["name"] == "KeyError"
    assert record["cause"]["cause"] is None


def test_to_structured_on_chained_error_matches_to_json_shape() -> None:
    configure(profile="compact")
    err = ChainedError("wrap", ValueError("root"))
    record = to_structured(err)
    assert record["timestamp"] == err.isoformat_timestamp()
    assert record["cause"] == {
        "name": "ValueError",
        "type": "ValueError",
        "message": "root",
        "stack": None,
        "cause": None,
    }


def test_dumps_serializes_mixed_chains() -> None:
    err = ChainedError("wrap", ValueError("root"))
    payload = json.loads(dumps(err, indent=2))
    assert payload["message"] == "wrap"
    assert payload["cause"]["type"] == "ValueError"


class HttpError(ChainedError):
    def __init__(self, message, status, cause=None):
        super().__init__(message, cause=cause)
        self.status = status

    def to_json(self):
        record = super().to_json()
        record["status"] = self.status
        return record


def test_to_json_uses_subclass_override_for_causes() -> None:
    err = ChainedError("wrap", HttpError("upstream", 503, cause=ValueError("refused")))
    record = err.to_json()
    assert record["message"] == "wrap"
    assert record["cause"]["status"] == 503
    assert record["cause"]["message"] == "upstream"
    assert record["cause"]["cause"].args == ("refused",)


def test_to_json_of_subclass_head_keeps_its_fields() -> None:
    record = HttpError("upstream", 404).to_json()
    assert record["status"] == 404
    assert record["cause"] is None


def test_to_structured_uses_subclass_override() -> None:
    assert to_structured(HttpError("upstream", 502))["status"] == 502
    nested = to_structured(ChainedError("wrap", HttpError("up", 500)))
    assert nested["cause"]["status"] == 500


def test_dumps_handles_foreign_cause_without_extending() -> None:
    err = ChainedError("Wrapping error", {"cause": RuntimeError("Root failure")})
    payload = json.loads(dumps(err))
    assert payload["cause"]["name"] == "RuntimeError"
    assert payload["cause"]["message"] == "Root failure"
    assert isinstance(err.to_json()["cause"], RuntimeError)
