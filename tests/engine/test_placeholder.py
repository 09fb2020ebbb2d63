import re

from agent_start.engine.placeholder import PlaceholderResolver, current_timestamp


def test_resolve_replaces_every_occurrence() -> None:
    resolver = PlaceholderResolver(now=lambda: "NOW")

    result = resolver.resolve("{bin} --model {model} {bin}", {"bin": "claude", "model": "x"})

    assert result == "claude --model x claude"


def test_resolve_leaves_unknown_placeholders() -> None:
    resolver = PlaceholderResolver(now=lambda: "NOW")

    assert resolver.resolve("{bin} {unknown}", {"bin": "b"}) == "b {unknown}"


def test_date_is_always_available() -> None:
    resolver = PlaceholderResolver(now=lambda: "2025-01-01T10:00:00+10:00")

    assert resolver.resolve("today is {date}", {}) == "today is 2025-01-01T10:00:00+10:00"


def test_values_are_not_rescanned_for_escapes() -> None:
    resolver = PlaceholderResolver(now=lambda: "NOW")

    result = resolver.resolve("'{prompt}'", {"prompt": "it's \\n {{raw}}"})

    assert result == "'it's \\n {{raw}}'"


def test_current_timestamp_has_seconds_precision_and_offset() -> None:
    value = current_timestamp()

    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}[+-]\d{2}:\d{2}", value)


def test_substituted_values_are_not_resolved_again() -> None:
    resolver = PlaceholderResolver(now=lambda: "NOW")

    result = resolver.resolve(
        "{bin} '{prompt}' {role}",
        {"bin": "a", "prompt": "explain {role} and {date}", "role": "SECRET"},
    )

    assert result == "a 'explain {role} and {date}' SECRET"


def test_date_is_computed_once_per_template() -> None:
    calls: list[int] = []

    def now() -> str:
        calls.append(1)
        return f"T{len(calls)}"

    resolver = PlaceholderResolver(now=now)

    assert resolver.resolve("{date} {date}", {}) == "T1 T1"
    assert resolver.resolve("no date here", {}) == "no date here"
    assert len(calls) == 1
