"""Tests for the reentrancy guard and the host-driven formatting pass."""

from __future__ import annotations

import asyncio
from typing import List

import pytest

from smartfmt.errors import ReentrantInvocation
from smartfmt.formatting import FormatContext, FormatGuard, LanguageKind, RangeReplacement, run_format_pass
from smartfmt.formatting.core import apply_replacements


class FakeHost:
    def __init__(self, text: str, kind: LanguageKind) -> None:
        self.text = text
        self.kind = kind
        self.calls: List[List[RangeReplacement]] = []

    def get_document_text(self) -> str:
        return self.text

    def language_kind(self) -> LanguageKind:
        return self.kind

    async def replace_ranges(self, edits: List[RangeReplacement]) -> None:
        self.calls.append(list(edits))
        self.text = apply_replacements(self.text, edits)


class FailingHost(FakeHost):
    async def replace_ranges(self, edits: List[RangeReplacement]) -> None:
        raise RuntimeError("edit rejected")


def test_acquire_twice_raises() -> None:
    guard = FormatGuard()
    guard.acquire("doc")

    with pytest.raises(ReentrantInvocation):
        guard.acquire("doc")


def test_nested_request_is_dropped() -> None:
    guard = FormatGuard()
    nested: List[str] = []

    async def inner() -> List[str]:
        return ["inner"]

    async def outer() -> List[str]:
        nested.extend(await guard.run("doc", inner))
        return ["outer"]

    assert asyncio.run(guard.run("doc", outer)) == ["outer"]
    assert nested == []
    assert not guard.is_busy("doc")


def test_other_documents_are_not_blocked() -> None:
    guard = FormatGuard()

    async def inner() -> List[str]:
        return ["other"]

    async def outer() -> List[str]:
        return await guard.run("other-doc", inner)

    assert asyncio.run(guard.run("doc", outer)) == ["other"]


def test_flag_cleared_after_failure() -> None:
    guard = FormatGuard()

    async def boom() -> List[str]:
        raise ValueError("boom")

    with pytest.raises(ValueError):
        asyncio.run(guard.run("doc", boom))
    assert not guard.is_busy("doc")


def test_concurrent_tasks_on_one_document() -> None:
    guard = FormatGuard()

    async def scenario() -> List[List[str]]:
        gate = asyncio.Event()

        async def slow() -> List[str]:
            await gate.wait()
            return ["done"]

        first = asyncio.ensure_future(guard.run("doc", slow))
        await asyncio.sleep(0)
        second = await guard.run("doc", slow)
        gate.set()
        return [await first, second]

    assert asyncio.run(scenario()) == [["done"], []]


def test_run_format_pass_applies_edits() -> None:
    host = FakeHost("import b from 'b'\nimport { a } from 'a'\n", LanguageKind.SCRIPT_LANG)

    edits = asyncio.run(run_format_pass(host, FormatContext(), "file:///a.ts"))

    assert len(edits) == 1
    assert host.calls == [edits]
    assert host.text == "import { a } from 'a'\nimport b from 'b'\n"


def test_run_format_pass_without_changes_does_not_touch_host() -> None:
    host = FakeHost("model A {\n  id Int\n}\n", LanguageKind.MODEL_LANG)

    assert asyncio.run(run_format_pass(host, FormatContext(), "file:///schema.prisma")) == []
    assert host.calls == []


def test_run_format_pass_respects_explicit_passes() -> None:
    host = FakeHost("import b from 'b'\nimport { a } from 'a'\n", LanguageKind.SCRIPT_LANG)

    assert asyncio.run(run_format_pass(host, FormatContext(), "doc", passes=("formatModelFields",))) == []


def test_host_failures_propagate_and_release_guard() -> None:
    host = FailingHost("import b from 'b'\nimport { a } from 'a'\n", LanguageKind.SCRIPT_LANG)
    context = FormatContext()

    with pytest.raises(RuntimeError):
        asyncio.run(run_format_pass(host, context, "doc"))
    assert not context.guard.is_busy("doc")


def test_busy_document_returns_no_edits() -> None:
    host = FakeHost("import b from 'b'\nimport { a } from 'a'\n", LanguageKind.SCRIPT_LANG)
    context = FormatContext()
    context.guard.acquire("doc")

    assert asyncio.run(run_format_pass(host, context, "doc")) == []
    assert host.calls == []
