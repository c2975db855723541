"""Tests for request-scoped credential propagation."""

import asyncio

import pytest

from src.services.credential_context import (
    credential_scope,
    get_current_credential,
    reset_current_credential,
    run_with_credential,
    set_current_credential,
)


class TestCredentialScope:
    """Binding and restoring the credential in one task."""

    def test_absent_outside_any_scope(self):
        assert get_current_credential() is None

    def test_scope_binds_and_restores(self):
        with credential_scope("key-a") as bound:
            assert bound == "key-a"
            assert get_current_credential() == "key-a"
        assert get_current_credential() is None

    def test_nested_scope_restores_outer_binding(self):
        with credential_scope("outer"):
            with credential_scope("inner"):
                assert get_current_credential() == "inner"
            assert get_current_credential() == "outer"
        assert get_current_credential() is None

    def test_restored_when_body_raises(self):
        with pytest.raises(RuntimeError):
            with credential_scope("key-a"):
                raise RuntimeError("boom")
        assert get_current_credential() is None

    def test_empty_credential_rejected(self):
        with pytest.raises(ValueError, match="non-empty"):
            set_current_credential("")
        assert get_current_credential() is None

    def test_set_and_reset_tokens(self):
        token = set_current_credential("key-a")
        try:
            assert get_current_credential() == "key-a"
        finally:
            reset_current_credential(token)
        assert get_current_credential() is None


class TestConcurrentRequests:
    """Sibling tasks on one event loop never observe each other's key."""

    @pytest.mark.asyncio
    async def test_interleaved_tasks_see_only_their_own_key(self):
        seen: dict[str, list[str | None]] = {}

        async def request(name: str, delay: float) -> None:
            observations = []
            with credential_scope(f"key-{name}"):
                observations.append(get_current_credential())
                await asyncio.sleep(delay)
                observations.append(get_current_credential())
                await asyncio.sleep(0)
                observations.append(get_current_credential())
            seen[name] = observations

        await asyncio.gather(
            request("a", 0.05),
            request("b", 0.0),
            request("c", 0.02),
        )

        assert seen["a"] == ["key-a"] * 3
        assert seen["b"] == ["key-b"] * 3
        assert seen["c"] == ["key-c"] * 3
        assert get_current_credential() is None

    @pytest.mark.asyncio
    async def test_tasks_spawned_inside_scope_inherit_binding(self):
        async def child() -> str | None:
            await asyncio.sleep(0)
            return get_current_credential()

        with credential_scope("parent-key"):
            task = asyncio.create_task(child())
        # Scope already exited; the child kept its copied context
        assert await task == "parent-key"
        assert get_current_credential() is None

    @pytest.mark.asyncio
    async def test_run_with_credential_returns_result(self):
        async def work() -> str | None:
            await asyncio.sleep(0)
            return get_current_credential()

        results = await asyncio.gather(
            run_with_credential("key-1", work),
            run_with_credential("key-2", work),
        )

        assert results == ["key-1", "key-2"]
        assert get_current_credential() is None

    @pytest.mark.asyncio
    async def test_run_with_credential_resets_after_failure(self):
        async def work() -> None:
            raise ValueError("upstream exploded")

        with pytest.raises(ValueError):
            await run_with_credential("key-1", work)
        assert get_current_credential() is None
