"""Unit tests for the app controller: onboarding, persistence hook, reset."""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from evolua.schemas.habit import HabitCreate
from evolua.services.ai_gateway import PlanResult
from evolua.services.app_controller import AppController
from evolua.services.lifecycle import FALLBACK_TASK_TITLE


def _gateway(plan: PlanResult | None = None) -> AsyncMock:
    gateway = AsyncMock()
    gateway.generate_plan = AsyncMock(return_value=plan or PlanResult(titles=["A", "B", "C"]))
    return gateway


@pytest.fixture
def controller(store, clock):
    return AppController(store, _gateway(), clock=clock)


# ---------------------------------------------------------------------------
# Onboarding
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_onboarding_seeds_plan_and_persists(store, profile, clock):
    controller = AppController(store, _gateway(), clock=clock)
    assert controller.needs_onboarding

    assert await controller.complete_onboarding(profile) is True

    assert not controller.needs_onboarding
    assert [t.title for t in controller.state.tasks] == ["A", "B", "C"]
    loaded = await store.load()
    assert loaded.user.name == "Ana"
    assert [t.id for t in loaded.tasks] == ["init-0", "init-1", "init-2"]


@pytest.mark.asyncio
async def test_onboarding_plan_failure_falls_back(store, profile, clock):
    gateway = _gateway(PlanResult(titles=[], error="gateway down"))
    controller = AppController(store, gateway, clock=clock)

    assert await controller.complete_onboarding(profile) is True

    assert len(controller.state.tasks) == 1
    assert controller.state.tasks[0].title == FALLBACK_TASK_TITLE
    assert controller.state.tasks[0].xp_reward == 10
    assert controller.is_onboarding is False


@pytest.mark.asyncio
async def test_onboarding_gateway_exception_falls_back(store, profile, clock):
    gateway = AsyncMock()
    gateway.generate_plan = AsyncMock(side_effect=RuntimeError("boom"))
    controller = AppController(store, gateway, clock=clock)

    assert await controller.complete_onboarding(profile) is True
    assert [t.title for t in controller.state.tasks] == [FALLBACK_TASK_TITLE]
    assert controller.is_onboarding is False


@pytest.mark.asyncio
async def test_onboarding_rejects_duplicate_submission(store, profile, clock):
    release = asyncio.Event()

    async def slow_plan(prof):
        await release.wait()
        return PlanResult(titles=["Walk"])

    gateway = AsyncMock()
    gateway.generate_plan = AsyncMock(side_effect=slow_plan)
    controller = AppController(store, gateway, clock=clock)

    first = asyncio.create_task(controller.complete_onboarding(profile))
    await asyncio.sleep(0)
    assert controller.is_onboarding is True
    assert await controller.complete_onboarding(profile) is False

    release.set()
    assert await first is True
    assert gateway.generate_plan.await_count == 1
    assert controller.is_onboarding is False


# ---------------------------------------------------------------------------
# Mutations and persistence
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_each_mutation_is_persisted(controller, store, profile):
    await controller.complete_onboarding(profile)

    task = await controller.add_task("Write journal")
    await controller.toggle_task(task.id)
    habit = await controller.add_habit(HabitCreate(title="Walk", xp_reward=30))
    await controller.toggle_habit(habit.id)
    await controller.set_premium(True)

    loaded = await store.load()
    assert loaded.tasks[0].title == "Write journal"
    assert loaded.tasks[0].completed is True
    assert loaded.habits[0].completed_dates == ["2024-05-15"]
    assert loaded.gamification.xp == 50
    assert loaded.user.is_premium is True

    await controller.delete_habit(habit.id)
    await controller.delete_task(task.id)
    loaded = await store.load()
    assert loaded.habits == []
    assert all(t.id != task.id for t in loaded.tasks)
    assert loaded.gamification.xp == 50


@pytest.mark.asyncio
async def test_noop_operations_do_not_fail(controller, profile):
    await controller.complete_onboarding(profile)
    before = controller.state.snapshot()
    assert await controller.add_task("   ") is None
    assert await controller.toggle_task("missing") is None
    assert await controller.delete_habit("missing") is False
    assert controller.state.snapshot() == before


@pytest.mark.asyncio
async def test_persistence_failure_does_not_fail_mutation(profile, clock):
    store = MagicMock()
    store.save = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk full")))
    controller = AppController(store, _gateway(), clock=clock)
    controller.state.user = profile

    task = await controller.add_task("Stretch")
    award = await controller.toggle_task(task.id)

    assert award.total_xp == 20
    assert controller.state.tasks[0].completed is True
    assert store.save.await_count == 2


@pytest.mark.asyncio
async def test_aclose_flushes_pending_changes_then_closes_store(profile, clock):
    store = MagicMock()
    store.save = AsyncMock()
    store.close = AsyncMock()
    controller = AppController(store, _gateway(), clock=clock)
    controller.state.user = profile
    controller.manager.add_task("Stretch")

    await controller.aclose()

    store.save.assert_awaited_once_with(controller.state)
    store.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_load_restores_saved_state(store, profile, clock):
    first = AppController(store, _gateway(), clock=clock)
    await first.complete_onboarding(profile)
    await first.toggle_task("init-0")

    second = await AppController.load(store, _gateway(), clock=clock)
    assert not second.needs_onboarding
    assert second.state.gamification.xp == 50
    assert second.state.tasks[0].completed is True


# ---------------------------------------------------------------------------
# Coach and reset
# ---------------------------------------------------------------------------


def test_coach_session_requires_profile(controller):
    with pytest.raises(ValueError, match="profile"):
        controller.start_coach_session()


@pytest.mark.asyncio
async def test_coach_session_uses_profile(controller, profile):
    await controller.complete_onboarding(profile)
    session = controller.start_coach_session()
    assert session.profile is controller.state.user
    assert session.gateway is controller.gateway


@pytest.mark.asyncio
async def test_reset_clears_store_and_state(controller, store, profile):
    await controller.complete_onboarding(profile)
    await controller.add_task("Something")

    await controller.reset()

    assert controller.needs_onboarding
    assert controller.state.tasks == []
    assert controller.manager.state is controller.state
    assert await store.load() is None
