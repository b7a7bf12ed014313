from decimal import Decimal

import pytest

from joint_portfolio.models.transaction import TransactionAction
from joint_portfolio.models.user import Role
from joint_portfolio.services.access import authenticate
from joint_portfolio.services.seed import SAMPLE_INVESTMENTS, seed_default_data


@pytest.mark.asyncio
async def test_seed_populates_empty_store(repo, settings):
    assert await seed_default_data(repo, settings) is True

    users = {u.username: u for u in await repo.list_users()}
    assert set(users) == {"alle", "ali"}
    assert users["alle"].role == Role.ADMIN
    assert users["ali"].role == Role.VIEWER
    assert users["ali"].hashed_password is None

    investments = await repo.list_investments()
    assert [i.symbol for i in investments] == ["VWCE", "AAPL", "IWDA"]
    assert all(i.alle_percentage + i.ali_percentage == 100 for i in investments)

    txs = await repo.list_transactions()
    assert len(txs) == len(SAMPLE_INVESTMENTS)
    assert all(t.action == TransactionAction.PURCHASE for t in txs)
    assert {t.amount for t in txs} == {
        Decimal("8000.00"), Decimal("5000.00"), Decimal("7000.00"),
    }


@pytest.mark.asyncio
async def test_seeded_admin_can_log_in(repo, settings):
    await seed_default_data(repo, settings)

    user = await authenticate(repo, settings.admin_username, settings.admin_password)
    assert user.role == Role.ADMIN


@pytest.mark.asyncio
async def test_seed_is_skipped_when_users_exist(repo, settings):
    await seed_default_data(repo, settings)

    assert await seed_default_data(repo, settings) is False
    assert len(await repo.list_users()) == 2
    assert len(await repo.list_investments()) == 3
    assert len(await repo.list_transactions()) == 3
