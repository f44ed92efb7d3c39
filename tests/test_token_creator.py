from decimal import Decimal

import pytest

from vaultworks.ledger import AuthorizationError, Ledger, ResourceError
from vaultworks.token_creator import TokenCreator


@pytest.fixture
def ledger():
    return Ledger(seed=3)


@pytest.fixture
def creator(ledger):
    return TokenCreator(ledger)


def test_new_user_issues_single_badge(creator, ledger):
    badge = creator.new_user()
    assert badge.amount == Decimal(1)
    assert creator.account_exists(badge.resource_address)
    assert ledger.manager(badge.resource_address).metadata["name"] == "Token manager badge"


def test_unknown_badge_is_not_an_account(creator):
    assert creator.account_exists("resource_9999") is False
    with pytest.raises(ResourceError, match="not affiliated with an account"):
        creator.assert_account_exists("resource_9999")


def test_create_token(creator, ledger):
    badge = creator.new_user()
    tokens = creator.create_token(badge.resource_address, {"name": "Gold", "symbol": "GLD"}, 1000, 2)
    assert tokens.amount == Decimal(1000)
    manager = ledger.manager(tokens.resource_address)
    assert manager.metadata == {"name": "Gold", "symbol": "GLD"}
    assert manager.divisibility == 2
    assert creator.users[badge.resource_address].resources == [tokens.resource_address]


def test_create_token_for_unknown_account(creator):
    with pytest.raises(ResourceError, match="not affiliated"):
        creator.create_token("resource_9999", {}, 1, 0)


def test_mint_with_badge(creator, ledger):
    badge = creator.new_user()
    tokens = creator.create_token(badge.resource_address, {}, 10, 0)
    minted = creator.mint(badge.resource_address, 5, tokens.resource_address, badge.create_proof())
    assert minted.resource_address == tokens.resource_address
    assert minted.amount == Decimal(5)
    assert ledger.manager(tokens.resource_address).total_supply == tokens.amount + minted.amount


def test_mint_requires_account_badge(creator):
    owner = creator.new_user()
    stranger = creator.new_user()
    tokens = creator.create_token(owner.resource_address, {}, 10, 0)
    with pytest.raises(AuthorizationError):
        creator.mint(owner.resource_address, 1, tokens.resource_address, stranger)
    with pytest.raises(AuthorizationError):
        creator.mint(owner.resource_address, 1, tokens.resource_address, None)


def test_mint_token_of_other_account(creator):
    first = creator.new_user()
    second = creator.new_user()
    tokens = creator.create_token(first.resource_address, {}, 10, 0)
    with pytest.raises(ResourceError, match="not created by this account"):
        creator.mint(second.resource_address, 1, tokens.resource_address, second)


def test_burn_reduces_supply(creator, ledger):
    badge = creator.new_user()
    tokens = creator.create_token(badge.resource_address, {}, 10, 0)
    part = tokens.take(4)
    creator.burn(badge.resource_address, part)
    assert part.is_empty()
    assert ledger.manager(tokens.resource_address).total_supply == tokens.amount


def test_burn_foreign_tokens_rejected(creator, ledger):
    badge = creator.new_user()
    foreign = ledger.new_fungible(5)
    with pytest.raises(ResourceError):
        creator.burn(badge.resource_address, foreign)
    assert foreign.amount == Decimal(5)