"""Accounts that create tokens and track which tokens they made through a badge."""

from __future__ import annotations

from typing import Mapping, Optional

from vaultworks.ledger import (
    DIVISIBILITY_NONE,
    AuthorizationError,
    Badge,
    Bucket,
    Ledger,
    ResourceError,
    Vault,
)


class User:
    """An account holding the tokens it has created; minting needs its badge."""

    def __init__(self, ledger: Ledger, badge_address: str) -> None:
        self._ledger = ledger
        self.badge_address = badge_address
        self.resources: list[str] = []
        self._minter = Vault.with_bucket(
            ledger.new_fungible(1, DIVISIBILITY_NONE, {"name": "Token minter badge"})
        )

    def create_token(self, metadata: Mapping[str, str], initial_supply, divisibility: int) -> Bucket:
        tokens = self._ledger.new_fungible(
            initial_supply,
            divisibility,
            dict(metadata),
            minter=self._minter.resource_address,
        )
        self.resources.append(tokens.resource_address)
        return tokens

    def _own_token(self, token_address: str) -> None:
        if token_address not in self.resources:
            raise ResourceError("This token was not created by this account.")

    def mint(self, amount, token_address: str, badge: Optional[Badge]) -> Bucket:
        if badge is None or badge.resource_address != self.badge_address or badge.amount <= 0:
            raise AuthorizationError("minting requires the account badge")
        self._own_token(token_address)
        return self._ledger.manager(token_address).mint(amount, self._minter)

    def burn(self, tokens: Bucket) -> None:
        self._own_token(tokens.resource_address)
        self._ledger.manager(tokens.resource_address).burn(tokens, self._minter)


class TokenCreator:
    """Registry of accounts, each identified by the address of its badge."""

    def __init__(self, ledger: Ledger) -> None:
        self._ledger = ledger
        self.users: dict[str, User] = {}

    def new_user(self) -> Bucket:
        badge = self._ledger.new_fungible(1, DIVISIBILITY_NONE, {"name": "Token manager badge"})
        self.users[badge.resource_address] = User(self._ledger, badge.resource_address)
        return badge

    def create_token(self, badge_address: str, metadata: Mapping[str, str], initial_supply, divisibility: int) -> Bucket:
        self.assert_account_exists(badge_address)
        return self.users[badge_address].create_token(metadata, initial_supply, divisibility)

    def mint(self, badge_address: str, amount, token_address: str, badge: Optional[Badge]) -> Bucket:
        self.assert_account_exists(badge_address)
        return self.users[badge_address].mint(amount, token_address, badge)

    def burn(self, badge_address: str, tokens: Bucket) -> None:
        self.assert_account_exists(badge_address)
        self.users[badge_address].burn(tokens)

    def account_exists(self, badge_address: str) -> bool:
        return badge_address in self.users

    def assert_account_exists(self, badge_address: str) -> None:
        if not self.account_exists(badge_address):
            raise ResourceError("This badge is not affiliated with an account.")