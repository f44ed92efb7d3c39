"""A token sale where each purchase consumes one sale ticket."""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, localcontext
from typing import Optional

from vaultworks.ledger import (
    DIVISIBILITY_NONE,
    AuthorizationError,
    Badge,
    Bucket,
    Ledger,
    ResourceError,
    Vault,
)

_PRECISION = Decimal(1).scaleb(-18)


def _truncate(value: Decimal) -> Decimal:
    return value.quantize(_PRECISION, rounding=ROUND_DOWN)


class TokenSale:
    """Sells a fixed supply of tokens at a fixed price, capped per ticket."""

    def __init__(
        self,
        *,
        ledger: Ledger,
        admin_badge: str,
        tokens_for_sale: Vault,
        payment_vault: Vault,
        ticket_minter: Vault,
        sale_tickets: str,
        price_per_token: Decimal,
        max_personal_allocation: Decimal,
    ) -> None:
        self._ledger = ledger
        self.admin_badge = admin_badge
        self._tokens_for_sale = tokens_for_sale
        self._payment_vault = payment_vault
        self._ticket_minter = ticket_minter
        self.sale_tickets = sale_tickets
        self.price_per_token = price_per_token
        self.max_personal_allocation = max_personal_allocation
        self.sale_started = False

    @classmethod
    def create(cls, ledger: Ledger, tokens_for_sale: Bucket, payment_token: str, price_per_token, max_personal_allocation):
        """Set up a sale; returns the sale and its admin badge."""
        price = Decimal(str(price_per_token))
        if price <= 0:
            raise ValueError("price_per_token must be positive")
        admin_badge = ledger.new_fungible(1, DIVISIBILITY_NONE, {"name": "admin_badge"})
        minter = ledger.new_fungible(1, DIVISIBILITY_NONE, {"name": "sale_ticket_minter"})
        tickets = ledger.new_fungible(
            0,
            DIVISIBILITY_NONE,
            {"name": "Sale Ticket Token", "symbol": "STT"},
            minter=minter.resource_address,
        )
        sale = cls(
            ledger=ledger,
            admin_badge=admin_badge.resource_address,
            tokens_for_sale=Vault.with_bucket(tokens_for_sale),
            payment_vault=Vault(ledger.manager(payment_token)),
            ticket_minter=Vault.with_bucket(minter),
            sale_tickets=tickets.resource_address,
            price_per_token=price,
            max_personal_allocation=Decimal(str(max_personal_allocation)),
        )
        return sale, admin_badge

    @property
    def tokens_left(self) -> Decimal:
        return self._tokens_for_sale.amount

    def _require_admin(self, admin: Optional[Badge]) -> None:
        if admin is None or admin.resource_address != self.admin_badge or admin.amount <= 0:
            raise AuthorizationError("this operation requires the admin badge")

    def create_tickets(self, amount: int, admin: Optional[Badge]) -> Bucket:
        self._require_admin(admin)
        return self._ledger.manager(self.sale_tickets).mint(amount, self._ticket_minter)

    def start_sale(self, admin: Optional[Badge]) -> None:
        self._require_admin(admin)
        self.sale_started = True

    def withdraw_payments(self, admin: Optional[Badge]) -> Bucket:
        self._require_admin(admin)
        return self._payment_vault.take_all()

    def buy_tokens(self, payment: Bucket, ticket: Bucket) -> tuple[Bucket, Bucket]:
        """Burn one ticket and buy as many tokens as the payment allows; returns tokens and change."""
        if not self.sale_started:
            raise ResourceError("The sale has not started yet")
        if not self.tokens_left > 0:
            raise ResourceError("The sale has ended already")
        if ticket.amount != 1:
            raise ResourceError("You need to send exactly one ticket in order to participate in the sale")
        if ticket.resource_address != self.sale_tickets:
            raise ResourceError("The ticket is not a sale ticket")
        if payment.resource_address != self._payment_vault.resource_address:
            raise ResourceError("The payment is not made in the accepted token")

        self._ledger.manager(self.sale_tickets).burn(ticket, self._ticket_minter)

        with localcontext() as ctx:
            ctx.prec = 80
            payment_amount = min(payment.amount, self.max_personal_allocation)
            buy_amount = _truncate(payment_amount / self.price_per_token)
            actual_buy_amount = min(self.tokens_left, buy_amount)
            actual_payment_amount = _truncate(actual_buy_amount * self.price_per_token)

        self._payment_vault.put(payment.take(actual_payment_amount))
        bought = self._tokens_for_sale.take(actual_buy_amount)
        return bought, payment