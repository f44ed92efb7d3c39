# vaultworks

vaultworks is an in-memory ledger of fungible and non-fungible resources. Resources
are held in buckets and vaults, and proofs show that something is held. A handful
of components are built on the ledger.

- `vaultworks.ledger` holds the ledger itself.
  - `Ledger` defines resources with `new_fungible` and `new_non_fungible` and looks
    them up with `manager`. It also hands out random 128-bit ids with
    `generate_uuid` and `random_id`, and keeps an `epoch` counter that
    `advance_epoch` moves forward. Pass `Ledger(seed=...)` to get ids that repeat
    from run to run.
  - `ResourceManager` mints, burns and keeps non-fungible data. Each change needs
    the minter badge to be presented.
  - `Bucket`, `Vault` and `Proof` hold resources or show that they are held.
  - Errors are raised as `ResourceError`, or as its subclass `AuthorizationError`
    when a required badge is missing.
- `vaultworks.token_creator` has `TokenCreator` and `User`.
  - `TokenCreator.new_user` returns a badge for a new account.
  - Each account can create tokens, mint more of its own tokens when it presents
    its badge, and burn them.
- `vaultworks.token_sale` has `TokenSale`, a sale of a fixed supply of tokens.
  - Each purchase burns one sale ticket.
  - The price per token is fixed, and the amount spent per ticket is capped.
  - The admin badge mints tickets, starts the sale and withdraws the payments.
- `vaultworks.transit` has `Transit`, which sells ride tickets for dollars or euros
  and burns them when a ride is taken.
  - The American host badge withdraws the dollar revenue and the European host
    badge the euro revenue.
  - Each withdrawal also turns that host's rides on or off.
- `vaultworks.name_service` has `NameService` and `hash_name`.
  - `NameService` registers names ending in `.xrd` against a deposit of the native
    token and maps each name to an address.
  - Updating the address and renewing a name are paid for with fees, which the
    admin badge withdraws.
  - Unregistering a name burns its NFT and refunds the deposit.
- `vaultworks.utility_tokens` has `UtilityTokenFactory` and `ServiceStub`.
  - `UtilityTokenFactory` sells a utility token for the native token and mints new
    batches as its supply runs out.
  - `ServiceStub` takes 1 utility token for its simple service and 3 for its
    premium service. Once it holds more than 100 used tokens, it hands them back to
    the factory to be burned.

When a rule is broken, such as a wrong resource, too little payment or a missing
badge, the call raises `ResourceError` or `AuthorizationError`.

## Installation

```
pip install vaultworks
```

The package needs Python 3.10 or later and depends only on the standard library.

## Example

```python
from decimal import Decimal

from vaultworks.ledger import Ledger
from vaultworks.transit import Transit

ledger = Ledger()
dollars = ledger.new_fungible(1000)
euros = ledger.new_fungible(1000)

transit, american_badge, european_badge = Transit.create(
    ledger, Decimal(10), Decimal(1), dollars.resource_address, euros.resource_address
)

ticket, change = transit.buy_ticket(dollars.take(15))   # change holds 5
transit.ride(ticket, "American")
revenue = transit.withdraw_dollars(True, american_badge.create_proof())  # 10 dollars
```

## What it does not do

The ledger lives only in memory. Nothing is saved to disk, and there is no command
line, server or network interface. Accounts are plain Python objects, and the
buckets and badges they hold are passed in and out of calls directly.
`UtilityTokenFactory.show_bank` and `ServiceStub.show` return their figures as
dictionaries and write them to the standard `logging` module.

## Running the tests

```
pip install -e ".[test]"
pytest
```