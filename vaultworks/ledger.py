"""In-memory ledger of fungible and non-fungible resources, buckets, vaults and proofs."""

from __future__ import annotations

import copy
import random
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Hashable, Mapping, Optional, Union

DIVISIBILITY_NONE = 0
DIVISIBILITY_MAXIMUM = 18


class ResourceError(Exception):
    """A resource operation or a component rule was violated."""


class AuthorizationError(ResourceError):
    """The badge an operation requires was not presented."""


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise TypeError("amounts must be numbers, not booleans")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"not a decimal amount: {value!r}") from None
    else:
        raise TypeError(f"unsupported amount type: {type(value).__name__}")
    if not result.is_finite():
        raise ValueError(f"amount must be finite: {value!r}")
    return result


Badge = Union["Bucket", "Vault", "Proof"]


class ResourceManager:
    """Definition and supply of one resource, fungible or non-fungible."""

    def __init__(
        self,
        address: str,
        *,
        divisibility: int,
        metadata: Mapping[str, str],
        minter: Optional[str],
        non_fungible: bool,
    ) -> None:
        self.address = address
        self.divisibility = divisibility
        self.metadata = dict(metadata)
        self.minter = minter
        self.is_non_fungible = non_fungible
        self.total_supply = Decimal(0)
        self._data: dict[Hashable, Any] = {}

    def __repr__(self) -> str:
        kind = "non-fungible" if self.is_non_fungible else "fungible"
        return f"ResourceManager({self.address!r}, {kind})"

    def _authorize(self, badge: Optional[Badge]) -> None:
        if (
            self.minter is None
            or badge is None
            or badge.resource_address != self.minter
            or badge.amount <= 0
        ):
            raise AuthorizationError(f"not authorized to change resource {self.address}")

    def _check_divisibility(self, amount: Decimal) -> None:
        scaled = amount.scaleb(self.divisibility)
        if scaled != scaled.to_integral_value():
            raise ResourceError(
                f"amount {amount} exceeds the divisibility {self.divisibility} of {self.address}"
            )

    def _issue(self, amount: Any) -> Bucket:
        amount = _to_decimal(amount)
        if amount < 0:
            raise ResourceError("cannot mint a negative amount")
        self._check_divisibility(amount)
        bucket = Bucket(self)
        bucket._amount = amount
        self.total_supply += amount
        return bucket

    def mint(self, amount: Any, badge: Optional[Badge] = None) -> Bucket:
        """Create new fungible units; the minter badge must be presented."""
        if self.is_non_fungible:
            raise ResourceError(f"{self.address} is non-fungible; mint by id")
        self._authorize(badge)
        return self._issue(amount)

    def mint_non_fungible(self, nft_id: Hashable, data: Any, badge: Optional[Badge] = None) -> Bucket:
        """Create one non-fungible unit with the given id and data."""
        if not self.is_non_fungible:
            raise ResourceError(f"{self.address} is fungible")
        self._authorize(badge)
        if nft_id in self._data:
            raise ResourceError(f"non-fungible id {nft_id!r} already exists")
        self._data[nft_id] = copy.deepcopy(data)
        self.total_supply += 1
        bucket = Bucket(self)
        bucket._ids[nft_id] = None
        return bucket

    def burn(self, bucket: Bucket, badge: Optional[Badge] = None) -> None:
        """Destroy everything in the bucket."""
        self._authorize(badge)
        if bucket.resource_address != self.address:
            raise ResourceError(f"bucket holds {bucket.resource_address}, not {self.address}")
        for nft_id in bucket._ids:
            del self._data[nft_id]
        self.total_supply -= bucket.amount
        bucket._ids.clear()
        bucket._amount = Decimal(0)

    def get_non_fungible_data(self, nft_id: Hashable) -> Any:
        """Return a copy of the data of a non-fungible unit."""
        try:
            return copy.deepcopy(self._data[nft_id])
        except KeyError:
            raise ResourceError(f"no non-fungible with id {nft_id!r} in {self.address}") from None

    def update_non_fungible_data(self, nft_id: Hashable, data: Any, badge: Optional[Badge] = None) -> None:
        """Replace the data of a non-fungible unit."""
        self._authorize(badge)
        if nft_id not in self._data:
            raise ResourceError(f"no non-fungible with id {nft_id!r} in {self.address}")
        self._data[nft_id] = copy.deepcopy(data)


class Bucket:
    """A transient container holding some amount of one resource."""

    def __init__(self, manager: ResourceManager) -> None:
        self._manager = manager
        self._amount = Decimal(0)
        self._ids: dict[Hashable, None] = {}

    def __repr__(self) -> str:
        return f"Bucket({self.resource_address!r}, amount={self.amount})"

    @property
    def resource_address(self) -> str:
        return self._manager.address

    @property
    def amount(self) -> Decimal:
        if self._manager.is_non_fungible:
            return Decimal(len(self._ids))
        return self._amount

    def take(self, amount: Any) -> Bucket:
        """Move the given amount into a new bucket."""
        amount = _to_decimal(amount)
        if amount < 0:
            raise ResourceError("cannot take a negative amount")
        if amount > self.amount:
            raise ResourceError(f"insufficient balance: requested {amount}, available {self.amount}")
        self._manager._check_divisibility(amount)
        taken = Bucket(self._manager)
        if self._manager.is_non_fungible:
            for nft_id in list(self._ids)[: int(amount)]:
                del self._ids[nft_id]
                taken._ids[nft_id] = None
        else:
            self._amount -= amount
            taken._amount = amount
        return taken

    def take_all(self) -> Bucket:
        return self.take(self.amount)

    def put(self, other: Bucket) -> None:
        """Move everything from another bucket of the same resource into this one."""
        if other.resource_address != self.resource_address:
            raise ResourceError(
                f"cannot put {other.resource_address} into a bucket of {self.resource_address}"
            )
        if other is self:
            return
        self._amount += other._amount
        other._amount = Decimal(0)
        self._ids.update(other._ids)
        other._ids.clear()

    def is_empty(self) -> bool:
        return self.amount == 0

    def non_fungible_ids(self) -> tuple:
        if not self._manager.is_non_fungible:
            raise ResourceError(f"{self.resource_address} is fungible")
        return tuple(self._ids)

    def create_proof(self) -> Proof:
        return Proof._of(self)


class Vault:
    """A persistent container of one resource, owned by a component."""

    def __init__(self, manager: ResourceManager) -> None:
        self._bucket = Bucket(manager)

    @classmethod
    def with_bucket(cls, bucket: Bucket) -> Vault:
        vault = cls(bucket._manager)
        vault.put(bucket)
        return vault

    def __repr__(self) -> str:
        return f"Vault({self.resource_address!r}, amount={self.amount})"

    @property
    def resource_address(self) -> str:
        return self._bucket.resource_address

    @property
    def amount(self) -> Decimal:
        return self._bucket.amount

    def put(self, bucket: Bucket) -> None:
        self._bucket.put(bucket)

    def take(self, amount: Any) -> Bucket:
        return self._bucket.take(amount)

    def take_all(self) -> Bucket:
        return self._bucket.take_all()

    def is_empty(self) -> bool:
        return self._bucket.is_empty()

    def non_fungible_ids(self) -> tuple:
        return self._bucket.non_fungible_ids()

    def create_proof(self) -> Proof:
        return Proof._of(self._bucket)


@dataclass(frozen=True)
class Proof:
    """Evidence that the holder owns some amount of a resource."""

    resource_address: str
    amount: Decimal
    non_fungible_ids: tuple = ()

    @classmethod
    def _of(cls, bucket: Bucket) -> Proof:
        if bucket.is_empty():
            raise ResourceError("cannot create a proof of an empty container")
        return cls(bucket.resource_address, bucket.amount, tuple(bucket._ids))

    def non_fungible_id(self) -> Hashable:
        """The id of the single non-fungible this proof covers."""
        if len(self.non_fungible_ids) != 1:
            raise ResourceError("proof must cover exactly one non-fungible")
        return self.non_fungible_ids[0]


class Ledger:
    """Registry of resources, with epoch and random-id sources."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._managers: dict[str, ResourceManager] = {}
        self._rng = random.Random(seed)
        self.epoch = 0

    def _register(self, **kwargs: Any) -> ResourceManager:
        address = f"resource_{len(self._managers) + 1:04d}"
        manager = ResourceManager(address, **kwargs)
        self._managers[address] = manager
        return manager

    def new_fungible(
        self,
        initial_supply: Any = 0,
        divisibility: int = DIVISIBILITY_MAXIMUM,
        metadata: Optional[Mapping[str, str]] = None,
        minter: Optional[str] = None,
    ) -> Bucket:
        """Define a fungible resource and return a bucket with its initial supply."""
        if not DIVISIBILITY_NONE <= divisibility <= DIVISIBILITY_MAXIMUM:
            raise ValueError(f"divisibility must be between 0 and 18, got {divisibility}")
        manager = self._register(
            divisibility=divisibility,
            metadata=metadata or {},
            minter=minter,
            non_fungible=False,
        )
        return manager._issue(initial_supply)

    def new_non_fungible(
        self,
        metadata: Optional[Mapping[str, str]] = None,
        minter: Optional[str] = None,
    ) -> ResourceManager:
        """Define a non-fungible resource with no initial supply."""
        return self._register(
            divisibility=DIVISIBILITY_NONE,
            metadata=metadata or {},
            minter=minter,
            non_fungible=True,
        )

    def manager(self, address: str) -> ResourceManager:
        try:
            return self._managers[address]
        except KeyError:
            raise ResourceError(f"unknown resource {address}") from None

    def generate_uuid(self) -> int:
        return self._rng.getrandbits(128)

    def random_id(self) -> int:
        return self._rng.getrandbits(128)

    def advance_epoch(self, epochs: int = 1) -> int:
        if epochs < 0:
            raise ValueError("epochs cannot go backwards")
        self.epoch += epochs
        return self.epoch