from __future__ import annotations

"""Bank surface the keeper needs for mint and burn; provided by the host."""

from typing import Protocol, Sequence, runtime_checkable

from fiattokenfactory.types.records import Coin


@runtime_checkable
class BankKeeper(Protocol):
    def mint_coins(self, module: str, coins: Sequence[Coin]) -> None: ...

    def burn_coins(self, module: str, coins: Sequence[Coin]) -> None: ...

    def send_coins_from_module_to_account(
        self, module: str, address: str, coins: Sequence[Coin]
    ) -> None: ...

    def send_coins_from_account_to_module(
        self, address: str, module: str, coins: Sequence[Coin]
    ) -> None: ...


__all__ = ["BankKeeper"]
