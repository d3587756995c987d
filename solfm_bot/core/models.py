from __future__ import annotations

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Union

from solfm_bot.constants import SHORT_ADDRESS_LEN, SOL_TOKEN, SUCCESSFUL_STATUS, UNKNOWN_SYMBOL


class InstructionAction(str, Enum):
    TRANSFER = "transfer"
    TRANSFER_CHECKED = "transferChecked"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "InstructionAction":
        for action in cls:
            if action.value == value:
                return action
        return cls.UNKNOWN

    @property
    def is_transfer(self) -> bool:
        return self in (InstructionAction.TRANSFER, InstructionAction.TRANSFER_CHECKED)


class ActionKind(str, Enum):
    NONE = "NONE"
    SPEND = "SPEND"
    RECEIVE = "RECEIVE"
    EXCHANGE = "EXCHANGE"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class Instruction:
    action: InstructionAction
    status: str
    source: str
    token: str
    amount: int
    timestamp: int
    destination: str | None = None
    source_association: str | None = None
    destination_association: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Instruction":
        return cls(
            action=InstructionAction.parse(data.get("action")),
            status=str(data.get("status", "")),
            source=str(data.get("source", "")),
            token=data.get("token") or "",
            amount=int(data.get("amount", 0)),
            timestamp=int(data.get("timestamp", 0)),
            destination=data.get("destination"),
            source_association=data.get("sourceAssociation"),
            destination_association=data.get("destinationAssociation"),
        )


@dataclass(frozen=True)
class Transaction:
    transaction_hash: str
    instructions: tuple[Instruction, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        return cls(
            transaction_hash=str(data["transactionHash"]),
            instructions=tuple(Instruction.from_dict(item) for item in data.get("data") or []),
        )

    def is_successful(self) -> bool:
        return all(ins.status == SUCCESSFUL_STATUS for ins in self.instructions)


@dataclass
class Token:
    """Display metadata for a mint, as stored in the token cache file."""
    name: str
    symbol: str
    address: str
    decimals: int
    logo_uri: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Token":
        return cls(
            name=data.get("name", ""),
            symbol=data.get("symbol", ""),
            address=data.get("address", ""),
            decimals=int(data.get("decimals", 0)),
            logo_uri=data.get("logo_uri", "") or "",
        )

    @classmethod
    def placeholder(cls, address: str) -> "Token":
        return cls(
            name=address[:SHORT_ADDRESS_LEN],
            symbol=UNKNOWN_SYMBOL,
            address=address,
            decimals=0,
        )


@dataclass(frozen=True)
class TokenAmount:
    address: str
    amount: int
    symbol: str = UNKNOWN_SYMBOL
    decimals: int = 0

    @classmethod
    def of(cls, token: Token, amount: int) -> "TokenAmount":
        return cls(address=token.address, amount=amount, symbol=token.symbol, decimals=token.decimals)

    def is_sol(self) -> bool:
        return self.address == SOL_TOKEN

    def short_address(self) -> str:
        return self.address[:SHORT_ADDRESS_LEN]

    def ui_amount(self) -> Decimal:
        return Decimal(self.amount).scaleb(-self.decimals)

    def describe(self) -> str:
        value = self.ui_amount().normalize()
        return f"{value:f} {self.symbol or self.short_address()}"


# ============================================
# USER ACTION CONTENT VARIANTS
# ============================================

@dataclass(frozen=True)
class NoChange:
    kind = ActionKind.NONE

    def describe(self) -> str:
        return "None"


@dataclass(frozen=True)
class Spend:
    token: TokenAmount
    kind = ActionKind.SPEND

    def describe(self) -> str:
        return f"Spend {self.token.describe()}"


@dataclass(frozen=True)
class Receive:
    token: TokenAmount
    kind = ActionKind.RECEIVE

    def describe(self) -> str:
        return f"Receive {self.token.describe()}"


@dataclass(frozen=True)
class Exchange:
    spend: TokenAmount
    receive: TokenAmount
    # Reserved for liquidity-pool attribution; never populated yet
    involved_amm: frozenset[str] = field(default_factory=frozenset)
    kind = ActionKind.EXCHANGE

    def describe(self) -> str:
        return f"Exchange {self.spend.describe()} with {self.receive.describe()}"


@dataclass(frozen=True)
class Unknown:
    kind = ActionKind.UNKNOWN

    def describe(self) -> str:
        return "Unknown"


ActionContent = Union[NoChange, Spend, Receive, Exchange, Unknown]


@dataclass(frozen=True)
class ActionMetadata:
    transaction_hash: str
    # None when no instruction in the transaction carried a timestamp
    timestamp: int | None = None


@dataclass(frozen=True)
class UserAction:
    metadata: ActionMetadata
    content: ActionContent

    @property
    def kind(self) -> ActionKind:
        return self.content.kind


@dataclass
class QuizEntry:
    """Running per-token totals for the quiz report."""
    address: str
    sol_delta: int = 0
    other_delta: int = 0
    last_timestamp: int = 0

    def has_activity(self) -> bool:
        return bool(self.sol_delta or self.other_delta or self.last_timestamp)
