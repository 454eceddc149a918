import hashlib
import logging
import sqlite3
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional

from . import config
from .errors import (
    InsufficientBalance,
    InsufficientPoolBalance,
    InvalidAmount,
    InvalidRecipient,
    InvalidSender,
    InvariantViolation,
    PoolExhausted,
)
from .models import EventType, LedgerEvent, LedgerState

logger = logging.getLogger("Ledger")

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def derive_ledger_address(owner: str, name: str = config.TOKEN_NAME) -> str:
    """Deterministic ledger address for a deploying owner."""
    digest = hashlib.sha256(f"{owner}:{name}".encode()).hexdigest()
    return "0x" + digest[-40:]


def normalize_account(account) -> str:
    """Strip whitespace; hex addresses compare case-insensitively."""
    if not isinstance(account, str) or not account.strip():
        raise InvalidRecipient(f"Invalid account: {account!r}")
    account = account.strip()
    if account.startswith(("0x", "0X")):
        account = "0x" + account[2:].lower()
    return account


def require_amount(amount) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmount(f"Amount must be greater than 0. Got {amount!r}")
    return amount


class Ledger:
    """
    Token Ledger.

    Principles:
    1. Unit-based (all amounts are whole integer units)
    2. Single source of truth (balances, total supply, available pool)
    3. Transactional (every public operation commits fully or rolls back fully)

    The pool and the ledger's own balance entry are tracked independently;
    they agree under normal operation and `LedgerState.pool_drift` exposes any
    difference.

    Nested calls to `atomic()` run inside SQLite savepoints, so Faucet, Wager
    Engine and Admin Surface can compose primitives into one logical step.
    """

    def __init__(
        self,
        db_path: Optional[str] = None,
        owner: Optional[str] = None,
        clock: Optional[Callable[[], float]] = None,
        address: Optional[str] = None,
        initial_supply: int = config.INITIAL_SUPPLY,
        strict_invariants: bool = config.STRICT_INVARIANTS,
    ):
        if db_path is None:
            db_path = config.DB_PATH

        self.db_path = str(db_path)
        self.clock = clock or time.time
        self.strict_invariants = strict_invariants
        self._lock = threading.RLock()
        self._depth = 0
        self._con = self._connect()
        self._init_db(owner, address, require_amount(initial_supply))

        state = self.get_state()
        self.address = state.address
        self.owner = state.owner
        self.name = state.name
        self.symbol = state.symbol
        logger.info(f"Ledger {self.address} ready at {self.db_path} (supply {state.total_supply}, pool {state.available_pool})")

    def _connect(self) -> sqlite3.Connection:
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        con = sqlite3.connect(self.db_path, isolation_level=None, check_same_thread=False)
        con.row_factory = sqlite3.Row
        return con

    def _init_db(self, owner: Optional[str], address: Optional[str], initial_supply: int):
        """Create schema and run genesis once."""
        with open(SCHEMA_PATH, "r") as f:
            schema_script = f.read()

        with self._lock:
            self._con.executescript(schema_script)

        with self.atomic() as con:
            row = con.execute("SELECT owner, address FROM ledger_state WHERE id = 1").fetchone()
            if row is not None:
                if owner and normalize_account(owner) != row["owner"]:
                    logger.warning(f"Ledger already owned by {row['owner']}; ignoring owner {owner}")
                return

            owner = normalize_account(owner or config.DEFAULT_OWNER)
            address = normalize_account(address or config.LEDGER_ADDRESS or derive_ledger_address(owner))
            if address in (owner, config.NULL_ADDRESS):
                raise InvalidRecipient(f"Ledger address {address} collides with a reserved account")

            con.execute("""
                INSERT INTO ledger_state (id, address, owner, name, symbol, total_supply, available_pool, nonce, created_at)
                VALUES (1, ?, ?, ?, ?, ?, ?, 0, ?)
            """, (address, owner, config.TOKEN_NAME, config.TOKEN_SYMBOL, initial_supply, initial_supply, self.now()))
            self._set_balance(con, address, initial_supply)
            self._record_event(con, EventType.GENESIS, config.NULL_ADDRESS, address, initial_supply)
            logger.info(f"Genesis: minted {initial_supply} {config.TOKEN_SYMBOL} to {address} (owner {owner})")

    def close(self):
        with self._lock:
            self._con.close()

    def now(self) -> int:
        """Current ledger time in whole seconds."""
        return int(self.clock())

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def atomic(self) -> Iterator[sqlite3.Connection]:
        """
        Run a block as one indivisible step.

        The outermost block is a transaction (invariants are verified before
        COMMIT when strict mode is on); inner blocks are savepoints.
        """
        with self._lock:
            if self._depth:
                savepoint = f"sp_{self._depth}"
                self._con.execute(f"SAVEPOINT {savepoint}")
                self._depth += 1
                try:
                    yield self._con
                except BaseException:
                    self._con.execute(f"ROLLBACK TO {savepoint}")
                    self._con.execute(f"RELEASE {savepoint}")
                    raise
                else:
                    self._con.execute(f"RELEASE {savepoint}")
                finally:
                    self._depth -= 1
                return

            self._con.execute("BEGIN IMMEDIATE")
            self._depth = 1
            try:
                yield self._con
                if self.strict_invariants:
                    self._assert_invariants(self._con)
            except BaseException:
                self._con.execute("ROLLBACK")
                raise
            else:
                self._con.execute("COMMIT")
            finally:
                self._depth = 0

    def _assert_invariants(self, con: sqlite3.Connection):
        row = con.execute("SELECT address, total_supply, available_pool FROM ledger_state WHERE id = 1").fetchone()
        if row is None:
            raise InvariantViolation("Ledger state missing!")

        total_supply = row["total_supply"]
        pool = row["available_pool"]
        held = con.execute("SELECT COALESCE(SUM(amount), 0) FROM balances").fetchone()[0]
        ledger_balance = self._balance(con, row["address"])

        if held != total_supply:
            raise InvariantViolation(f"Sum of balances {held} != total supply {total_supply}")
        if not (0 <= pool <= total_supply):
            raise InvariantViolation(f"Available pool {pool} outside [0, {total_supply}]")
        if ledger_balance != pool:
            raise InvariantViolation(f"Ledger balance {ledger_balance} != available pool {pool}")

    def check_invariants(self) -> LedgerState:
        """Raise InvariantViolation if supply and balances disagree."""
        with self._lock:
            self._assert_invariants(self._con)
            return self.get_state()

    # ------------------------------------------------------------------
    # Row helpers
    # ------------------------------------------------------------------

    def _state_row(self, con: sqlite3.Connection) -> sqlite3.Row:
        row = con.execute("SELECT * FROM ledger_state WHERE id = 1").fetchone()
        if row is None:
            raise InvariantViolation("Ledger state missing!")
        return row

    def _balance(self, con: sqlite3.Connection, account: str) -> int:
        row = con.execute("SELECT amount FROM balances WHERE account = ?", (account,)).fetchone()
        return row["amount"] if row else 0

    def _set_balance(self, con: sqlite3.Connection, account: str, amount: int):
        con.execute("""
            INSERT INTO balances (account, amount) VALUES (?, ?)
            ON CONFLICT(account) DO UPDATE SET amount = excluded.amount
        """, (account, amount))

    def _record_event(self, con, event_type: EventType, sender: str, recipient: str, amount: int, details: Optional[str] = None):
        con.execute("""
            INSERT INTO events (timestamp, event_type, sender, recipient, amount, details)
            VALUES (?, ?, ?, ?, ?, ?)
        """, (self.now(), event_type.value, sender, recipient, amount, details))

    def _require_external(self, account: str) -> str:
        account = normalize_account(account)
        if account == config.NULL_ADDRESS:
            raise InvalidRecipient("Cannot transfer to zero address", account=account)
        if account == self.address:
            raise InvalidRecipient("Cannot transfer to contract address", account=account)
        return account

    def _require_holder(self, account: str) -> str:
        account = normalize_account(account)
        if account == config.NULL_ADDRESS:
            raise InvalidSender("Cannot transfer from zero address", account=account)
        if account == self.address:
            raise InvalidSender("Cannot transfer from contract address", account=account)
        return account

        return account

    # ------------------------------------------------------------------
    # Mutation primitives
    # ------------------------------------------------------------------

    def credit(self, account: str, amount: int) -> int:
        """Increase a balance. Only supply-neutral when paired with a debit."""
        account = normalize_account(account)
        amount = require_amount(amount)
        with self.atomic() as con:
            new_balance = self._balance(con, account) + amount
            self._set_balance(con, account, new_balance)
            return new_balance

    def debit(self, account: str, amount: int) -> int:
        """Decrease a balance. Only supply-neutral when paired with a credit."""
        account = normalize_account(account)
        amount = require_amount(amount)
        with self.atomic() as con:
            balance = self._balance(con, account)
            if balance < amount:
                raise InsufficientBalance(
                    f"Insufficient balance: {account} holds {balance}, needs {amount}",
                    account=account, balance=balance, required=amount,
                )
            self._set_balance(con, account, balance - amount)
            return balance - amount

    def move_from_pool(self, account: str, amount: int, event_type: EventType = EventType.TRANSFER, details: Optional[str] = None) -> int:
        """Distribute `amount` from the pool to `account`. Returns the new balance."""
        account = self._require_external(account)
        amount = require_amount(amount)
        with self.atomic() as con:
            pool = self._state_row(con)["available_pool"]
            if pool < amount:
                raise PoolExhausted(
                    f"Insufficient tokens available for distribution: pool {pool}, requested {amount}",
                    available=pool, requested=amount,
                )
            self.debit(self.address, amount)
            new_balance = self.credit(account, amount)
            con.execute("UPDATE ledger_state SET available_pool = available_pool - ? WHERE id = 1", (amount,))
            self._record_event(con, event_type, self.address, account, amount, details)

        logger.debug(f"{event_type.value}: pool -> {account} {amount}")
        return new_balance

    def return_to_pool(self, account: str, amount: int, event_type: EventType = EventType.TRANSFER, details: Optional[str] = None) -> int:
        """Take `amount` from `account` back into the pool. Returns the new balance."""
        account = self._require_external(account)
        amount = require_amount(amount)
        with self.atomic() as con:
            row = self._state_row(con)
            if row["available_pool"] + amount > row["total_supply"]:
                raise InvariantViolation(
                    f"Pool {row['available_pool']} + {amount} would exceed total supply {row['total_supply']}"
                )
            new_balance = self.debit(account, amount)
            self.credit(self.address, amount)
            con.execute("UPDATE ledger_state SET available_pool = available_pool + ? WHERE id = 1", (amount,))
            self._record_event(con, event_type, account, self.address, amount, details)

        logger.debug(f"{event_type.value}: {account} -> pool {amount}")
        return new_balance

    def burn(self, amount: int, details: Optional[str] = None) -> LedgerState:
        """Destroy `amount` from supply, pool and the ledger's own balance."""
        amount = require_amount(amount)
        with self.atomic() as con:
            row = self._state_row(con)
            ledger_balance = self._balance(con, self.address)
            if amount > min(row["total_supply"], row["available_pool"], ledger_balance):
                raise InsufficientPoolBalance(
                    f"Insufficient balance in contract to burn {amount}",
                    total_supply=row["total_supply"],
                    available_pool=row["available_pool"],
                    ledger_balance=ledger_balance,
                )
            self._set_balance(con, self.address, ledger_balance - amount)
            con.execute("""
                UPDATE ledger_state
                SET total_supply = total_supply - ?,
                    available_pool = available_pool - ?
                WHERE id = 1
            """, (amount, amount))
            self._record_event(con, EventType.BURN, self.address, config.NULL_ADDRESS, amount, details)

        state = self.get_state()
        logger.warning(f"Burned {amount} {self.symbol}: supply {state.total_supply}, pool {state.available_pool}")
        return state

    def transfer(self, sender: str, recipient: str, amount: int) -> int:
        """Move funds between two user accounts. Returns the sender's new balance."""
        sender = self._require_holder(sender)
        recipient = self._require_external(recipient)
        amount = require_amount(amount)
        with self.atomic() as con:
            sender_balance = self.debit(sender, amount)
            self.credit(recipient, amount)
            self._record_event(con, EventType.TRANSFER, sender, recipient, amount)

        logger.info(f"Transfer {sender} -> {recipient}: {amount}")
        return sender_balance

    def next_nonce(self) -> int:
        """Advance and return the per-call nonce (rolled back with its transaction)."""
        with self.atomic() as con:
            con.execute("UPDATE ledger_state SET nonce = nonce + 1 WHERE id = 1")
            return self._state_row(con)["nonce"]

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def balance_of(self, account: str) -> int:
        account = normalize_account(account)
        with self._lock:
            return self._balance(self._con, account)

    def total_supply(self) -> int:
        with self._lock:
            return self._state_row(self._con)["total_supply"]

    def available_pool(self) -> int:
        with self._lock:
            return self._state_row(self._con)["available_pool"]

    def get_state(self) -> LedgerState:
        with self._lock:
            row = self._state_row(self._con)
            return LedgerState(
                address=row["address"],
                owner=row["owner"],
                name=row["name"],
                symbol=row["symbol"],
                total_supply=row["total_supply"],
                available_pool=row["available_pool"],
                ledger_balance=self._balance(self._con, row["address"]),
                created_at=row["created_at"],
            )

    def holders(self) -> Dict[str, int]:
        """All balance entries, zero balances included."""
        with self._lock:
            rows = self._con.execute("SELECT account, amount FROM balances ORDER BY account").fetchall()
            return {r["account"]: r["amount"] for r in rows}

    def events(self, account: Optional[str] = None, event_type: Optional[EventType] = None, limit: Optional[int] = None) -> List[LedgerEvent]:
        """Event history, newest first."""
        query = "SELECT * FROM events"
        clauses, params = [], []
        if account is not None:
            account = normalize_account(account)
            clauses.append("(sender = ? OR recipient = ?)")
            params.extend([account, account])
        if event_type is not None:
            clauses.append("event_type = ?")
            params.append(EventType(event_type).value)
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY id DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(int(limit))

        with self._lock:
            rows = self._con.execute(query, params).fetchall()
            return [LedgerEvent(**dict(r)) for r in rows]
