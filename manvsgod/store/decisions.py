"""
Decision Store Abstractions

Persists the per-scenario choices players make (the collective memory the
game shows back as statistics).

Architecture Decision:
- Google Sheets is the shared store when credentials are configured
- SQLite is the local fallback (and the only store without credentials)
- Memory store for testing
"""

import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from manvsgod.core.config import ManVsGodConfig
from manvsgod.core.logging.categories import LogCategory
from manvsgod.core.time import utc_now_iso


logger = logging.getLogger(__name__)

SHEETS_API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"
DEFAULT_RANGE = "Decisions!A:E"


class DecisionStoreError(Exception):
    """Raised when a store cannot read or write decisions"""


# ============================================
# Models
# ============================================

class ChoiceProbabilities(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    choice_a: float = Field(default=50.0, alias="choiceA")
    choice_b: float = Field(default=50.0, alias="choiceB")


class ScenarioDecision(BaseModel):
    """One player's choice for one scenario (sheet row ``[timestamp, id, choice, a, b]``)"""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: str = Field(default_factory=utc_now_iso)
    scenario_id: int = Field(alias="scenarioId")
    choice: int = Field(ge=0, le=1, description="0 = choice A, 1 = choice B")
    probabilities: ChoiceProbabilities = Field(default_factory=ChoiceProbabilities)

    def to_row(self) -> list:
        return [
            self.timestamp,
            self.scenario_id,
            self.choice,
            self.probabilities.choice_a,
            self.probabilities.choice_b,
        ]

    @classmethod
    def from_row(cls, row: Sequence) -> "ScenarioDecision":
        """
        Parse a sheet/table row.

        Raises:
            ValueError: row is too short or holds non-numeric values
        """
        if len(row) < 3:
            raise ValueError(f"expected at least 3 columns, got {len(row)}")
        probabilities = ChoiceProbabilities()
        if len(row) >= 5:
            probabilities = ChoiceProbabilities(choice_a=float(row[3]), choice_b=float(row[4]))
        return cls(
            timestamp=str(row[0]),
            scenario_id=int(row[1]),
            choice=int(row[2]),
            probabilities=probabilities,
        )


def parse_rows(rows: Sequence[Sequence], source: str) -> List[ScenarioDecision]:
    """Parse rows, skipping malformed ones (header rows included) with a warning"""
    decisions = []
    for index, row in enumerate(rows):
        try:
            decisions.append(ScenarioDecision.from_row(row))
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning(
                f"Skipping malformed decision row {index} from {source}: {e}",
                extra={"category": LogCategory.VALIDATION, "details": {"row": list(row)}},
            )
    return decisions


# ============================================
# Store interface
# ============================================

class DecisionStore(ABC):
    """
    Abstract Decision Store Interface

    Implementations:
    - MemoryDecisionStore: In-memory (testing)
    - SQLiteDecisionStore: Local file (fallback)
    - SheetsDecisionStore: Google Sheets (shared)
    - FallbackDecisionStore: primary with local fallback
    """

    name = "abstract"

    @abstractmethod
    def append(self, decision: ScenarioDecision) -> None:
        """Persist one decision"""
        pass

    @abstractmethod
    def read_all(self) -> List[ScenarioDecision]:
        """All decisions in insertion order"""
        pass


class MemoryDecisionStore(DecisionStore):
    """
    In-Memory Decision Store

    Limitations:
    - Data lost on restart
    - No cross-process sharing
    """

    name = "memory"

    def __init__(self, decisions: Optional[List[ScenarioDecision]] = None):
        self._decisions: List[ScenarioDecision] = list(decisions or [])
        self._lock = threading.Lock()

    def append(self, decision: ScenarioDecision) -> None:
        with self._lock:
            self._decisions.append(decision)

    def read_all(self) -> List[ScenarioDecision]:
        with self._lock:
            return list(self._decisions)


class SQLiteDecisionStore(DecisionStore):
    """
    SQLite Decision Store

    Schema: a single ``decisions`` table mirroring the sheet columns.
    """

    name = "sqlite"

    def __init__(self, db_path):
        self.db_path = Path(db_path)
        self._ensure_schema()

    def _ensure_schema(self):
        """Ensure table exists (idempotent)"""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS decisions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    scenario_id INTEGER NOT NULL,
                    choice INTEGER NOT NULL,
                    choice_a REAL NOT NULL,
                    choice_b REAL NOT NULL
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_decisions_scenario
                ON decisions(scenario_id)
            """)
            conn.commit()

    def append(self, decision: ScenarioDecision) -> None:
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO decisions (timestamp, scenario_id, choice, choice_a, choice_b)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    tuple(decision.to_row()),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise DecisionStoreError(f"Failed to write decision to {self.db_path}: {e}") from e

    def read_all(self) -> List[ScenarioDecision]:
        try:
            with sqlite3.connect(self.db_path) as conn:
                rows = conn.execute(
                    "SELECT timestamp, scenario_id, choice, choice_a, choice_b "
                    "FROM decisions ORDER BY id ASC"
                ).fetchall()
        except sqlite3.Error as e:
            raise DecisionStoreError(f"Failed to read decisions from {self.db_path}: {e}") from e
        return parse_rows(rows, source="sqlite")


class SheetsDecisionStore(DecisionStore):
    """
    Google Sheets Decision Store (Sheets API v4, API-key auth)

    Args:
        spreadsheet_id: Target spreadsheet
        api_key: Google API key
        client: Optional httpx.Client (tests inject a MockTransport client)
        range: A1 range holding the decision rows
    """

    name = "google_sheets"

    def __init__(
        self,
        spreadsheet_id: str,
        api_key: str,
        client: Optional[httpx.Client] = None,
        range: str = DEFAULT_RANGE,
        timeout: float = 10.0,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.api_key = api_key
        self.range = range
        self._client = client or httpx.Client(timeout=timeout)

    @property
    def values_url(self) -> str:
        return f"{SHEETS_API_BASE}/{self.spreadsheet_id}/values/{self.range}"

    def append(self, decision: ScenarioDecision) -> None:
        try:
            response = self._client.post(
                f"{self.values_url}:append",
                params={"valueInputOption": "RAW", "key": self.api_key},
                json={"values": [decision.to_row()]},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise DecisionStoreError(f"Error submitting decision to Google Sheets: {e}") from e

        logger.info(
            f"Decision submitted to Google Sheets for scenario {decision.scenario_id}",
            extra={"category": LogCategory.GOOGLE_SHEETS},
        )

    def read_all(self) -> List[ScenarioDecision]:
        try:
            response = self._client.get(self.values_url, params={"key": self.api_key})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise DecisionStoreError(f"Error fetching decisions from Google Sheets: {e}") from e

        return parse_rows(payload.get("values") or [], source="google_sheets")

    def close(self) -> None:
        self._client.close()


class FallbackDecisionStore(DecisionStore):
    """Primary store that degrades to a local store on DecisionStoreError"""

    name = "fallback"

    def __init__(self, primary: DecisionStore, fallback: DecisionStore):
        self.primary = primary
        self.fallback = fallback

    def append(self, decision: ScenarioDecision) -> None:
        try:
            self.primary.append(decision)
        except DecisionStoreError as e:
            logger.error(
                f"{e}; saving decision to {self.fallback.name} store",
                extra={"category": LogCategory.GOOGLE_SHEETS, "details": {"scenario_id": decision.scenario_id}},
            )
            self.fallback.append(decision)

    def read_all(self) -> List[ScenarioDecision]:
        try:
            return self.primary.read_all()
        except DecisionStoreError as e:
            logger.error(
                f"{e}; reading decisions from {self.fallback.name} store",
                extra={"category": LogCategory.GOOGLE_SHEETS},
            )
            return self.fallback.read_all()


def build_decision_store(config: ManVsGodConfig, client: Optional[httpx.Client] = None) -> DecisionStore:
    """
    Build the decision store for a configuration.

    Without spreadsheet credentials the local SQLite store is used on its own.
    """
    local = SQLiteDecisionStore(config.local_store_path)
    if not config.has_sheets_credentials:
        logger.warning(
            "Google Sheets API credentials not configured, using local storage fallback",
            extra={"category": LogCategory.GOOGLE_SHEETS, "details": {"path": str(config.local_store_path)}},
        )
        return local

    sheets = SheetsDecisionStore(
        config.google_sheet_id,
        config.google_sheets_api_key,
        client=client,
        range=config.sheets_range,
        timeout=config.sheets_timeout_seconds,
    )
    return FallbackDecisionStore(sheets, local)
