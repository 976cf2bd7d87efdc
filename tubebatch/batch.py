from dataclasses import dataclass, field
from enum import Enum

from tubebatch.config import T, E
from tubebatch.quota import is_quota_exhausted


class BatchState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    ITERATING = "iterating"
    ACTING = "acting"
    RECORDING = "recording"
    DONE = "done"
    STOPPED_EARLY = "stopped_early"


class RowSkipped(Exception):
    """A row-local condition that makes the row unprocessable this run."""


@dataclass
class BatchResult:
    total: int = 0
    succeeded: list = field(default_factory=list)
    skipped: list = field(default_factory=list)
    failed: list = field(default_factory=list)
    recorded: list = field(default_factory=list)
    state: BatchState = BatchState.IDLE

    @property
    def stopped_early(self):
        return self.state is BatchState.STOPPED_EARLY


class BatchDriver:
    """
    Runs one action per pending row, strictly in order.

    load_rows() returns the pending rows; an exception there is fatal and propagates.
    act(row) performs the side effect: RowSkipped skips the row, a quota-exhaustion
    error stops the batch without recording, any other exception fails only that row.
    record(row) persists the progress marker and returns True on success.
    """

    def __init__(self, load_rows, act, record, translator, describe=None):
        self.load_rows = load_rows
        self.act = act
        self.record = record
        self.translator = translator
        self.describe = describe or (lambda row: f"#{row.position + 1}")
        self.state = BatchState.IDLE

    def run(self):
        result = BatchResult()
        self.state = BatchState.LOADING
        rows = self.load_rows()
        result.total = len(rows)
        print(self.translator.get('batch.pending_rows', T_INFO=T.INFO, E_INFO=E.INFO, count=len(rows)))

        for i, row in enumerate(rows):
            self.state = BatchState.ITERATING
            label = self.describe(row)
            print(self.translator.get('batch.row_header', T_HEADER=T.HEADER, i=i + 1, total=len(rows), label=label))

            self.state = BatchState.ACTING
            try:
                self.act(row)
            except RowSkipped as e:
                print(self.translator.get('batch.row_skipped', T_WARN=T.WARN, E_WARN=E.WARN, label=label, reason=e))
                result.skipped.append(row)
                continue
            except Exception as e:
                if is_quota_exhausted(e):
                    print(self.translator.get('batch.quota_exhausted', T_FAIL=T.FAIL, E_FAIL=E.FAIL, label=label, e=e))
                    result.failed.append(row)
                    self.state = BatchState.STOPPED_EARLY
                    break
                print(self.translator.get('batch.row_failed', T_FAIL=T.FAIL, E_FAIL=E.FAIL, label=label, e=e))
                result.failed.append(row)
                continue

            result.succeeded.append(row)
            self.state = BatchState.RECORDING
            if self.record(row):
                result.recorded.append(row)

        if self.state is not BatchState.STOPPED_EARLY:
            self.state = BatchState.DONE
        result.state = self.state
        print(self.translator.get('batch.summary', T_OK=T.OK, E_REPORT=E.REPORT, succeeded=len(result.succeeded),
                                  skipped=len(result.skipped), failed=len(result.failed), total=result.total))
        return result
