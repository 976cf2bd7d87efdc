from tubebatch.config import T, E, DONE_VALUE
from tubebatch.dataset import read_dataset, write_dataset


def normalize_marker(value):
    if value is None:
        return ""
    return str(value).strip().lower()

def is_done(value):
    """A progress marker counts as done only when it normalizes to 'yes'."""
    return normalize_marker(value) == "yes"

def filter_unprocessed(rows, marker_column):
    """Returns the rows whose marker is not done, in their original order."""
    return [row for row in rows if not is_done(row.get(marker_column))]


def match_by_key(dataset, key, key_of):
    """
    Returns the position of the first row whose key equals `key` after trimming,
    or None. `key_of` extracts the key from a Row.
    """
    wanted = str(key).strip()
    for row in dataset.records():
        if str(key_of(row)).strip() == wanted:
            return row.position
    return None

def match_by_position(dataset, position):
    """
    Returns `position` when it addresses a data row of the freshly loaded dataset.
    Correct only if the file was not reordered since the position was taken.
    """
    if 0 <= position < len(dataset.rows):
        return position
    return None


class ProgressRecorder:
    """
    Marks rows done in the durable store, rewriting the whole file after each mark.
    With dry_run the row is still located but the file is never written.
    """

    def __init__(self, path, marker_column, translator, done_value=DONE_VALUE, dry_run=False):
        self.path = path
        self.marker_column = marker_column
        self.translator = translator
        self.done_value = done_value
        self.dry_run = dry_run

    def record_by_key(self, key, key_of):
        label = str(key).strip()
        return self._record(lambda dataset: match_by_key(dataset, label, key_of), label)

    def record_by_position(self, position):
        return self._record(lambda dataset: match_by_position(dataset, position), f"#{position + 1}")

    def _record(self, locate, label):
        """Returns True when the marker was persisted. Failures are reported, never raised."""
        try:
            dataset = read_dataset(self.path)
            index = locate(dataset)
            if index is None:
                print(self.translator.get('progress.row_not_found', T_WARN=T.WARN, E_WARN=E.WARN, label=label, path=self.path))
                return False

            if self.dry_run:
                print(self.translator.get('progress.would_mark', T_WARN=T.WARN, E_WARN=E.WARN, label=label, column=self.marker_column, position=index + 1))
                return False

            column = dataset.resolve_column(self.marker_column)
            row = dataset.rows[index]
            while len(row) <= column:
                row.append("")
            row[column] = self.done_value

            write_dataset(dataset, self.path)
            print(self.translator.get('progress.marked', T_OK=T.OK, E_SUCCESS=E.SUCCESS, label=label, column=self.marker_column, value=self.done_value))
            return True
        except Exception as e:
            print(self.translator.get('progress.record_failed', T_FAIL=T.FAIL, E_FAIL=E.FAIL, label=label, e=e))
            return False
