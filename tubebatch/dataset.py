import io
import os
import csv
from urllib.parse import urlparse

import pandas as pd
import requests

from tubebatch.config import T, E


class DatasetError(Exception):
    """The durable store or the remote mirror could not be read or parsed."""


def find_column(header, name):
    """Returns the index of `name` in the header (case-insensitive, trimmed), or -1."""
    wanted = str(name).strip().lower()
    for index, cell in enumerate(header):
        if str(cell).strip().lower() == wanted:
            return index
    return -1

def resolve_column(header, name):
    """
    Returns the index of the `name` column, appending it to the header when absent.
    Existing columns are never moved; the header list is mutated in place.
    """
    index = find_column(header, name)
    if index == -1:
        header.append(name)
        index = len(header) - 1
    return index


class Row:
    """One data row, with its zero-based position among the data rows."""

    def __init__(self, position, header, values):
        self.position = position
        self.header = header
        self.values = values

    def get(self, name, default=""):
        index = find_column(self.header, name)
        if index == -1 or index >= len(self.values):
            return default
        value = self.values[index]
        return default if value is None or value == "" else value

    def unnamed_cells(self):
        """Non-empty cells sitting under a blank header or past the header's end."""
        return [
            value for index, value in enumerate(self.values)
            if value not in ("", None) and (index >= len(self.header) or not str(self.header[index]).strip())
        ]

    def as_dict(self):
        return {str(name): self.get(name) for name in self.header if str(name).strip()}

    def __repr__(self):
        return f"Row(position={self.position}, values={self.values!r})"


class Dataset:
    """A header row plus ordered data rows, kept as plain lists so cell order survives a rewrite."""

    def __init__(self, header, rows):
        self.header = header
        self.rows = rows

    def records(self):
        return [Row(position, self.header, values) for position, values in enumerate(self.rows)]

    def width(self):
        return max([len(self.header)] + [len(values) for values in self.rows])

    def resolve_column(self, name):
        """Like resolve_column, but a new column goes past the widest row, never over a trailing cell."""
        if find_column(self.header, name) == -1:
            self.header.extend([""] * (self.width() - len(self.header)))
        return resolve_column(self.header, name)

    def to_table(self):
        """Header plus rows, each padded with empty cells to a common width."""
        width = self.width()
        return [list(line) + [""] * (width - len(line)) for line in [self.header] + self.rows]

    def __len__(self):
        return len(self.rows)


def is_csv_source(source):
    path = urlparse(source).path if "://" in source else source
    return path.lower().endswith(".csv")

def _clean_cell(value):
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return value

def _table_to_dataset(table, source):
    if not table:
        raise DatasetError(f"Sheet is empty or unreadable: {source}")
    header = ["" if cell == "" else str(cell) for cell in table[0]]
    return Dataset(header, table[1:])

def _read_csv_table(data):
    """CSV lines as lists of strings; rows may be longer or shorter than the header and blank lines are kept."""
    if isinstance(data, bytes):
        return list(csv.reader(io.StringIO(data.decode('utf-8-sig'), newline='')))
    with open(data, 'r', encoding='utf-8-sig', newline='') as f:
        return list(csv.reader(f))

def _read_excel_table(data):
    if isinstance(data, bytes):
        data = io.BytesIO(data)
    # Cell text such as "NA" or "None" is data, not a missing value
    frame = pd.read_excel(data, header=None, dtype=object, keep_default_na=False, na_filter=False)
    return [[_clean_cell(value) for value in line] for line in frame.values.tolist()]

def parse_dataset(data, as_csv=False, source="<memory>"):
    """Parses spreadsheet bytes or a file path; only the first sheet is read."""
    try:
        table = _read_csv_table(data) if as_csv else _read_excel_table(data)
    except Exception as e:
        raise DatasetError(f"Could not parse {source}: {e}") from e
    return _table_to_dataset(table, source)

def read_dataset(path):
    if not os.path.exists(path):
        raise DatasetError(f"Dataset file not found at '{path}'")
    return parse_dataset(path, as_csv=is_csv_source(path), source=path)

def write_dataset(dataset, path):
    """Overwrites the durable store with the whole dataset."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    frame = pd.DataFrame(dataset.to_table())
    if is_csv_source(path):
        frame.to_csv(path, header=False, index=False, encoding='utf-8')
    else:
        frame.to_excel(path, header=False, index=False)

def fetch_remote_dataset(url, translator):
    print(translator.get('dataset.fetching_remote', T_INFO=T.INFO, E_DOWNLOAD=E.DOWNLOAD, url=url))
    try:
        response = requests.get(url)
        response.raise_for_status()
    except requests.RequestException as e:
        raise DatasetError(f"Could not download dataset from {url}: {e}") from e
    return parse_dataset(response.content, as_csv=is_csv_source(url), source=url)

def load_or_fetch_dataset(config, translator):
    """
    Reads the durable copy, or fetches the remote mirror and persists it as the
    durable copy when no local file exists yet.
    """
    if os.path.exists(config.dataset_path):
        print(translator.get('dataset.reading_local', T_INFO=T.INFO, E_FILE=E.FILE, path=config.dataset_path))
        dataset = read_dataset(config.dataset_path)
    elif config.remote_url:
        dataset = fetch_remote_dataset(config.remote_url, translator)
        write_dataset(dataset, config.dataset_path)
        print(translator.get('dataset.saved_local_copy', T_OK=T.OK, E_SUCCESS=E.SUCCESS, path=config.dataset_path))
    else:
        raise DatasetError(f"Dataset file not found at '{config.dataset_path}' and no remote_url is configured")

    print(translator.get('dataset.loaded', T_OK=T.OK, E_SUCCESS=E.SUCCESS, rows=len(dataset), columns=len(dataset.header)))
    return dataset
