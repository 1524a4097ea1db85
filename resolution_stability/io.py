import json
import os

import numpy as np
import pandas as pd

from resolution_stability.data import ResolutionData
from resolution_stability.errors import InputFormatError
from resolution_stability.genealogy import genealogy_to_records

SWEEP_COLUMN_PREFIX = "r_"


def parse_resolution_row(values, row_number=None):
    """
    Parse one row of `resolution, cluster_1, ..., cluster_n` values.

    Items are numbered by their column, starting at 1.
    """
    where = f" in row {row_number}" if row_number is not None else ""
    if len(values) == 0:
        raise InputFormatError(f"The first column must contain resolution data, but is empty{where}.")

    try:
        resolution = float(str(values[0]).strip())
    except ValueError as e:
        raise InputFormatError(f"Parsing the resolution {values[0]!r}{where} failed: {e}") from e

    labels = []
    for column, value in enumerate(values[1:], start=1):
        if value is None or (isinstance(value, float) and np.isnan(value)):
            raise InputFormatError(f"Missing cluster data for cell {column}{where}.")
        try:
            labels.append(int(str(value).strip()))
        except ValueError as e:
            raise InputFormatError(
                f"Parsing the cluster {value!r} of cell {column}{where} failed: {e}"
            ) from e

    if not labels:
        raise InputFormatError(f"No cell data present for resolution {resolution}.")

    ids = np.arange(1, len(labels) + 1)
    return ResolutionData.from_labels(resolution, ids, labels)


def load_resolution_csv(path):
    """
    Load clusterings from a comma separated file without header.

    Each row holds a resolution followed by the cluster id of every item.
    """
    try:
        df = pd.read_csv(path, header=None, dtype=str, skipinitialspace=True,
                         keep_default_na=False)
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as e:
        raise InputFormatError(f"Rows of {path} have different lengths: {e}") from e

    resolutions = []
    for row_number, row in enumerate(df.itertuples(index=False, name=None), start=1):
        # shorter rows are padded with empty fields by pandas
        values = [None if v == "" else v for v in row]
        resolutions.append(parse_resolution_row(values, row_number=row_number))
    return resolutions


def load_sweep_tsv(path):
    """
    Load clusterings from a sweep table with one `r_<resolution>` column per resolution.

    Items are numbered by row, starting at 1.
    """
    df = pd.read_csv(path, sep="\t")
    sweep_cols = [c for c in df.columns if str(c).startswith(SWEEP_COLUMN_PREFIX)]
    if not sweep_cols:
        raise InputFormatError(f"No '{SWEEP_COLUMN_PREFIX}<resolution>' columns found in {path}")

    ids = np.arange(1, len(df) + 1)
    resolutions = []
    for col in sweep_cols:
        try:
            resolution = float(col[len(SWEEP_COLUMN_PREFIX):])
        except ValueError as e:
            raise InputFormatError(f"Cannot parse resolution from column {col!r}") from e
        labels = df[col]
        if labels.isna().any():
            raise InputFormatError(f"Missing cluster data in column {col!r}")
        resolutions.append(ResolutionData.from_labels(resolution, ids, labels.astype(np.int64).to_numpy()))
    return resolutions


def load_input(path):
    ext = os.path.splitext(path)[1].lower()

    if ext == ".csv":
        return load_resolution_csv(path)
    elif ext in [".tsv", ".txt"]:
        return load_sweep_tsv(path)
    else:
        raise ValueError(f"Unsupported input format: {ext}")


def save_genealogy(entries, path):
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(genealogy_to_records(entries), handle)


def save_branch_summary(summary_df, path):
    summary_df.to_csv(path, sep="\t", index=False)
