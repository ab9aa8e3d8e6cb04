"""
Tabular export of inferred protein groups.
"""

from pathlib import Path
from typing import List, Union

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from fidoadapter.core.model import IdentificationRun
from fidoadapter.utils.logger import get_logger

logger = get_logger(__name__)

GROUP_SCHEMA = pa.schema(
    [
        pa.field("run", pa.string()),
        pa.field("probability", pa.float64()),
        pa.field("accessions", pa.string()),
        pa.field("size", pa.int64()),
    ]
)


def groups_to_dataframe(runs: List[IdentificationRun]) -> pd.DataFrame:
    """One row per protein group, accessions joined by ';'."""
    records = [
        {
            "run": run.identifier,
            "probability": group.probability,
            "accessions": ";".join(group.accessions),
            "size": len(group.accessions),
        }
        for run in runs
        for group in run.protein_groups
    ]
    df = pd.DataFrame(records, columns=GROUP_SCHEMA.names)
    return df.astype({"probability": "float64", "size": "int64"})


def write_groups(runs: List[IdentificationRun], output_path: Union[Path, str]) -> None:
    """
    Write protein groups as a Parquet file, or tab-separated text for other extensions.

    :param runs: runs with inferred protein groups
    :param output_path: ``.parquet`` or e.g. ``.tsv`` path
    """
    df = groups_to_dataframe(runs)
    output_path = Path(output_path)
    if output_path.suffix.lower() == ".parquet":
        table = pa.Table.from_pandas(df, schema=GROUP_SCHEMA, preserve_index=False)
        pq.write_table(table, str(output_path))
    else:
        df.to_csv(output_path, sep="\t", index=False)
    logger.info(f"Wrote {len(df)} protein groups to {output_path}")
