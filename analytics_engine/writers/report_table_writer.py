"""Report table writer for turning report payloads into DataFrames.

A report payload maps section names to either a list of rows (one dict per
period, member or project) or a single dict of figures. This module turns
every section into a pandas DataFrame with stable columns, ready to print
or export as CSV.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

import pandas as pd

logger = logging.getLogger(__name__)

# Columns moved to the front of a section table when present
LEADING_COLUMNS = ["period", "period_key", "member_id", "project_id", "name"]


@dataclass
class ReportTables:
    """Container for the tables of one report.

    Attributes:
        report_type: Report family the tables belong to
        sections: DataFrame per payload section, in payload order
    """

    report_type: str
    sections: Dict[str, pd.DataFrame] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.sections)


class ReportTableWriter:
    """Convert report payloads into DataFrames and CSV files.

    Example:
        >>> writer = ReportTableWriter()
        >>> tables = writer.generate("team", payload)
        >>> list(tables.sections)
        ['utilization', 'profitability', 'time_mix']
        >>> tables.sections["utilization"].columns[0]
        'member_id'
    """

    def generate(self, report_type: str, payload: Mapping[str, Any]) -> ReportTables:
        """Build one DataFrame per payload section.

        Scalar sections (such as the staffing forecast) become a one-row
        table with a ``value`` column. Nested mappings become dotted
        columns such as ``hours_by_phase.Design``.

        Args:
            report_type: Report family name
            payload: JSON-ready report payload

        Returns:
            ReportTables with a DataFrame per section
        """
        tables = ReportTables(report_type=report_type)
        for name, section in payload.items():
            tables.sections[name] = self.section_frame(section)
        logger.debug(f"Built {len(tables)} table(s) for {report_type} report")
        return tables

    def section_frame(self, section: Any) -> pd.DataFrame:
        """Build the DataFrame of one payload section.

        Args:
            section: List of row dicts, a single dict, or a scalar

        Returns:
            DataFrame with leading identifier columns first
        """
        if isinstance(section, list):
            if not section:
                return pd.DataFrame()
            df = pd.json_normalize(section)
        elif isinstance(section, dict):
            df = pd.json_normalize([section])
        else:
            df = pd.DataFrame([{"value": section}])

        leading = [column for column in LEADING_COLUMNS if column in df.columns]
        rest = [column for column in df.columns if column not in leading]
        return df[leading + rest]

    def write_csv(
        self, tables: ReportTables, output_dir: Union[str, Path]
    ) -> List[Path]:
        """Write every non-empty section as ``<report>_<section>.csv``.

        Args:
            tables: Tables to write
            output_dir: Target directory, created when missing

        Returns:
            Paths of the written files
        """
        directory = Path(output_dir)
        directory.mkdir(parents=True, exist_ok=True)

        written: List[Path] = []
        for name, df in tables.sections.items():
            if df.empty:
                logger.debug(f"Skipping empty section {name}")
                continue
            path = directory / f"{tables.report_type}_{name}.csv"
            df.to_csv(path, index=False)
            written.append(path)

        logger.info(f"Wrote {len(written)} CSV file(s) to {directory}")
        return written
