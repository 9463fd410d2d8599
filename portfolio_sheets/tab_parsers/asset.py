"""Assets tab parser implementation."""

from collections.abc import Sequence

from portfolio_sheets.coercers import parse_date, parse_number
from portfolio_sheets.config import Asset
from portfolio_sheets.registry import TabRegistry
from portfolio_sheets.tab_parsers.base import RecordParser

DEFAULT_ASSET_NAME = "Unknown Asset"
DEFAULT_ASSET_TYPE = "Other"
DEFAULT_CURRENCY = "CAD"


@TabRegistry.register
class AssetParser(RecordParser):
    """Parse balances, property and other non-investment holdings."""

    id_prefix = "asset"

    @classmethod
    def name(cls) -> str:
        """Return parser name shown in app choices."""
        return "Assets"

    @classmethod
    def data_type(cls) -> str:
        """Return tab type key."""
        return "assets"

    def infer_type(self, name: str) -> str:
        """Infer category tag from keywords found in the asset name."""
        name_lower = name.lower()
        for keywords, asset_type in self.tables.asset_type_keywords:
            if any(keyword in name_lower for keyword in keywords):
                return asset_type
        return DEFAULT_ASSET_TYPE

    def parse_row(self, values: Sequence[str], row_index: int) -> Asset | None:
        """Parse one asset row, dropping rows with neither a name nor a value."""
        name = self.columns.cell(values, "name", DEFAULT_ASSET_NAME)
        value = parse_number(self.columns.cell(values, "value"))
        if name == DEFAULT_ASSET_NAME and value == 0:
            return None
        last_updated_raw = self.columns.cell(values, "last_updated")
        last_updated = (
            parse_date(last_updated_raw, self.default_year, self.tables.month_names)
            or last_updated_raw
            or None
        )
        return Asset(
            id=self.record_id(row_index),
            name=name,
            type=self.columns.cell(values, "type") or self.infer_type(name),
            value=value,
            currency=self.columns.cell(values, "currency", DEFAULT_CURRENCY).upper(),
            last_updated=last_updated,
            row_index=row_index,
        )
