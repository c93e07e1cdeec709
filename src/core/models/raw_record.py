"""
RawRecord model representing one normalized input row (ephemeral).
"""

from pydantic import BaseModel, Field


class RawRecord(BaseModel):
    """
    One data row of an uploaded file, keyed by canonical column name.

    Note: RawRecord is immutable and only lives until it has been classified.

    Attributes:
        row_number: Spreadsheet-style row number (first data row is 2)
        values: Canonical column name -> raw string value, in file column order
    """

    row_number: int = Field(..., ge=2)
    values: dict[str, str] = Field(default_factory=dict)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "row_number": 2,
                "values": {
                    "npi": "1234567890",
                    "first_name": "Asha",
                    "last_name": "Raman",
                    "email": "asha.raman@example.com",
                    "phone": "+91-98765-43210",
                    "specialty": "Cardiology",
                    "license_state": "KA",
                },
            }
        }

    def get(self, field: str) -> str:
        """Return the raw value for a column, or an empty string when absent."""
        value = self.values.get(field)
        return value if value is not None else ""

    def has_column(self, field: str) -> bool:
        return field in self.values

    def first_present(self, *fields: str) -> str:
        """Return the first non-blank value among the given columns."""
        for field in fields:
            value = self.get(field)
            if value.strip():
                return value
        return ""
