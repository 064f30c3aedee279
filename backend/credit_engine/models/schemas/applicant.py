"""Pydantic schemas for applicant records."""

from typing import Dict, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    StrictBool,
    StrictInt,
    StrictStr,
    confloat,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

# Scalar record value; dates travel as ISO-8601 strings. Infinity and NaN are
# accepted by the JSON decoder but are not usable applicant values.
StrictFiniteFloat = confloat(strict=True, allow_inf_nan=False)
ApplicantValue = Union[StrictBool, StrictInt, StrictFiniteFloat, StrictStr]


class LegacyApplicantData(BaseModel):
    """
    Fixed applicant shape accepted by earlier clients.

    Every field is optional; the bounds apply only to fields that are present.
    """

    age: Optional[int] = Field(None, ge=18, le=100)
    annualIncome: Optional[float] = Field(None, ge=0)
    loanAmount: Optional[float] = Field(None, ge=0)
    creditHistoryLength: Optional[float] = Field(None, ge=0)
    debtToIncomeRatio: Optional[float] = Field(None, ge=0, le=1)
    employmentStatus: Optional[str] = None
    educationLevel: Optional[str] = None
    monthlyExpenses: Optional[float] = Field(None, ge=0)
    existingLoanAmount: Optional[float] = Field(None, ge=0)
    creditUtilization: Optional[float] = Field(None, ge=0, le=1)
    latePayments12m: Optional[int] = Field(None, ge=0)
    recentInquiries: Optional[int] = Field(None, ge=0)

    model_config = ConfigDict(extra="ignore")


LEGACY_FIELDS = frozenset(LegacyApplicantData.model_fields)


def validate_applicant_record(record: Dict[str, ApplicantValue]) -> Dict[str, ApplicantValue]:
    """
    Check a decoded record: non-empty, legacy fields within their bounds.

    Raises:
        ValueError: If the record is empty or a legacy field is out of bounds
    """
    if not record:
        raise ValueError("At least some applicant data is required")

    legacy = {key: value for key, value in record.items() if key in LEGACY_FIELDS}
    if legacy:
        try:
            LegacyApplicantData.model_validate(legacy)
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise ValueError(problems)
    return record


class ApplicantRecordRequest(RootModel[Dict[str, ApplicantValue]]):
    """Open applicant record: field name -> string, number or boolean."""

    @field_validator("root")
    @classmethod
    def check_record(cls, value: Dict[str, ApplicantValue]) -> Dict[str, ApplicantValue]:
        return validate_applicant_record(value)


class RuleExecutionRequest(BaseModel):
    """Body of a standalone rule engine run."""

    applicant_data: Dict[str, ApplicantValue]

    @field_validator("applicant_data")
    @classmethod
    def check_record(cls, value: Dict[str, ApplicantValue]) -> Dict[str, ApplicantValue]:
        return validate_applicant_record(value)
