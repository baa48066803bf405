import re
from typing import Optional

from pydantic import BaseModel, field_validator

IFSC_REGEX = re.compile(r"^[A-Z]{4}0[A-Z0-9]{6}$")
PAN_REGEX = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")
UPI_REGEX = re.compile(r"^[a-zA-Z0-9._-]+@[a-zA-Z0-9.-]+$")


def _strip_spaces(v: str) -> str:
    return re.sub(r"\s", "", v)


class BankDetailsRequest(BaseModel):
    account_holder_name: str
    bank_name: str
    account_number: str
    ifsc_code: str
    branch_name: Optional[str] = None
    account_type: str = "Savings"
    pan_number: Optional[str] = None
    upi_id: Optional[str] = None
    micr_code: Optional[str] = None

    @field_validator("account_holder_name", "bank_name")
    @classmethod
    def required_text(cls, v: str, info):
        if not v.strip():
            label = info.field_name.replace("_", " ").capitalize()
            raise ValueError(f"{label} is required")
        return v.strip()

    @field_validator("branch_name")
    @classmethod
    def optional_text(cls, v: Optional[str]):
        if v is None:
            return None
        return v.strip() or None

    @field_validator("account_number")
    @classmethod
    def validate_account_number(cls, v: str):
        number = _strip_spaces(v)
        if not number:
            raise ValueError("Account number is required")
        if len(number) < 9 or len(number) > 18:
            raise ValueError("Account number must be between 9 and 18 digits")
        if not number.isdigit():
            raise ValueError("Account number must contain only digits")
        return number

    @field_validator("ifsc_code")
    @classmethod
    def validate_ifsc(cls, v: str):
        code = _strip_spaces(v).upper()
        if not code:
            raise ValueError("IFSC code is required")
        if not IFSC_REGEX.fullmatch(code):
            raise ValueError("Invalid IFSC code format (e.g., SBIN0000123)")
        return code

    @field_validator("pan_number")
    @classmethod
    def validate_pan(cls, v: Optional[str]):
        if not v:
            return None
        pan = _strip_spaces(v).upper()
        if not PAN_REGEX.fullmatch(pan):
            raise ValueError("Invalid PAN number format (e.g., ABCDE1234F)")
        return pan

    @field_validator("upi_id")
    @classmethod
    def validate_upi(cls, v: Optional[str]):
        if not v:
            return None
        upi = v.strip().lower()
        if not UPI_REGEX.fullmatch(upi):
            raise ValueError("Invalid UPI ID format (e.g., user@paytm)")
        return upi

    @field_validator("micr_code")
    @classmethod
    def normalise_micr(cls, v: Optional[str]):
        if not v:
            return None
        return _strip_spaces(v)
