from botocore.exceptions import ClientError
import logging
from datetime import datetime
from typing import Optional
from common.schemas.banking import BankDetailsRequest
from common.utils.datetime_normaliser import to_iso_string
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
else:
    Table = object


logger = logging.getLogger(__name__)

BANK_DETAIL_FIELDS = (
    "account_holder_name",
    "bank_name",
    "branch_name",
    "account_number",
    "ifsc_code",
    "account_type",
    "pan_number",
    "upi_id",
    "micr_code",
)


class BankDetailsRepository:
    def __init__(self, table: Table):
        self.table = table

    def save(self, owner_id: str, details: BankDetailsRequest, updated_at: datetime) -> dict:
        # one payout record per owner, later saves replace it
        item = {
            "pk": f"OWNER#{owner_id}",
            "sk": "BANK_DETAILS",
            "owner_id": owner_id,
            **details.model_dump(),
            "updated_at": to_iso_string(updated_at),
        }
        try:
            self.table.put_item(Item=item)
        except ClientError as err:
            logger.error(f"Error saving bank details for owner {owner_id}: {err}")
            raise
        return self._to_details(item)

    def get(self, owner_id: str) -> Optional[dict]:
        try:
            response = self.table.get_item(
                Key={"pk": f"OWNER#{owner_id}", "sk": "BANK_DETAILS"}
            )
        except ClientError as err:
            logger.error(f"Error retrieving bank details for owner {owner_id}: {err}")
            raise

        item = response.get("Item")
        if not item:
            return None
        return self._to_details(item)

    @staticmethod
    def _to_details(item: dict) -> dict:
        details = {field: item.get(field) for field in BANK_DETAIL_FIELDS}
        details["owner_id"] = item.get("owner_id")
        details["updated_at"] = item.get("updated_at")
        return details
